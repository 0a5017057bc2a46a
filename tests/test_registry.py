"""Tests for snapcat.routes.registry — route derivation and manifest loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from snapcat._errors import ManifestError
from snapcat.routes import Route, RouteKind
from snapcat.routes.registry import (
    load_manifest,
    normalize_path,
    resolve_routes,
    safe_identifier,
    structural_routes,
)

from .conftest import write_manifest


class TestNormalizePath:
    """normalize_path — one canonical form per URL path."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", "/"),
            ("/", "/"),
            ("about", "/about"),
            ("/about/", "/about"),
            ("/blog//a", "/blog/a"),
            ("  /contact  ", "/contact"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_path(raw) == expected


class TestStructuralRoutes:
    """Listing first, then static pages."""

    def test_listing_only(self) -> None:
        assert structural_routes() == (Route("/", RouteKind.LISTING),)

    def test_static_pages_follow_listing(self) -> None:
        routes = structural_routes(["about", "/contact/"])
        assert routes == (
            Route("/", RouteKind.LISTING),
            Route("/about", RouteKind.STATIC),
            Route("/contact", RouteKind.STATIC),
        )


class TestResolveRoutes:
    """resolve_routes — ordered, de-duplicated crawl list."""

    def test_structural_then_manifest_order(self) -> None:
        manifest = [{"slug": "a"}, {"slug": "b"}]
        routes = resolve_routes(manifest, structural_routes())
        assert [r.path for r in routes] == ["/", "/blog/a", "/blog/b"]
        assert routes[0].kind is RouteKind.LISTING
        assert all(r.kind is RouteKind.DETAIL for r in routes[1:])

    def test_empty_manifest(self) -> None:
        assert resolve_routes([], structural_routes()) == (Route("/", RouteKind.LISTING),)

    def test_missing_manifest(self) -> None:
        assert resolve_routes(None, structural_routes()) == (Route("/", RouteKind.LISTING),)

    def test_entries_without_identifier_skipped(self) -> None:
        manifest = [{"title": "x"}, {"slug": ""}, {"slug": "  "}, {"slug": 7}, {"slug": "ok"}]
        routes = resolve_routes(manifest, structural_routes())
        assert [r.path for r in routes] == ["/", "/blog/ok"]

    def test_duplicates_collapse_first_wins(self) -> None:
        manifest = [{"slug": "a"}, {"slug": "b"}, {"slug": "a"}]
        routes = resolve_routes(manifest, structural_routes())
        assert [r.path for r in routes] == ["/", "/blog/a", "/blog/b"]

    def test_structural_wins_over_detail(self) -> None:
        structural = structural_routes(["/blog/about"])
        routes = resolve_routes([{"slug": "about"}], structural)
        assert routes[-1] == Route("/blog/about", RouteKind.STATIC)
        assert len(routes) == 2

    def test_custom_identifier_and_prefix(self) -> None:
        manifest = [{"id": "intro", "slug": "ignored"}]
        routes = resolve_routes(
            manifest, structural_routes(), identifier_field="id", detail_prefix="/docs",
        )
        assert routes[-1].path == "/docs/intro"

    def test_deterministic(self) -> None:
        manifest = [{"slug": s} for s in ("c", "a", "b")]
        first = resolve_routes(manifest, structural_routes(["/about"]))
        second = resolve_routes(manifest, structural_routes(["/about"]))
        assert first == second

    def test_parent_segments_cannot_escape_prefix(self) -> None:
        manifest = [{"slug": "../../../pwned"}, {"slug": "ok"}]
        routes = resolve_routes(manifest, structural_routes())
        assert [r.path for r in routes] == ["/", "/blog/ok"]

    def test_dot_segments_do_not_alias_other_entries(self) -> None:
        manifest = [{"slug": "a/../b"}, {"slug": "b"}, {"slug": "./b"}]
        routes = resolve_routes(manifest, structural_routes())
        assert [r.path for r in routes] == ["/", "/blog/b"]

    def test_nested_identifiers_allowed(self) -> None:
        routes = resolve_routes([{"slug": "2024/launch"}], structural_routes())
        assert routes[-1].path == "/blog/2024/launch"


class TestSafeIdentifier:
    """safe_identifier — identifiers that can be joined onto the prefix."""

    @pytest.mark.parametrize(
        "identifier",
        ["..", "../x", "a/..", "a\\..\\b", ".", "a?b=1", "post#top", "nul\x00"],
    )
    def test_rejected(self, identifier: str) -> None:
        assert safe_identifier(identifier) is None

    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [("hello-world", "hello-world"), (" padded ", "padded"), ("v1.2", "v1.2")],
    )
    def test_accepted(self, identifier: str, expected: str) -> None:
        assert safe_identifier(identifier) == expected


class TestLoadManifest:
    """load_manifest — tolerant of absence, strict about shape."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_manifest(tmp_path / "nope.json") == []

    def test_reads_entries(self, tmp_path: Path) -> None:
        path = write_manifest(tmp_path / "list.json", [{"slug": "a", "tags": ["x"]}])
        assert load_manifest(path) == [{"slug": "a", "tags": ["x"]}]

    def test_non_object_entries_dropped(self, tmp_path: Path) -> None:
        path = write_manifest(tmp_path / "list.json", [{"slug": "a"}, "b", 3, None])
        assert load_manifest(path) == [{"slug": "a"}]

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("{not json")
        with pytest.raises(ManifestError, match="Cannot read manifest"):
            load_manifest(path)

    def test_not_an_array(self, tmp_path: Path) -> None:
        path = write_manifest(tmp_path / "list.json", {"slug": "a"})
        with pytest.raises(ManifestError, match="JSON array"):
            load_manifest(path)
