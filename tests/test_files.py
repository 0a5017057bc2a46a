"""Tests for snapcat.serve.files — request path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from snapcat.serve.files import (
    DEFAULT_CONTENT_TYPE,
    content_type_for,
    resolve_request,
    sanitize_path,
)


class TestSanitizePath:
    """sanitize_path — never lets a request climb out of the root."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/", "/"),
            ("/main.js", "/main.js"),
            ("/blog/a?x=1#top", "/blog/a"),
            ("/assets//./logo.svg", "/assets/logo.svg"),
            ("/../../etc/passwd", "/"),
            ("/blog/../../secret", "/"),
            ("/%2e%2e/secret", "/"),
            ("/..%5csecret", "/"),
            ("/a%00b", "/"),
        ],
    )
    def test_sanitize(self, raw: str, expected: str) -> None:
        assert sanitize_path(raw) == expected


class TestResolveRequest:
    """resolve_request — file, directory index, SPA fallback or nothing."""

    def test_existing_file(self, tmp_dist: Path) -> None:
        resolved = resolve_request(tmp_dist, "/main.js")
        assert resolved is not None
        assert resolved.path == (tmp_dist / "main.js").resolve()
        assert resolved.content_type.startswith("text/javascript")
        assert resolved.fallback is False

    def test_root_serves_index(self, tmp_dist: Path) -> None:
        resolved = resolve_request(tmp_dist, "/")
        assert resolved is not None
        assert resolved.path.name == "index.html"
        assert resolved.fallback is False

    def test_directory_with_index(self, tmp_dist: Path) -> None:
        about = tmp_dist / "about"
        about.mkdir()
        (about / "index.html").write_text("<p>about</p>")
        resolved = resolve_request(tmp_dist, "/about/")
        assert resolved is not None
        assert resolved.path == (about / "index.html").resolve()

    def test_unknown_route_falls_back_to_shell(self, tmp_dist: Path) -> None:
        resolved = resolve_request(tmp_dist, "/blog/hello-world")
        assert resolved is not None
        assert resolved.fallback is True
        assert resolved.path == tmp_dist.resolve() / "index.html"
        assert resolved.content_type.startswith("text/html")

    def test_traversal_gets_shell_not_secret(self, tmp_path: Path) -> None:
        (tmp_path / "secret.txt").write_text("top secret")
        dist = tmp_path / "dist"
        dist.mkdir()
        (dist / "index.html").write_text("<html></html>")
        resolved = resolve_request(dist, "/../secret.txt")
        assert resolved is not None
        assert resolved.path == dist.resolve() / "index.html"

    def test_symlink_out_of_root_not_followed(self, tmp_path: Path) -> None:
        (tmp_path / "secret.txt").write_text("top secret")
        dist = tmp_path / "dist"
        dist.mkdir()
        (dist / "index.html").write_text("<html></html>")
        (dist / "leak.txt").symlink_to(tmp_path / "secret.txt")
        resolved = resolve_request(dist, "/leak.txt")
        assert resolved is not None
        assert resolved.fallback is True

    def test_nothing_to_serve(self, tmp_path: Path) -> None:
        assert resolve_request(tmp_path, "/missing") is None


class TestContentTypes:
    """content_type_for — extension mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("index.html", "text/html; charset=utf-8"),
            ("styles.CSS", "text/css; charset=utf-8"),
            ("list.json", "application/json"),
            ("logo.svg", "image/svg+xml"),
            ("font.woff2", "font/woff2"),
            ("app.wasm", "application/wasm"),
            ("blob.bin", DEFAULT_CONTENT_TYPE),
        ],
    )
    def test_content_type(self, name: str, expected: str) -> None:
        assert content_type_for(name) == expected
