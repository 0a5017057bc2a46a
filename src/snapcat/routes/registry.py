"""Route registry — manifest + structural pages -> ordered routes.

Structural routes (the listing page, then any static pages) always come
first, followed by one detail route per manifest entry in manifest order.
Given an unchanged manifest the crawl order is identical across runs.

Only the identifier field of each manifest entry is consumed.  All other
fields are opaque and forwarded to no one.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from snapcat._errors import ManifestError
from snapcat._types import ManifestEntry, RoutePath

_SLASHES = re.compile(r"/{2,}")
_UNSAFE_CHARS = frozenset("?#\x00")

logger = logging.getLogger("snapcat.routes")


class RouteKind(Enum):
    """Selects which readiness predicate a route is checked against."""

    LISTING = "listing"
    DETAIL = "detail"
    STATIC = "static"


@dataclass(frozen=True, slots=True)
class Route:
    """A single page to snapshot.

    Attributes:
        path: Root-relative URL path, always starting with ``/``.
        kind: Route category, used to pick the readiness predicate.

    """

    path: RoutePath
    kind: RouteKind


def normalize_path(path: str) -> RoutePath:
    """Normalise a URL path: leading slash, no duplicate or trailing slashes.

    ``"blog//a/"`` -> ``"/blog/a"``; ``""`` -> ``"/"``.
    """
    clean = _SLASHES.sub("/", "/" + path.strip())
    if clean != "/":
        clean = clean.rstrip("/")
    return clean or "/"


def safe_identifier(identifier: str) -> str | None:
    """Return the stripped *identifier*, or ``None`` if it cannot name a route.

    Dot segments would climb out of the detail prefix (and the output tree)
    once joined, and query or fragment markers would never reach the server
    as part of the path.
    """
    clean = identifier.strip()
    if not clean or _UNSAFE_CHARS.intersection(clean):
        return None
    if any(seg in (".", "..") for seg in clean.replace("\\", "/").split("/")):
        return None
    return clean


def structural_routes(static_paths: Iterable[str] = ()) -> tuple[Route, ...]:
    """Return the listing route followed by the configured static pages."""
    routes = [Route("/", RouteKind.LISTING)]
    routes.extend(Route(normalize_path(p), RouteKind.STATIC) for p in static_paths)
    return tuple(routes)


def resolve_routes(
    manifest: Sequence[Mapping[str, Any]] | None,
    structural: Sequence[Route],
    *,
    identifier_field: str = "slug",
    detail_prefix: str = "/blog/",
) -> tuple[Route, ...]:
    """Derive the ordered, de-duplicated route list for one run.

    Args:
        manifest: Content entries (may be ``None`` or empty).
        structural: Routes that precede all content routes.
        identifier_field: Entry field holding the route identifier.
        detail_prefix: URL prefix joined with each identifier.

    Returns:
        Structural routes, then detail routes in manifest order.  When two
        routes share a path, the first one wins.

    """
    ordered: list[Route] = list(structural)
    for entry in manifest or ():
        identifier = entry.get(identifier_field)
        if not isinstance(identifier, str) or not identifier.strip():
            continue
        clean = safe_identifier(identifier)
        if clean is None:
            logger.warning(
                "Skipping manifest entry with unsafe %s %r", identifier_field, identifier,
            )
            continue
        path = normalize_path(f"{detail_prefix}/{clean}")
        ordered.append(Route(path, RouteKind.DETAIL))

    seen: set[RoutePath] = set()
    unique: list[Route] = []
    for route in ordered:
        if route.path in seen:
            continue
        seen.add(route.path)
        unique.append(route)
    return tuple(unique)


def load_manifest(path: Path) -> list[ManifestEntry]:
    """Read the content manifest once.

    A missing file is not an error: the run renders structural routes only.

    Raises:
        ManifestError: If the file is not valid JSON or not a JSON array.

    """
    if not path.is_file():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"Cannot read manifest {path}: {exc}"
        raise ManifestError(msg) from exc
    if not isinstance(data, list):
        msg = f"Manifest {path} must be a JSON array, got {type(data).__name__}"
        raise ManifestError(msg)
    return [entry for entry in data if isinstance(entry, dict)]
