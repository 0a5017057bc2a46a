"""Route registry — derive the ordered set of routes to snapshot."""

from snapcat.routes.registry import (
    Route,
    RouteKind,
    load_manifest,
    normalize_path,
    resolve_routes,
    structural_routes,
)

__all__ = [
    "Route",
    "RouteKind",
    "load_manifest",
    "normalize_path",
    "resolve_routes",
    "structural_routes",
]
