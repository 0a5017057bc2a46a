"""Shared type definitions for snapcat."""

from typing import Any, Literal

# Root-relative URL path (e.g., "/", "/blog/hello-world")
type RoutePath = str

# Absolute base URL of the content server (e.g., "http://127.0.0.1:4200")
type BaseURL = str

# One opaque content entry from the manifest
type ManifestEntry = dict[str, Any]

# Which side of a timeout fired
type TimeoutStage = Literal["navigation", "readiness"]
