"""Rendering — headless-browser capture of client-rendered routes."""

from snapcat.render.engine import RenderEngine
from snapcat.render.readiness import (
    DEFAULT_PREDICATES,
    ReadinessPredicate,
    ReadinessRegistry,
)
from snapcat.render.result import Outcome, RenderResult

__all__ = [
    "DEFAULT_PREDICATES",
    "Outcome",
    "ReadinessPredicate",
    "ReadinessRegistry",
    "RenderEngine",
    "RenderResult",
]
