"""Render results — the single outcome record produced per route."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from snapcat.routes.registry import Route


class Outcome(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Outcome of rendering one route.

    ``html`` holds the complete captured document if and only if the
    outcome is ``SUCCESS``; ``error_detail`` is set otherwise.  Build
    instances through :meth:`success`, :meth:`skipped` and :meth:`failed`.

    Attributes:
        route: The rendered route.
        outcome: Success, skipped (timeout) or failed (any other error).
        html: Post-render document markup.
        error_detail: Human-readable reason for a skip or failure.
        duration_ms: Wall-clock time spent on the route.

    """

    route: Route
    outcome: Outcome
    html: str | None = None
    error_detail: str | None = None
    duration_ms: float = 0.0

    def __post_init__(self) -> None:
        if (self.outcome is Outcome.SUCCESS) != (self.html is not None):
            msg = "html must be set exactly when the outcome is SUCCESS"
            raise ValueError(msg)

    @classmethod
    def success(cls, route: Route, html: str, *, duration_ms: float = 0.0) -> RenderResult:
        return cls(route, Outcome.SUCCESS, html=html, duration_ms=duration_ms)

    @classmethod
    def skipped(cls, route: Route, reason: str, *, duration_ms: float = 0.0) -> RenderResult:
        return cls(route, Outcome.SKIPPED, error_detail=reason, duration_ms=duration_ms)

    @classmethod
    def failed(cls, route: Route, detail: str, *, duration_ms: float = 0.0) -> RenderResult:
        return cls(route, Outcome.FAILED, error_detail=detail, duration_ms=duration_ms)
