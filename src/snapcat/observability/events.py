"""Run event model for snapshot observability.

Every event is a frozen dataclass carrying a monotonic nanosecond
timestamp and is safe to share across threads.
"""

import time
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class StageChanged:
    """The orchestrator moved to a new lifecycle stage.

    Attributes:
        stage: Name of the stage entered (e.g. ``"rendering"``).
        previous: Name of the stage left.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    stage: str
    previous: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteRendered:
    """One route finished rendering.

    Attributes:
        path: Route URL path.
        kind: Route kind value (``"listing"``, ``"detail"``, ``"static"``).
        outcome: ``"success"``, ``"skipped"`` or ``"failed"``.
        detail: Skip/failure reason, empty on success.
        duration_ms: Time spent rendering the route.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    kind: str
    outcome: Literal["success", "skipped", "failed"]
    detail: str
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class FileWritten:
    """A snapshot (or the sitemap) was written.

    Attributes:
        path: Route URL path, or ``"/sitemap.xml"``.
        target: Absolute output file path.
        size_bytes: Bytes written.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    target: str
    size_bytes: int
    timestamp_ns: int


type RunEvent = StageChanged | RouteRendered | FileWritten


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
