"""Run collector — the single recording surface for a snapshot run.

The orchestrator records stage transitions, per-route outcomes and
written files through this object; tests and the CLI read them back from
the underlying :class:`EventLog`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from snapcat.observability.events import FileWritten, RouteRendered, StageChanged, now_ns
from snapcat.observability.log import EventLog

if TYPE_CHECKING:
    from snapcat.export.writer import WrittenFile
    from snapcat.render.result import RenderResult


class RunCollector:
    """Records run events into an :class:`EventLog`.

    Args:
        log: The EventLog to store events in (a fresh one by default).

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_stage(self, stage: str, previous: str) -> None:
        self._log.append(StageChanged(stage=stage, previous=previous, timestamp_ns=now_ns()))

    def record_render(self, result: RenderResult) -> None:
        self._log.append(
            RouteRendered(
                path=result.route.path,
                kind=result.route.kind.value,
                outcome=result.outcome.value,
                detail=result.error_detail or "",
                duration_ms=result.duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_write(self, written: WrittenFile) -> None:
        self._log.append(
            FileWritten(
                path=written.route_path,
                target=str(written.output_path),
                size_bytes=written.size_bytes,
                timestamp_ns=now_ns(),
            )
        )

    def stages(self) -> list[str]:
        """Stage names entered so far, in order."""
        events = self._log.query(event_type=StageChanged, limit=len(self._log))
        return [e.stage for e in reversed(events)]  # type: ignore[union-attr]
