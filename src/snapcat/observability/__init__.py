"""Run observability — structured events for a snapshot run.

Quick Start:
    >>> from snapcat.observability import EventLog, RunCollector
    >>> collector = RunCollector(EventLog())
    >>> # Pass to Orchestrator(config, collector=collector)
    >>> collector.log.stats()["by_outcome"]

"""

from snapcat.observability.collector import RunCollector
from snapcat.observability.events import (
    FileWritten,
    RouteRendered,
    RunEvent,
    StageChanged,
    now_ns,
)
from snapcat.observability.log import EventLog

__all__ = [
    "EventLog",
    "FileWritten",
    "RouteRendered",
    "RunCollector",
    "RunEvent",
    "StageChanged",
    "now_ns",
]
