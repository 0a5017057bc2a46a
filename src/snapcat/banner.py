"""Terminal output — startup banner, per-route status lines, run summary.

Everything goes to stderr.  Detects ``NO_COLOR`` / ``TERM`` for safe
fallback to plain text.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snapcat.config import SnapConfig
    from snapcat.export.writer import WrittenFile
    from snapcat.orchestrator import RunSummary
    from snapcat.render.result import RenderResult


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""

_OUTCOME_MARKS: dict[str, tuple[str, str]] = {
    "success": (_GREEN, "✓"),
    "skipped": (_YELLOW, "!"),
    "failed": (_RED, "✗"),
}


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(config: SnapConfig, route_count: int, *, load_ms: float = 0.0) -> None:
    """Print the snapcat startup banner to stderr.

    Args:
        config: Resolved SnapConfig.
        route_count: Number of routes planned for the run.
        load_ms: Time spent loading config and manifest in milliseconds.

    """
    from snapcat import __version__

    lens = "[◉]"
    header = f"  {_ORANGE}{_BOLD}{lens}{_RESET}  snapcat {_DIM}v{__version__}{_RESET}"

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    if config.serve_command:
        transport = f"command {_DIM}{config.serve_command}{_RESET}"
    else:
        transport = f"static {_DIM}{config.dist_path}{_RESET}"

    lines = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} {_plural(route_count, 'route')} planned{timing}",
        f"  {_DIM}├─{_RESET} serving: {transport}",
        f"  {_DIM}├─{_RESET} timeouts: navigation {config.navigation_timeout:g}s, "
        f"readiness {config.readiness_timeout:g}s",
        f"  {_DIM}└─{_RESET} output: {_DIM}{config.output_path}{_RESET}",
        "",
    ]
    print("\n".join(lines), file=sys.stderr)


def print_route_result(result: RenderResult, written: WrittenFile | None = None) -> None:
    """Print one status line for a finished route."""
    outcome = result.outcome.value
    color, mark = _OUTCOME_MARKS[outcome]
    timing = f" {_DIM}({result.duration_ms:.0f}ms){_RESET}"
    if written is not None:
        detail = f"-> {_DIM}{written.output_path}{_RESET}"
    else:
        detail = f"{_DIM}{outcome}:{_RESET} {result.error_detail}"
    print(f"  {color}{mark}{_RESET} {result.route.path} {detail}{timing}", file=sys.stderr)


def print_summary(summary: RunSummary) -> None:
    """Print the end-of-run summary to stderr."""
    lines = ["", "─" * 41]
    if summary.fatal_error:
        lines.append(f"  {_RED}Fatal:{_RESET} {summary.fatal_error}")
    else:
        lines.append(f"  Saved {_plural(summary.rendered, 'snapshot')}")
        if summary.skipped:
            lines.append(f"  {_YELLOW}Skipped {summary.skipped}{_RESET}")
        if summary.failed:
            lines.append(f"  {_RED}Failed {summary.failed}{_RESET}")
    lines.append(f"  Done in {summary.duration_ms:.0f}ms")
    print("\n".join(lines), file=sys.stderr)
