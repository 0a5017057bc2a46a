"""Snapcat error hierarchy.

All snapcat-specific errors inherit from SnapcatError for easy catching.
Fatal errors abort the whole run; per-route errors are caught at the
route boundary and recorded as skipped or failed.
"""

from snapcat._types import RoutePath, TimeoutStage


class SnapcatError(Exception):
    """Base error for all snapcat operations."""


class ConfigError(SnapcatError):
    """Invalid or missing configuration."""


class ManifestError(SnapcatError):
    """The content manifest could not be read or is malformed."""


class BundleError(SnapcatError):
    """The pre-built application bundle is missing or incomplete."""


class ServerError(SnapcatError):
    """The content server could not bind its port or start serving."""


class BrowserError(SnapcatError):
    """The headless browser could not be launched."""


class RenderTimeoutError(SnapcatError):
    """A navigation or readiness wait exceeded its bound.

    Attributes:
        stage: ``"navigation"`` or ``"readiness"``.
        route_path: The route that timed out.
        timeout: The bound that elapsed, in seconds.

    """

    def __init__(
        self, stage: TimeoutStage, route_path: RoutePath, timeout: float,
    ) -> None:
        self.stage = stage
        self.route_path = route_path
        self.timeout = timeout
        super().__init__(f"{stage} timed out after {timeout:g}s for {route_path}")


class OutputError(SnapcatError):
    """A snapshot could not be written to the output tree."""
