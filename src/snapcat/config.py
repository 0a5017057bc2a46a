"""Snapcat configuration.

SnapConfig is the central configuration object, frozen after creation.
It is built once at startup and passed down explicitly; inner components
never read the environment themselves.
"""

from dataclasses import dataclass, field
from pathlib import Path

from snapcat._errors import ConfigError


@dataclass(frozen=True, slots=True)
class SnapConfig:
    """Configuration for a snapshot run.

    Attributes:
        root: Project root directory.  Always resolved to an absolute path
              on construction.
        dist_dir: Pre-built application bundle (must contain ``index.html``).
        output: Output root for snapshots.  ``None`` writes in place into
            the bundle directory.
        manifest: Content manifest (JSON array), relative to the bundle.
        identifier_field: Manifest entry field that names a content route.
        detail_prefix: URL prefix for content-derived routes.
        static_routes: Extra structural pages rendered after the listing.
        host: Bind address for the content server.
        port: Bind port for the content server (0 = ephemeral).
        navigation_timeout: Seconds to wait for network idle per route.
        readiness_timeout: Seconds to poll the readiness predicate.  Must be
            strictly less than ``navigation_timeout``.
        warmup_delay: Seconds to wait after the server is up, before the
            first navigation.
        browser_executable: Optional Chromium binary override.
        serve_command: Optional dev-server command.  When set, the command
            is spawned instead of serving ``dist_dir`` directly.
        server_startup_timeout: Seconds to wait for ``serve_command`` to
            accept connections.
        base_url: Public site URL (enables sitemap generation).
        readiness: Per route-kind overrides, e.g.
            ``{"detail": {"selector": "article", "non_empty": True}}``.

    """

    root: Path = field(default_factory=Path.cwd)
    dist_dir: Path = field(default_factory=lambda: Path("dist/browser"))
    output: Path | None = None
    manifest: Path = field(default_factory=lambda: Path("blog/list.json"))
    identifier_field: str = "slug"
    detail_prefix: str = "/blog/"
    static_routes: tuple[str, ...] = ()
    host: str = "127.0.0.1"
    port: int = 4200
    navigation_timeout: float = 60.0
    readiness_timeout: float = 30.0
    warmup_delay: float = 1.0
    browser_executable: str | None = None
    serve_command: str | None = None
    server_startup_timeout: float = 60.0
    base_url: str = ""
    readiness: dict[str, dict[str, object]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

        if self.navigation_timeout <= 0 or self.readiness_timeout <= 0:
            msg = "navigation_timeout and readiness_timeout must be positive"
            raise ConfigError(msg)
        # Readiness failures must stay distinguishable from navigation ones.
        if self.readiness_timeout >= self.navigation_timeout:
            msg = (
                f"readiness_timeout ({self.readiness_timeout:g}s) must be less "
                f"than navigation_timeout ({self.navigation_timeout:g}s)"
            )
            raise ConfigError(msg)
        if self.warmup_delay < 0:
            msg = "warmup_delay cannot be negative"
            raise ConfigError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"port out of range: {self.port}"
            raise ConfigError(msg)

    @property
    def dist_path(self) -> Path:
        """Absolute path to the built application bundle."""
        if self.dist_dir.is_absolute():
            return self.dist_dir
        return self.root / self.dist_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to the snapshot output root."""
        if self.output is None:
            return self.dist_path
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def manifest_path(self) -> Path:
        """Absolute path to the content manifest."""
        if self.manifest.is_absolute():
            return self.manifest
        return self.dist_path / self.manifest
