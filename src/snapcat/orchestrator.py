"""Orchestrator — sequence one snapshot run and own its failure policy.

Lifecycle::

    INIT -> SERVER_STARTING -> SERVER_READY -> BROWSER_LAUNCHING
         -> BROWSER_READY -> RENDERING -> COMPLETED | FATAL_FAILURE
         -> TEARDOWN -> EXIT

Failure policy:

- Fatal (exit code 1): missing bundle, unreadable manifest, server bind
  failure, browser launch failure, or any exception escaping the render
  loop.  Preconditions are checked before any resource is acquired.
- Per-route: render timeouts and errors, write errors.  Recorded as
  skipped/failed; the loop always moves on to the next route.

Once the server start has been attempted, TEARDOWN closes the browser and
then stops the server, each exactly once, on every exit path.

Routes are rendered strictly one at a time, keeping the browser's memory
footprint bounded and avoiding contention between simultaneous
navigations.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from snapcat._errors import BundleError, SnapcatError
from snapcat.banner import print_banner, print_route_result
from snapcat.export.sitemap import write_sitemap
from snapcat.export.writer import OutputWriter, WrittenFile
from snapcat.observability import RunCollector
from snapcat.render.result import Outcome, RenderResult
from snapcat.routes.registry import Route, load_manifest, resolve_routes, structural_routes
from snapcat.serve.files import INDEX_FILE

if TYPE_CHECKING:
    from snapcat.config import SnapConfig
    from snapcat.render.engine import RenderEngine
    from snapcat.serve.protocol import Transport

logger = logging.getLogger("snapcat.orchestrator")

EXIT_OK = 0
EXIT_FATAL = 1


class Stage(Enum):
    INIT = "init"
    SERVER_STARTING = "server_starting"
    SERVER_READY = "server_ready"
    BROWSER_LAUNCHING = "browser_launching"
    BROWSER_READY = "browser_ready"
    RENDERING = "rendering"
    COMPLETED = "completed"
    FATAL_FAILURE = "fatal_failure"
    TEARDOWN = "teardown"
    EXIT = "exit"


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Aggregate result of one run.

    Attributes:
        outcome_stage: ``COMPLETED`` or ``FATAL_FAILURE``.
        exit_code: ``0`` when completed (whatever the per-route outcomes),
            ``1`` on a fatal condition.
        total_routes: Number of routes planned for the run.
        rendered: Routes captured and written.
        skipped: Routes that timed out.
        failed: Routes that errored (including write failures).
        written: Records of written snapshot files, in crawl order.
        duration_ms: Total wall-clock time for the run.
        fatal_error: Reason for a fatal failure, if any.

    """

    outcome_stage: Stage
    exit_code: int
    total_routes: int = 0
    rendered: int = 0
    skipped: int = 0
    failed: int = 0
    written: tuple[WrittenFile, ...] = ()
    duration_ms: float = 0.0
    fatal_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == EXIT_OK


@dataclass(slots=True)
class _Tally:
    skipped: int = 0
    failed: int = 0
    written: list[WrittenFile] = field(default_factory=list)


def plan_routes(config: SnapConfig) -> tuple[Route, ...]:
    """Read the manifest once and derive the ordered routes for *config*.

    Raises:
        ManifestError: If the manifest exists but cannot be parsed.

    """
    manifest = load_manifest(config.manifest_path)
    return resolve_routes(
        manifest,
        structural_routes(config.static_routes),
        identifier_field=config.identifier_field,
        detail_prefix=config.detail_prefix,
    )


def check_bundle(config: SnapConfig) -> None:
    """Fail fast when the pre-built bundle is missing.

    Only the static-file transport serves the bundle; a dev-server command
    brings its own content.

    Raises:
        BundleError: If the bundle directory or its ``index.html`` is missing.

    """
    if config.serve_command:
        return
    dist = config.dist_path
    if not dist.is_dir():
        msg = f"Built application not found at {dist} (run the app build first)"
        raise BundleError(msg)
    if not (dist / INDEX_FILE).is_file():
        msg = f"{dist} has no {INDEX_FILE}"
        raise BundleError(msg)


class Orchestrator:
    """Runs the snapshot pipeline for one configuration.

    Collaborators default to the ones the config describes and can be
    replaced (tests pass fakes with the same shape).

    Args:
        config: Frozen run configuration.
        server: Content transport (``start``/``stop``/``base_url``).
        engine: Render engine (``launch``/``close``/``render_route``).
        writer: Output writer for successful snapshots.
        collector: Observability sink.
        verbose: Print one status line per route to stderr.

    """

    def __init__(
        self,
        config: SnapConfig,
        *,
        server: Transport | None = None,
        engine: RenderEngine | None = None,
        writer: OutputWriter | None = None,
        collector: RunCollector | None = None,
        verbose: bool = True,
    ) -> None:
        if server is None:
            from snapcat.serve import create_server

            server = create_server(config)
        if engine is None:
            from snapcat.render.engine import RenderEngine

            engine = RenderEngine.from_config(config)

        self._config = config
        self._server = server
        self._engine = engine
        self._writer = writer if writer is not None else OutputWriter(config.output_path)
        self._collector = collector if collector is not None else RunCollector()
        self._verbose = verbose
        self._stage = Stage.INIT

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def collector(self) -> RunCollector:
        return self._collector

    async def run(self) -> RunSummary:
        """Execute the full lifecycle and return the run summary.

        Never raises for fatal pipeline conditions; they are reported via
        ``exit_code``.  ``KeyboardInterrupt`` and cancellation still pass
        through teardown before propagating.
        """
        t0 = time.perf_counter()

        try:
            check_bundle(self._config)
            routes = plan_routes(self._config)
            if self._verbose:
                print_banner(self._config, len(routes), load_ms=_since(t0))
        except SnapcatError as exc:
            # Nothing acquired yet, so there is nothing to tear down.
            logger.error("%s", exc)
            self._enter(Stage.FATAL_FAILURE)
            self._enter(Stage.EXIT)
            return RunSummary(
                outcome_stage=Stage.FATAL_FAILURE,
                exit_code=EXIT_FATAL,
                duration_ms=_since(t0),
                fatal_error=str(exc),
            )

        tally = _Tally()
        fatal: str | None = None
        try:
            await self._acquire()
            await self._render_all(routes, tally)
            self._write_sitemap(tally.written)
            self._enter(Stage.COMPLETED)
        except SnapcatError as exc:
            logger.error("%s", exc)
            fatal = str(exc)
            self._enter(Stage.FATAL_FAILURE)
        except Exception as exc:
            logger.exception("Unexpected error during %s", self._stage.value)
            fatal = f"{type(exc).__name__}: {exc}"
            self._enter(Stage.FATAL_FAILURE)
        finally:
            outcome_stage = self._stage
            self._enter(Stage.TEARDOWN)
            await self._teardown()
            self._enter(Stage.EXIT)

        return RunSummary(
            outcome_stage=outcome_stage,
            exit_code=EXIT_OK if fatal is None else EXIT_FATAL,
            total_routes=len(routes),
            rendered=len(tally.written),
            skipped=tally.skipped,
            failed=tally.failed,
            written=tuple(tally.written),
            duration_ms=_since(t0),
            fatal_error=fatal,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _enter(self, stage: Stage) -> None:
        previous = self._stage
        self._stage = stage
        logger.debug("stage %s -> %s", previous.value, stage.value)
        self._collector.record_stage(stage.value, previous.value)

    async def _acquire(self) -> None:
        self._enter(Stage.SERVER_STARTING)
        await asyncio.to_thread(self._server.start)
        self._enter(Stage.SERVER_READY)

        self._enter(Stage.BROWSER_LAUNCHING)
        await self._engine.launch()
        self._enter(Stage.BROWSER_READY)

    async def _render_all(self, routes: tuple[Route, ...], tally: _Tally) -> None:
        self._enter(Stage.RENDERING)
        if self._config.warmup_delay > 0:
            await asyncio.sleep(self._config.warmup_delay)

        base_url = self._server.base_url
        for route in routes:
            result, written = await self._process_route(route, base_url)
            self._collector.record_render(result)
            if written is not None:
                self._collector.record_write(written)
                tally.written.append(written)
            elif result.outcome is Outcome.SKIPPED:
                tally.skipped += 1
            else:
                tally.failed += 1
            if self._verbose:
                print_route_result(result, written)

    async def _process_route(
        self, route: Route, base_url: str,
    ) -> tuple[RenderResult, WrittenFile | None]:
        """Render then write one route.  Per-route errors never escape."""
        try:
            result = await self._engine.render_route(route, base_url)
        except Exception as exc:
            logger.exception("Unexpected error rendering %s", route.path)
            return RenderResult.failed(route, f"{type(exc).__name__}: {exc}"), None

        if result.outcome is not Outcome.SUCCESS or result.html is None:
            return result, None

        try:
            written = self._writer.write(route, result.html)
        except Exception as exc:
            logger.exception("Cannot write snapshot for %s", route.path)
            return RenderResult.failed(route, str(exc), duration_ms=result.duration_ms), None
        return result, written

    def _write_sitemap(self, written: list[WrittenFile]) -> None:
        try:
            sitemap = write_sitemap(written, self._config.base_url, self._writer.output_root)
        except OSError as exc:
            logger.warning("Sitemap not written: %s", exc)
            return
        if sitemap is not None:
            self._collector.record_write(
                WrittenFile("/sitemap.xml", sitemap, sitemap.stat().st_size),
            )

    async def _teardown(self) -> None:
        """Close the browser, then stop the server.  Each step runs once."""
        try:
            await self._engine.close()
        except Exception:
            logger.exception("Browser did not close cleanly")
        try:
            await asyncio.to_thread(self._server.stop)
        except Exception:
            logger.exception("Content server did not stop cleanly")


def _since(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000
