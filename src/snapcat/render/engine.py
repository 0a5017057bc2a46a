"""Render engine — drive headless Chromium and capture post-render markup.

For each route the engine opens a fresh browser context (no cookies,
storage, cache or JS globals shared with other routes), navigates, waits
for the route kind's readiness predicate and serialises the live DOM.

Every step is bounded:

- navigation waits for network idle up to ``navigation_timeout``
- readiness polls the predicate up to ``readiness_timeout``
- opening/closing the context and extracting the document are bounded by
  ``navigation_timeout`` as well

Per-route problems never raise: timeouts become ``SKIPPED`` results and
anything else becomes ``FAILED``.  Only :meth:`RenderEngine.launch` raises,
because a browser that cannot start is fatal for the whole run.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from snapcat._errors import BrowserError, RenderTimeoutError
from snapcat.render.readiness import READY_FUNCTION, ReadinessRegistry
from snapcat.render.result import RenderResult

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

    from snapcat._types import BaseURL
    from snapcat.config import SnapConfig
    from snapcat.routes.registry import Route

logger = logging.getLogger("snapcat.render")

# Needed in containers where Chromium cannot create its own sandbox.
LAUNCH_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


class RenderEngine:
    """One headless browser, one isolated context per rendered route.

    Args:
        readiness: Predicate per route kind.
        navigation_timeout: Seconds allowed for navigation to reach idle.
        readiness_timeout: Seconds allowed for the readiness predicate.
        executable_path: Optional Chromium binary override.
        launcher: Factory returning an object with an async ``start()``
            (defaults to Playwright's ``async_playwright``).

    """

    __slots__ = (
        "_browser", "_executable_path", "_launcher", "_navigation_timeout",
        "_playwright", "_readiness", "_readiness_timeout",
    )

    def __init__(
        self,
        readiness: ReadinessRegistry,
        *,
        navigation_timeout: float = 60.0,
        readiness_timeout: float = 30.0,
        executable_path: str | None = None,
        launcher: Callable[[], Any] = async_playwright,
    ) -> None:
        self._readiness = readiness
        self._navigation_timeout = navigation_timeout
        self._readiness_timeout = readiness_timeout
        self._executable_path = executable_path
        self._launcher = launcher
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    @classmethod
    def from_config(cls, config: SnapConfig) -> RenderEngine:
        return cls(
            ReadinessRegistry.from_overrides(config.readiness),
            navigation_timeout=config.navigation_timeout,
            readiness_timeout=config.readiness_timeout,
            executable_path=config.browser_executable,
        )

    @property
    def launched(self) -> bool:
        return self._browser is not None

    # ------------------------------------------------------------------
    # Browser lifecycle
    # ------------------------------------------------------------------

    async def launch(self) -> None:
        """Start Playwright and a headless Chromium.

        Raises:
            BrowserError: If the driver or the browser binary cannot start.

        """
        if self._browser is not None:
            return
        try:
            self._playwright = await self._launcher().start()
            self._browser = await self._playwright.chromium.launch(
                headless=True,
                args=list(LAUNCH_ARGS),
                executable_path=self._executable_path,
            )
        except Exception as exc:
            await self.close()
            msg = f"Cannot launch headless browser: {exc}"
            raise BrowserError(msg) from exc

    async def close(self) -> None:
        """Close the browser, then stop Playwright.  Safe to call repeatedly."""
        browser, playwright = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def render_route(self, route: Route, base_url: BaseURL) -> RenderResult:
        """Render *route* against the server at *base_url*.

        Returns exactly one result; never raises for per-route problems.
        """
        url = base_url.rstrip("/") + route.path
        t0 = time.perf_counter()
        try:
            html = await self._capture(route, url)
        except RenderTimeoutError as exc:
            return RenderResult.skipped(route, str(exc), duration_ms=_since(t0))
        except Exception as exc:
            logger.debug("Render of %s failed", url, exc_info=True)
            detail = f"{type(exc).__name__}: {exc}"
            return RenderResult.failed(route, detail, duration_ms=_since(t0))
        return RenderResult.success(route, html, duration_ms=_since(t0))

    async def _capture(self, route: Route, url: str) -> str:
        predicate = self._readiness.predicate_for(route.kind)

        async with self._isolated_page() as page:
            try:
                await page.goto(
                    url,
                    wait_until="networkidle",
                    timeout=self._navigation_timeout * 1000,
                )
            except PlaywrightTimeoutError as exc:
                raise RenderTimeoutError(
                    "navigation", route.path, self._navigation_timeout,
                ) from exc

            try:
                await page.wait_for_function(
                    READY_FUNCTION,
                    arg=predicate.as_arg(),
                    timeout=self._readiness_timeout * 1000,
                )
            except PlaywrightTimeoutError as exc:
                raise RenderTimeoutError(
                    "readiness", route.path, self._readiness_timeout,
                ) from exc

            async with asyncio.timeout(self._navigation_timeout):
                return await page.content()

    @asynccontextmanager
    async def _isolated_page(self) -> AsyncIterator[Page]:
        """Yield a page in a fresh context; the context is always closed."""
        if self._browser is None:
            msg = "render_route() called before launch()"
            raise BrowserError(msg)

        context: BrowserContext | None = None
        try:
            async with asyncio.timeout(self._navigation_timeout):
                context = await self._browser.new_context()
                page = await context.new_page()
            yield page
        finally:
            if context is not None:
                await self._release(context)

    async def _release(self, context: BrowserContext) -> None:
        try:
            async with asyncio.timeout(self._navigation_timeout):
                await context.close()
        except (PlaywrightError, TimeoutError) as exc:
            logger.warning("Browser context did not close cleanly: %s", exc)


def _since(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000
