"""Static-file content server with single-page-application fallback.

The bundle is exposed as a chirp :class:`~chirp.App` whose only handler is
the :class:`BundleFiles` middleware, hosted by a pounce server.  The
pipeline runs pounce on a background thread through :class:`ContentServer`;
``snapcat serve`` runs the same app in the foreground.

Thread Safety:
    ``BundleFiles`` only reads from the bundle directory and the shell bytes
    pinned at construction.  ``start()`` and ``stop()`` are called by the
    orchestrator's single control flow.

"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from chirp.http.response import Response

from snapcat._errors import ServerError
from snapcat._types import BaseURL
from snapcat.serve.command import port_accepts_connections
from snapcat.serve.files import INDEX_FILE, resolve_request

if TYPE_CHECKING:
    from chirp import App
    from chirp.http.request import Request
    from chirp.middleware.protocol import AnyResponse, Next
    from pounce.server import Server

logger = logging.getLogger("snapcat.server")


class BundleFiles:
    """Middleware that answers GET/HEAD from the bundle root.

    Unlike chirp's ``StaticFiles``, unknown paths never fall through: they
    resolve to the application shell so client-side routing takes over.

    Snapshots may be written in place, overwriting the root ``index.html``
    mid-run.  Later routes must still bootstrap from the pristine shell, so
    its bytes are read once when the middleware is created.
    """

    __slots__ = ("_root_dir", "_shell", "_shell_path")

    def __init__(self, root_dir: Path) -> None:
        self._root_dir = root_dir
        self._shell_path = (root_dir / INDEX_FILE).resolve()
        self._shell = self._shell_path.read_bytes() if self._shell_path.is_file() else None

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        resolved = resolve_request(self._root_dir, request.path)
        if resolved is None:
            return Response(body="Not Found", status=404, content_type="text/plain; charset=utf-8")
        try:
            body = self._document_bytes(resolved.path)
        except OSError:
            logger.exception("Cannot read %s", resolved.path)
            return Response(
                body="Internal Server Error",
                status=500,
                content_type="text/plain; charset=utf-8",
            )

        if request.method == "HEAD":
            body = b""
        return Response(body=body, content_type=resolved.content_type).with_header(
            "Cache-Control", "no-cache",
        )

    def _document_bytes(self, path: Path) -> bytes:
        if self._shell is not None and path == self._shell_path:
            return self._shell
        return path.read_bytes()


def create_app(root_dir: Path) -> App:
    """Build the chirp app that serves *root_dir* with SPA fallback."""
    from chirp import App

    app = App()
    app.add_middleware(BundleFiles(root_dir))
    return app


def create_pounce_server(root_dir: Path, host: str, port: int, *, quiet: bool = False) -> Server:
    """Build (but do not run) a single-worker pounce server for *root_dir*."""
    from pounce.config import ServerConfig
    from pounce.server import Server

    if quiet:
        config = ServerConfig(
            host=host,
            port=port,
            workers=1,
            reload=False,
            access_log=False,
            log_level="warning",
        )
    else:
        config = ServerConfig(host=host, port=port, workers=1)
    return Server(config, create_app(root_dir))


class ContentServer:
    """Serves *root_dir* on ``host:port`` until stopped.

    Args:
        root_dir: The built application bundle.
        host: Bind address.
        port: Bind port.  ``0`` picks a free ephemeral port.
        startup_timeout: Seconds to wait for the listener to accept connections.

    """

    __slots__ = ("_error", "_host", "_port", "_root_dir", "_server", "_startup_timeout", "_thread")

    def __init__(
        self,
        root_dir: Path,
        host: str = "127.0.0.1",
        port: int = 4200,
        *,
        startup_timeout: float = 10.0,
    ) -> None:
        self._root_dir = root_dir
        self._host = host
        self._port = port
        self._startup_timeout = startup_timeout
        self._server: Server | None = None
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None

    @property
    def running(self) -> bool:
        return self._server is not None

    @property
    def base_url(self) -> BaseURL:
        """URL of the running server (reflects the real port when bound to 0)."""
        bound = self._server.bound_addr if self._server is not None else None
        port = bound[1] if bound is not None else self._port
        return f"http://{self._host}:{port}"

    def start(self) -> None:
        """Bind the port and start serving in a daemon thread.

        Blocks until the listener accepts connections.

        Raises:
            ServerError: If the port cannot be bound or the server does not
                come up within ``startup_timeout``.

        """
        if self._server is not None:
            return
        self._error = None
        server = create_pounce_server(self._root_dir, self._host, self._port, quiet=True)
        thread = threading.Thread(
            target=self._serve,
            args=(server,),
            name="snapcat-content-server",
            daemon=True,
        )
        thread.start()

        deadline = time.monotonic() + self._startup_timeout
        while not self._accepting(server):
            if not thread.is_alive():
                thread.join()
                msg = f"Cannot bind content server to {self._host}:{self._port}: {self._error}"
                raise ServerError(msg) from self._error
            if time.monotonic() >= deadline:
                server.shutdown()
                thread.join(timeout=5)
                msg = (
                    f"Content server on {self._host}:{self._port} did not start "
                    f"within {self._startup_timeout}s"
                )
                raise ServerError(msg)
            time.sleep(0.02)

        self._server = server
        self._thread = thread
        logger.debug("Serving %s at %s", self._root_dir, self.base_url)

    def stop(self) -> None:
        """Stop serving and release the socket.  Safe to call repeatedly."""
        server, thread = self._server, self._thread
        self._server = None
        self._thread = None
        if server is None:
            return
        server.shutdown()
        if thread is not None:
            thread.join(timeout=5)

    def _serve(self, server: Server) -> None:
        try:
            server.run()
        except Exception as exc:
            # Surfaced by start() as a ServerError.
            self._error = exc
            logger.debug("Content server thread exited: %s", exc)

    def _accepting(self, server: Server) -> bool:
        bound = server.bound_addr
        return bound is not None and port_accepts_connections(self._host, bound[1])
