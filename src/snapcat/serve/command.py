"""Dev-server-backed transport.

Instead of serving the bundle directly, spawn an external development
server (e.g. ``ng serve --port 4200``) and wait until its port accepts
connections.  The whole process group is terminated on ``stop()`` so the
server's own children do not outlive the run.
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import socket
import subprocess
import time
from pathlib import Path

from snapcat._errors import ServerError
from snapcat._types import BaseURL

logger = logging.getLogger("snapcat.server")

_STOP_GRACE_SECONDS = 10.0


def port_accepts_connections(host: str, port: int, timeout: float = 0.5) -> bool:
    """Return True if something is listening on ``host:port``."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


class CommandServer:
    """Runs *command* as the content server for the duration of a run.

    Args:
        command: Shell-style command line, split with :func:`shlex.split`.
        host: Host the command listens on.
        port: Port the command listens on.
        cwd: Working directory for the command.
        startup_timeout: Seconds to wait for the port to open.
        poll_interval: Seconds between port checks.

    """

    __slots__ = (
        "_command", "_cwd", "_host", "_poll_interval", "_port", "_process",
        "_startup_timeout",
    )

    def __init__(
        self,
        command: str,
        *,
        host: str = "127.0.0.1",
        port: int = 4200,
        cwd: Path | None = None,
        startup_timeout: float = 60.0,
        poll_interval: float = 0.25,
    ) -> None:
        self._command = command
        self._host = host
        self._port = port
        self._cwd = cwd
        self._startup_timeout = startup_timeout
        self._poll_interval = poll_interval
        self._process: subprocess.Popen[bytes] | None = None

    @property
    def base_url(self) -> BaseURL:
        return f"http://{self._host}:{self._port}"

    def start(self) -> None:
        """Spawn the command and block until its port accepts connections.

        Raises:
            ServerError: If the port is already taken, the command cannot be
                spawned, exits early, or does not come up in time.

        """
        if self._process is not None:
            return
        if port_accepts_connections(self._host, self._port):
            msg = f"Port {self._host}:{self._port} is already in use"
            raise ServerError(msg)

        args = shlex.split(self._command)
        if not args:
            msg = "serve_command is empty"
            raise ServerError(msg)
        try:
            self._process = subprocess.Popen(
                args,
                cwd=self._cwd,
                stdout=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            msg = f"Cannot start {args[0]!r}: {exc}"
            raise ServerError(msg) from exc

        logger.debug("Spawned %r (pid %d)", self._command, self._process.pid)
        deadline = time.monotonic() + self._startup_timeout
        while not port_accepts_connections(self._host, self._port):
            code = self._process.poll()
            if code is not None:
                # Children the command spawned may outlive it in its group.
                self._signal(self._process, signal.SIGTERM)
                self._process = None
                msg = f"{args[0]!r} exited with status {code} before serving"
                raise ServerError(msg)
            if time.monotonic() >= deadline:
                self.stop()
                msg = (
                    f"{args[0]!r} did not accept connections on port "
                    f"{self._port} within {self._startup_timeout:g}s"
                )
                raise ServerError(msg)
            time.sleep(self._poll_interval)

    def stop(self) -> None:
        """Terminate the process group, escalating to SIGKILL.  Idempotent."""
        process = self._process
        self._process = None
        if process is None or process.poll() is not None:
            return
        self._signal(process, signal.SIGTERM)
        try:
            process.wait(timeout=_STOP_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            logger.warning("%r ignored SIGTERM, killing", self._command)
            self._signal(process, signal.SIGKILL)
            process.wait()

    @staticmethod
    def _signal(process: subprocess.Popen[bytes], sig: signal.Signals) -> None:
        try:
            if hasattr(os, "killpg"):
                os.killpg(process.pid, sig)
            else:
                process.send_signal(sig)
        except ProcessLookupError:
            pass
