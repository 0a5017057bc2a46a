"""Content serving — expose the built application over local HTTP.

Two transports share the :class:`~snapcat.serve.protocol.Transport` shape:

- :class:`ContentServer` serves the bundle directory through chirp and pounce
- :class:`CommandServer` spawns an external dev server
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from snapcat.serve.command import CommandServer
from snapcat.serve.files import ResolvedFile, content_type_for, resolve_request
from snapcat.serve.server import BundleFiles, ContentServer, create_app

if TYPE_CHECKING:
    from snapcat.config import SnapConfig
    from snapcat.serve.protocol import Transport

__all__ = [
    "BundleFiles",
    "CommandServer",
    "ContentServer",
    "ResolvedFile",
    "content_type_for",
    "create_app",
    "create_server",
    "resolve_request",
]


def create_server(config: SnapConfig) -> Transport:
    """Pick the transport for *config*: dev-server command or static files."""
    if config.serve_command:
        return CommandServer(
            config.serve_command,
            host=config.host,
            port=config.port,
            cwd=config.root,
            startup_timeout=config.server_startup_timeout,
        )
    return ContentServer(config.dist_path, host=config.host, port=config.port)
