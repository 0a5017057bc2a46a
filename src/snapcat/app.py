"""Snapcat public entry points.

``snapshot`` runs the whole pipeline, ``list_routes`` plans a run without
launching anything, and ``serve`` previews the bundle with the same
content server the pipeline uses.
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from snapcat._errors import ServerError
from snapcat.config_loader import load_config
from snapcat.orchestrator import Orchestrator, RunSummary, check_bundle, plan_routes

if TYPE_CHECKING:
    from snapcat.routes.registry import Route


def snapshot(root: str | Path = ".", **kwargs: object) -> RunSummary:
    """Render every planned route and write the snapshots.

    Args:
        root: Project root.  The config file and relative paths resolve
            from here.
        **kwargs: Override SnapConfig fields.

    Returns:
        The run summary; ``summary.exit_code`` is the process exit status.

    Raises:
        ConfigError: If the configuration is invalid.

    """
    from snapcat.banner import print_summary

    config = load_config(Path(root), **kwargs)
    summary = asyncio.run(Orchestrator(config).run())
    print_summary(summary)
    return summary


def list_routes(root: str | Path = ".", **kwargs: object) -> tuple[Route, ...]:
    """Return the routes a run would render, in crawl order.

    Raises:
        ConfigError: If the configuration is invalid.
        ManifestError: If the manifest cannot be parsed.

    """
    config = load_config(Path(root), **kwargs)
    return plan_routes(config)


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Serve the built bundle with SPA fallback until interrupted.

    The bundle is exposed through the same chirp app the pipeline uses and
    run by pounce in the foreground.  Pounce handles Ctrl+C itself.

    Raises:
        ConfigError: If the configuration is invalid.
        BundleError: If the bundle is missing.
        ServerError: If the port cannot be bound.

    """
    from snapcat.serve.server import create_pounce_server

    config = dataclasses.replace(load_config(Path(root), **kwargs), serve_command=None)
    check_bundle(config)

    server = create_pounce_server(config.dist_path, config.host, config.port)
    print(f"  Serving {config.dist_path} (Ctrl+C to stop)", file=sys.stderr)
    try:
        server.run()
    except OSError as exc:
        msg = f"Cannot bind content server to {config.host}:{config.port}: {exc}"
        raise ServerError(msg) from exc
