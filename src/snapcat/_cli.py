"""Snapcat CLI — snapcat run / snapcat routes / snapcat serve.

Entry point for the ``snapcat`` command-line interface.  Flags that are
not given fall back to ``snapcat.yaml`` / ``snapcat.toml`` and
``SNAPCAT_*`` environment variables.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from snapcat._errors import SnapcatError


def _add_bundle_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    parser.add_argument("--dist", dest="dist_dir", help="Built application bundle")
    parser.add_argument("--host", help="Bind address for the content server")
    parser.add_argument("--port", type=int, help="Bind port (0 = any free port)")


def _add_route_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--manifest", help="Content manifest, relative to the bundle")
    parser.add_argument("--identifier-field", help="Manifest field naming each content route")
    parser.add_argument("--detail-prefix", help="URL prefix for content routes")
    parser.add_argument(
        "--static-route",
        dest="static_routes",
        action="append",
        metavar="PATH",
        help="Extra structural page to render (repeatable)",
    )
    parser.add_argument("--output", help="Output directory (default: write into the bundle)")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the snapcat CLI."""
    parser = argparse.ArgumentParser(
        prog="snapcat",
        description="Pre-render a single-page application to static HTML snapshots.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging on stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # snapcat run
    run_parser = subparsers.add_parser("run", help="Render every route and write snapshots")
    _add_bundle_options(run_parser)
    _add_route_options(run_parser)
    run_parser.add_argument(
        "--navigation-timeout", type=float, help="Seconds to wait for network idle",
    )
    run_parser.add_argument(
        "--readiness-timeout", type=float, help="Seconds to wait for route content",
    )
    run_parser.add_argument(
        "--warmup", dest="warmup_delay", type=float, help="Seconds to wait before rendering",
    )
    run_parser.add_argument("--browser-executable", help="Chromium binary to launch")
    run_parser.add_argument(
        "--serve-command", help="Start this dev server instead of serving the bundle",
    )
    run_parser.add_argument("--base-url", help="Public site URL for sitemap generation")

    # snapcat routes
    routes_parser = subparsers.add_parser(
        "routes", help="List the routes a run would render",
    )
    _add_bundle_options(routes_parser)
    _add_route_options(routes_parser)

    # snapcat serve
    serve_parser = subparsers.add_parser(
        "serve", help="Preview the built bundle with SPA fallback",
    )
    _add_bundle_options(serve_parser)

    return parser


def _get_version() -> str:
    """Get the package version."""
    from snapcat import __version__

    return __version__


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    skip = {"command", "root", "verbose"}
    return {k: v for k, v in vars(args).items() if k not in skip}


def _print_routes(args: argparse.Namespace) -> None:
    from snapcat.config_loader import load_config
    from snapcat.export.writer import output_path_for
    from snapcat.orchestrator import plan_routes

    config = load_config(Path(args.root), **_overrides(args))
    for route in plan_routes(config):
        target = output_path_for(route.path, config.output_path)
        print(f"{route.kind.value:<8} {route.path}  ->  {target}")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    from snapcat.app import serve, snapshot

    try:
        if args.command == "run":
            return snapshot(args.root, **_overrides(args)).exit_code
        if args.command == "routes":
            _print_routes(args)
        elif args.command == "serve":
            serve(args.root, **_overrides(args))
    except SnapcatError as exc:
        print(f"snapcat: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
