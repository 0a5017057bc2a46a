"""Snapcat — pre-render a client-side single-page application to static HTML.

Serves a built bundle locally, drives a headless Chromium through every
route (structural pages plus one per manifest entry), and writes each
fully-rendered document as ``<route>/index.html`` for static hosting.

Quick start::

    import snapcat

    summary = snapcat.snapshot("my-app/")
    raise SystemExit(summary.exit_code)

Other entry points::

    snapcat.list_routes("my-app/")   # Plan without launching anything
    snapcat.serve("my-app/")         # Preview the bundle with SPA fallback

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0.dev0"
__all__ = [
    "Orchestrator",
    "RunSummary",
    "SnapConfig",
    "__version__",
    "list_routes",
    "serve",
    "snapshot",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import snapcat`` fast; Playwright is only imported once a run
    actually needs a browser.
    """
    if name == "SnapConfig":
        from snapcat.config import SnapConfig

        return SnapConfig

    if name in ("Orchestrator", "RunSummary"):
        from snapcat import orchestrator

        return getattr(orchestrator, name)

    if name in ("snapshot", "list_routes", "serve"):
        from snapcat import app

        return getattr(app, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
