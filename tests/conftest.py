"""Shared test fixtures for snapcat."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from snapcat.config import SnapConfig

SHELL_HTML = (
    "<!DOCTYPE html>\n<html>\n<head><script src=\"/main.js\"></script></head>\n"
    "<body><app-root></app-root></body>\n</html>\n"
)


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a project root with a minimal built bundle.

    Layout::

        dist/browser/index.html      application shell
        dist/browser/main.js         bundle script
        dist/browser/assets/logo.svg
        dist/browser/blog/list.json  manifest with two entries

    """
    dist = tmp_path / "dist" / "browser"
    (dist / "assets").mkdir(parents=True)
    (dist / "blog").mkdir()
    (dist / "index.html").write_text(SHELL_HTML)
    (dist / "main.js").write_text("console.log('app');\n")
    (dist / "assets" / "logo.svg").write_text("<svg/>")
    write_manifest(dist / "blog" / "list.json", [
        {"slug": "hello-world", "title": "Hello"},
        {"slug": "second-post", "title": "Second"},
    ])
    return tmp_path


@pytest.fixture
def tmp_dist(tmp_project: Path) -> Path:
    """The bundle directory inside tmp_project."""
    return tmp_project / "dist" / "browser"


@pytest.fixture
def snap_config(tmp_project: Path) -> SnapConfig:
    """A config for tmp_project with no warmup, suitable for fast runs."""
    return make_config(tmp_project)


def make_config(root: Path, **kwargs: Any) -> SnapConfig:
    """Build a SnapConfig rooted at *root* with test-friendly defaults."""
    kwargs.setdefault("warmup_delay", 0.0)
    kwargs.setdefault("port", 0)
    return SnapConfig(root=root, **kwargs)


def write_manifest(path: Path, entries: Any) -> Path:
    """Write *entries* as the JSON manifest at *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(entries))
    return path
