"""Output writer — persist captured documents to a static-hosting tree.

Clean URL convention:
    ``/``                 -> ``output/index.html``
    ``/about``            -> ``output/about/index.html``
    ``/blog/hello/``      -> ``output/blog/hello/index.html``

Writes are atomic: the document is staged in a temporary file next to its
destination, flushed to disk, then renamed over the final name.  A crash
mid-write never leaves a truncated ``index.html`` behind.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from snapcat._errors import OutputError
from snapcat._types import RoutePath
from snapcat.routes.registry import Route


@dataclass(frozen=True, slots=True)
class WrittenFile:
    """Record of a single snapshot written to disk.

    Attributes:
        route_path: URL path the document was captured from.
        output_path: Absolute filesystem path of the written file.
        size_bytes: Size of the written file in bytes.

    """

    route_path: RoutePath
    output_path: Path
    size_bytes: int


def output_path_for(route_path: RoutePath, output_root: Path) -> Path:
    """Map a route path to its ``index.html`` under *output_root*."""
    clean = route_path.strip("/")
    if not clean:
        return output_root / "index.html"
    return output_root / clean / "index.html"


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* to *path* via a temporary sibling and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="wb",
        delete=False,
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    ) as handle:
        temp_path = Path(handle.name)
        try:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except BaseException:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(temp_path, path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


class OutputWriter:
    """Writes successful snapshots below *output_root*.

    Re-running with unchanged input reproduces the same paths and content;
    existing files are overwritten unconditionally.
    """

    __slots__ = ("_output_root",)

    def __init__(self, output_root: Path) -> None:
        self._output_root = output_root

    @property
    def output_root(self) -> Path:
        return self._output_root

    def path_for(self, route: Route) -> Path:
        return output_path_for(route.path, self._output_root)

    def write(self, route: Route, html: str) -> WrittenFile:
        """Persist *html* as the snapshot for *route*.

        Raises:
            OutputError: If the route maps outside the output root, or the
                directory or file cannot be written.

        """
        filepath = self.path_for(route)
        if not filepath.resolve().is_relative_to(self._output_root.resolve()):
            msg = f"Refusing to write snapshot for {route.path} outside {self._output_root}"
            raise OutputError(msg)
        data = html.encode("utf-8")
        try:
            atomic_write_bytes(filepath, data)
        except OSError as exc:
            msg = f"Cannot write snapshot for {route.path} to {filepath}: {exc}"
            raise OutputError(msg) from exc
        return WrittenFile(route_path=route.path, output_path=filepath, size_bytes=len(data))
