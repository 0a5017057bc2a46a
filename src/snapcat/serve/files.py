"""Request-path resolution for the content server.

Maps an incoming request path to a file under the bundle root:

- parent-directory segments neutralise the whole request to ``/``
- directories resolve to their ``index.html``
- unmatched paths fall back to the root ``index.html`` (single-page
  application fallback) so the client router can take over
- the final path is always re-checked to stay inside the root, which also
  defends against symlinks pointing out of the tree
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlsplit

INDEX_FILE = "index.html"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".mjs": "text/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".json": "application/json",
    ".map": "application/json",
    ".webmanifest": "application/manifest+json",
    ".txt": "text/plain; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
    ".xml": "application/xml",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".wasm": "application/wasm",
}


@dataclass(frozen=True, slots=True)
class ResolvedFile:
    """A file chosen to answer a request.

    Attributes:
        path: Absolute path of the file to send.
        content_type: Value for the ``Content-Type`` header.
        fallback: True when the root document was substituted for a
            missing path.

    """

    path: Path
    content_type: str
    fallback: bool = False


def content_type_for(path: Path | str) -> str:
    """Return the content type for *path* based on its extension."""
    suffix = PurePosixPath(str(path)).suffix.lower()
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def sanitize_path(request_path: str) -> str:
    """Reduce a raw request target to a safe, root-relative URL path.

    Query strings and fragments are dropped and percent-escapes decoded
    before inspection, so ``/%2e%2e/secret`` is treated like ``/../secret``.
    Any parent-directory segment collapses the request to ``/``.
    """
    path = unquote(urlsplit(request_path).path).replace("\\", "/")
    if "\x00" in path:
        return "/"
    segments = path.split("/")
    if ".." in segments:
        return "/"
    return "/" + "/".join(s for s in segments if s and s != ".")


def resolve_request(root_dir: Path, request_path: str) -> ResolvedFile | None:
    """Resolve *request_path* to a file under *root_dir*.

    Returns:
        The file to serve, or ``None`` when neither the requested file nor
        the fallback document exists (the caller answers 404).

    """
    root = root_dir.resolve()
    relative = sanitize_path(request_path).lstrip("/")

    candidate = (root / relative).resolve() if relative else root
    if candidate.is_relative_to(root):
        if candidate.is_dir():
            candidate = candidate / INDEX_FILE
        if candidate.is_file():
            return ResolvedFile(path=candidate, content_type=content_type_for(candidate))

    fallback = root / INDEX_FILE
    if fallback.is_file():
        return ResolvedFile(
            path=fallback,
            content_type=CONTENT_TYPES[".html"],
            fallback=True,
        )
    return None
