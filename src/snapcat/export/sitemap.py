"""Sitemap generation — produce sitemap.xml from written snapshots.

Lists every route whose snapshot was written during the run, so crawlers
discover exactly the pages that have static HTML.  Requires ``base_url``;
generation is skipped with a note on stderr when it is empty.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from xml.etree.ElementTree import Element, SubElement, tostring

from snapcat.export.writer import WrittenFile, atomic_write_bytes

# XML namespace for sitemaps
_SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def generate_sitemap(files: Sequence[WrittenFile], base_url: str) -> str:
    """Generate a sitemap.xml string from written snapshot records.

    Args:
        files: Snapshots written during the run, in crawl order.
        base_url: Public site URL (e.g., ``"https://example.com"``).

    Returns:
        Complete XML string suitable for writing to ``sitemap.xml``.

    """
    base = base_url.rstrip("/")
    today = datetime.now(UTC).strftime("%Y-%m-%d")

    urlset = Element("urlset")
    urlset.set("xmlns", _SITEMAP_NS)

    for written in files:
        url_el = SubElement(urlset, "url")
        loc = SubElement(url_el, "loc")

        # Trailing slash matches the directory-per-route output layout
        path = written.route_path
        if path != "/" and not path.endswith("/"):
            path = path + "/"
        loc.text = base + path

        lastmod = SubElement(url_el, "lastmod")
        lastmod.text = today

    xml_body = tostring(urlset, encoding="unicode", xml_declaration=False)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + xml_body + "\n"


def write_sitemap(
    files: Sequence[WrittenFile],
    base_url: str,
    output_dir: Path,
) -> Path | None:
    """Write sitemap.xml to *output_dir*.

    Returns the sitemap path, or *None* (with a note on stderr) when
    ``base_url`` is empty or nothing was written.

    """
    if not base_url:
        print("  Sitemap skipped — set base_url to enable", file=sys.stderr)
        return None
    if not files:
        return None

    sitemap_path = output_dir / "sitemap.xml"
    atomic_write_bytes(sitemap_path, generate_sitemap(files, base_url).encode("utf-8"))
    return sitemap_path
