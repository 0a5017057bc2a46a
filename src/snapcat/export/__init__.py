"""Snapshot export — persist captured documents for static hosting."""

from snapcat.export.sitemap import generate_sitemap, write_sitemap
from snapcat.export.writer import OutputWriter, WrittenFile, output_path_for

__all__ = [
    "OutputWriter",
    "WrittenFile",
    "generate_sitemap",
    "output_path_for",
    "write_sitemap",
]
