"""Tests for snapcat.export.sitemap."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import patch
from xml.etree.ElementTree import fromstring

from snapcat.export.sitemap import generate_sitemap, write_sitemap
from snapcat.export.writer import WrittenFile

_NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"


def _written(tmp_path: Path, *paths: str) -> list[WrittenFile]:
    return [WrittenFile(p, tmp_path / p.strip("/") / "index.html", 10) for p in paths]


class TestGenerateSitemap:
    """generate_sitemap — one <url> per written snapshot."""

    def test_locations(self, tmp_path: Path) -> None:
        xml = generate_sitemap(_written(tmp_path, "/", "/blog/a"), "https://example.com/")
        root = fromstring(xml)
        locs = [el.text for el in root.iter(f"{_NS}loc")]
        assert locs == ["https://example.com/", "https://example.com/blog/a/"]

    def test_has_declaration_and_lastmod(self, tmp_path: Path) -> None:
        xml = generate_sitemap(_written(tmp_path, "/about"), "https://example.com")
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert len(list(fromstring(xml).iter(f"{_NS}lastmod"))) == 1


class TestWriteSitemap:
    """write_sitemap — skipped without base_url or files."""

    def test_writes_file(self, tmp_path: Path) -> None:
        path = write_sitemap(_written(tmp_path, "/"), "https://example.com", tmp_path)
        assert path == tmp_path / "sitemap.xml"
        assert "https://example.com/" in path.read_text()

    def test_skipped_without_base_url(self, tmp_path: Path) -> None:
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            assert write_sitemap(_written(tmp_path, "/"), "", tmp_path) is None
        assert "base_url" in buf.getvalue()
        assert not (tmp_path / "sitemap.xml").exists()

    def test_skipped_without_files(self, tmp_path: Path) -> None:
        assert write_sitemap([], "https://example.com", tmp_path) is None
