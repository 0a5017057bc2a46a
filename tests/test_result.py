"""Tests for snapcat.render.result — per-route outcome records."""

from __future__ import annotations

import pytest

from snapcat.render.result import Outcome, RenderResult
from snapcat.routes import Route, RouteKind

ROUTE = Route("/blog/a", RouteKind.DETAIL)


class TestRenderResult:
    """html is present exactly for successes."""

    def test_success(self) -> None:
        result = RenderResult.success(ROUTE, "<html></html>", duration_ms=12.0)
        assert result.outcome is Outcome.SUCCESS
        assert result.html == "<html></html>"
        assert result.error_detail is None
        assert result.duration_ms == 12.0

    def test_skipped(self) -> None:
        result = RenderResult.skipped(ROUTE, "readiness timed out")
        assert result.outcome is Outcome.SKIPPED
        assert result.html is None
        assert result.error_detail == "readiness timed out"

    def test_failed(self) -> None:
        result = RenderResult.failed(ROUTE, "Error: net::ERR_CONNECTION_REFUSED")
        assert result.outcome is Outcome.FAILED
        assert result.html is None

    def test_success_requires_html(self) -> None:
        with pytest.raises(ValueError, match="SUCCESS"):
            RenderResult(ROUTE, Outcome.SUCCESS)

    def test_failure_cannot_carry_html(self) -> None:
        with pytest.raises(ValueError, match="SUCCESS"):
            RenderResult(ROUTE, Outcome.FAILED, html="<html></html>")

    def test_empty_document_is_still_html(self) -> None:
        assert RenderResult.success(ROUTE, "").html == ""
