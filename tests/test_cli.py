"""Tests for snapcat._cli — argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from snapcat._cli import _build_parser, _overrides, main
from snapcat.orchestrator import RunSummary, Stage

from .conftest import write_manifest


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_run_defaults_are_unset(self) -> None:
        args = _build_parser().parse_args(["run"])
        assert args.command == "run"
        assert args.root == "."
        assert args.port is None
        assert args.dist_dir is None
        assert args.static_routes is None

    def test_run_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "run", "my-app/",
            "--dist", "dist/dev-digest/browser",
            "--output", "public",
            "--manifest", "blog/list.json",
            "--port", "4300",
            "--navigation-timeout", "45",
            "--readiness-timeout", "20",
            "--warmup", "3",
            "--browser-executable", "/usr/bin/chromium",
            "--serve-command", "npx ng serve",
            "--base-url", "https://example.com",
            "--static-route", "/about",
            "--static-route", "/contact",
        ])
        assert args.root == "my-app/"
        assert args.dist_dir == "dist/dev-digest/browser"
        assert args.port == 4300
        assert args.navigation_timeout == 45.0
        assert args.warmup_delay == 3.0
        assert args.static_routes == ["/about", "/contact"]

    def test_serve_args(self) -> None:
        args = _build_parser().parse_args(["serve", "--port", "8080"])
        assert args.command == "serve"
        assert args.port == 8080

    def test_overrides_exclude_positional_and_meta(self) -> None:
        args = _build_parser().parse_args(["-v", "routes", "app/", "--port", "1"])
        overrides = _overrides(args)
        assert "root" not in overrides
        assert "command" not in overrides
        assert "verbose" not in overrides
        assert overrides["port"] == 1

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            _build_parser().parse_args(["--version"])
        assert excinfo.value.code == 0
        assert "snapcat" in capsys.readouterr().out


class TestMain:
    """main — dispatch and exit codes."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_routes_lists_plan(
        self, tmp_project: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["routes", str(tmp_project), "--static-route", "/about"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [line.split()[:2] for line in lines] == [
            ["listing", "/"],
            ["static", "/about"],
            ["detail", "/blog/hello-world"],
            ["detail", "/blog/second-post"],
        ]

    def test_routes_bad_manifest_exits_1(
        self, tmp_project: Path, tmp_dist: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_manifest(tmp_dist / "blog" / "list.json", {"slug": "a"})
        assert main(["routes", str(tmp_project)]) == 1
        assert "JSON array" in capsys.readouterr().err

    def test_run_returns_summary_exit_code(self, tmp_project: Path) -> None:
        summary = RunSummary(outcome_stage=Stage.FATAL_FAILURE, exit_code=1)
        with patch("snapcat.app.snapshot", return_value=summary) as snapshot:
            assert main(["run", str(tmp_project), "--port", "0"]) == 1
        snapshot.assert_called_once()
        assert snapshot.call_args.args == (str(tmp_project),)
        assert snapshot.call_args.kwargs["port"] == 0

    def test_config_error_exits_1(
        self, tmp_project: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["routes", str(tmp_project), "--port", "99999"])
        assert code == 1
        assert "port out of range" in capsys.readouterr().err
