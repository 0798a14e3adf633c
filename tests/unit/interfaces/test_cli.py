"""Tests for the pdfgate CLI entry point."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from pdfgate.interfaces.cli import cli


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HOST", "PORT", "PDFGATE_MAX_CONCURRENT", "PDFGATE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestArgs:
    def test_bind_defaults(self) -> None:
        assert cli.resolve_bind(cli._parse_args([])) == ("0.0.0.0", 3000)

    def test_bind_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "8080")
        assert cli.resolve_bind(cli._parse_args([])) == ("127.0.0.1", 8080)

    def test_flags_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8080")
        args = cli._parse_args(["--host", "::", "--port", "9000"])
        assert cli.resolve_bind(args) == ("::", 9000)

    def test_overrides_only_include_given_flags(self) -> None:
        assert cli.build_cli_overrides(cli._parse_args([])) == {}
        args = cli._parse_args(
            ["--max-concurrent", "4", "--log-level", "DEBUG", "--log-format", "json"]
        )
        assert cli.build_cli_overrides(args) == {
            "max_concurrent": 4,
            "log_level": "DEBUG",
            "log_format": "json",
        }

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args(["--log-level", "CHATTY"])


class TestStart:
    def test_start_runs_uvicorn_with_loaded_config(self) -> None:
        log_config = {"version": 1}
        with patch.object(cli.uvicorn, "run") as run, patch.object(
            cli, "configure_logging", MagicMock(return_value=log_config)
        ) as configure:
            cli.start(["--port", "3100", "--max-concurrent", "3"])

        config = configure.call_args.args[0]
        assert config.max_concurrent == 3
        app = run.call_args.args[0]
        assert app.state.config is config
        assert run.call_args.kwargs == {
            "host": "0.0.0.0",
            "port": 3100,
            "log_config": log_config,
        }

    def test_missing_config_file_fails(self, tmp_path) -> None:
        with patch.object(cli.uvicorn, "run") as run, pytest.raises(FileNotFoundError):
            cli.start(["--config", str(tmp_path / "missing.yaml")])
        run.assert_not_called()
