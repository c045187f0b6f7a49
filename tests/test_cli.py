"""Tests for the command line interface."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from algtools_mcp.mcp.cli import main


def test_help_lists_commands():
    result = CliRunner().invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "serve" in result.output
    assert "openapi" in result.output


def test_openapi_to_stdout():
    result = CliRunner().invoke(
        main, ["openapi", "--base-url", "https://mcp.example.com/"]
    )

    assert result.exit_code == 0
    spec = json.loads(result.output)
    assert spec["servers"][0]["url"] == "https://mcp.example.com"
    assert "/tools/lookupComponent" in spec["paths"]


def test_openapi_to_file(tmp_path):
    output = tmp_path / "out" / "openapi.json"
    result = CliRunner().invoke(
        main, ["openapi", "--base-url", "http://localhost:8787", "-o", str(output)]
    )

    assert result.exit_code == 0
    assert json.loads(output.read_text())["openapi"] == "3.1.0"


def test_serve_applies_cli_overrides(tmp_path):
    config_file = tmp_path / "config.mcp.yml"
    config_file.write_text("server:\n  port: 9000\n")

    app = MagicMock()
    with patch(
        "algtools_mcp.mcp.cli.build_server",
        return_value=(app, MagicMock(), MagicMock()),
    ) as build_server, patch("algtools_mcp.mcp.cli.uvicorn.run") as run:
        result = CliRunner().invoke(
            main,
            ["serve", "--host", "127.0.0.1", "--config", str(config_file)],
        )

    assert result.exit_code == 0, result.output
    config = build_server.call_args.args[0]
    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9000
    run.assert_called_once()
    assert run.call_args.kwargs["port"] == 9000
    assert "Endpoints:" in result.output


def test_serve_logging_from_config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config_file = tmp_path / "config.mcp.yml"
    config_file.write_text("logging:\n  level: WARNING\n")

    with patch(
        "algtools_mcp.mcp.cli.build_server",
        return_value=(MagicMock(), MagicMock(), MagicMock()),
    ), patch("algtools_mcp.mcp.cli.setup_logging_from_config") as setup, patch(
        "algtools_mcp.mcp.cli.uvicorn.run"
    ) as run:
        result = CliRunner().invoke(main, ["serve", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert setup.call_args.args[0].level == "WARNING"
    assert run.call_args.kwargs["log_level"] == "warning"


def test_serve_log_level_option_wins(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config_file = tmp_path / "config.mcp.yml"
    config_file.write_text("logging:\n  level: WARNING\n")

    with patch(
        "algtools_mcp.mcp.cli.build_server",
        return_value=(MagicMock(), MagicMock(), MagicMock()),
    ), patch("algtools_mcp.mcp.cli.setup_logging_from_config") as setup, patch(
        "algtools_mcp.mcp.cli.uvicorn.run"
    ) as run:
        result = CliRunner().invoke(
            main, ["serve", "--config", str(config_file), "--log-level", "debug"]
        )

    assert result.exit_code == 0, result.output
    assert setup.call_args.args[0].level == "DEBUG"
    assert run.call_args.kwargs["log_level"] == "debug"
