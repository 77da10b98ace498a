"""Tests for the command-line entry point and logging setup."""

import logging

import pytest

from heckproxy import __main__ as cli
from heckproxy.logging import LOGGER_NAME, setup_logging


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    for name in ("HECKPROXY_HOST", "HECKPROXY_PORT", "HECKPROXY_LOG_LEVEL", "AUTH_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "config_cli.yaml"
    path.write_text(
        "proxy_settings:\n  server:\n    host: 0.0.0.0\n    port: 9100\n",
        encoding="utf-8",
    )
    return path


class TestMain:
    def test_uses_configured_address(self, monkeypatch, config_file):
        calls = {}
        monkeypatch.setattr(
            cli.uvicorn, "run", lambda app, host, port: calls.update(app=app, host=host, port=port)
        )

        cli.main(["--config", str(config_file)])

        assert (calls["host"], calls["port"]) == ("0.0.0.0", 9100)
        assert calls["app"].title == "heckproxy"

    def test_command_line_overrides_config(self, monkeypatch, config_file):
        calls = {}
        monkeypatch.setattr(
            cli.uvicorn, "run", lambda app, host, port: calls.update(host=host, port=port)
        )

        cli.main(["--config", str(config_file), "--host", "127.0.0.2", "--port", "9200"])

        assert calls == {"host": "127.0.0.2", "port": 9200}

    def test_parse_args_defaults(self):
        args = cli.parse_args([])
        assert args.config is None
        assert args.host is None
        assert args.port is None


class TestSetupLogging:
    def test_installs_single_stdout_handler(self):
        setup_logging("DEBUG")
        logger = setup_logging("warning")

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("chatty").level == logging.INFO
