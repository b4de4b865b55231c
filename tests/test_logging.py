"""Tests for logging configuration (structlog and stdlib are patched)."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
import structlog

from nodeaudit.core.logging import setup_logging


def _configured(**kwargs):
    with (
        patch("logging.config.dictConfig") as dict_config,
        patch("structlog.configure"),
    ):
        setup_logging(**kwargs)
    return dict_config.call_args.args[0]


class TestSetupLogging:
    def test_defaults_to_console_on_stderr(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("NODEAUDIT_LOG_FORMAT", None)
            os.environ.pop("NODEAUDIT_LOG_LEVEL", None)
            config = _configured()
        renderer = config["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)
        assert config["handlers"]["default"]["stream"] == "ext://sys.stderr"
        assert config["loggers"]["nodeaudit"]["level"] == "INFO"

    def test_arguments_override_environment(self):
        env = {"NODEAUDIT_LOG_FORMAT": "console", "NODEAUDIT_LOG_LEVEL": "WARNING"}
        with patch.dict(os.environ, env):
            config = _configured(level="debug", log_format="json")
        renderer = config["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)
        assert config["root"]["level"] == "DEBUG"

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="unknown log format"):
            setup_logging(log_format="xml")
