"""Tests for settings and structured logging."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from prompt_shortcuts.config import Settings
from prompt_shortcuts.utils.logging import (
    StructuredFormatter,
    actor,
    configure_structured_logging,
    get_actor,
)


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self) -> None:
        """Test default values without environment overrides."""
        with patch.dict(os.environ, {}, clear=True):
            config = Settings(_env_file=None)

        assert config.commands_db_path == "data/commands.db"
        assert config.command_prefix == "/"
        assert config.log_level == "INFO"
        assert config.log_json is True

    def test_environment_overrides(self) -> None:
        """Test that environment variables are read case-insensitively."""
        env = {
            "COMMANDS_DB_PATH": "/tmp/other.db",
            "command_prefix": "!",
            "LOG_JSON": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Settings(_env_file=None)

        assert config.commands_db_path == "/tmp/other.db"
        assert config.command_prefix == "!"
        assert config.log_json is False


class TestStructuredLogging:
    """Test suite for the JSON formatter and actor context."""

    def _record(self, msg: str = "hello") -> logging.LogRecord:
        return logging.LogRecord(
            name="prompt_shortcuts.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_format_without_actor(self) -> None:
        """Test that records are JSON without an actor key by default."""
        data = json.loads(StructuredFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "prompt_shortcuts.test"
        assert data["message"] == "hello"
        assert "actor" not in data

    def test_format_with_actor(self) -> None:
        """Test that the acting user is attached inside an actor block."""
        with actor("u1"):
            assert get_actor() == "u1"
            data = json.loads(StructuredFormatter().format(self._record()))

        assert data["actor"] == "u1"
        assert get_actor() == ""

    def test_format_with_exception(self) -> None:
        """Test that exception info is included."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = self._record()
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]

    @pytest.mark.parametrize("json_output", [True, False])
    def test_configure_installs_handler(self, json_output: bool) -> None:
        """Test that configure_structured_logging adds a root handler."""
        previous_level = logging.root.level
        handler = configure_structured_logging(logging.DEBUG, json_output)
        try:
            assert handler in logging.root.handlers
            assert logging.root.level == logging.DEBUG
            assert isinstance(handler.formatter, StructuredFormatter) is json_output
        finally:
            logging.root.removeHandler(handler)
            logging.root.setLevel(previous_level)
