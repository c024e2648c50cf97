"""
Tests for configuration and logging setup.

Requires Python 3.11+.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from fswatch import __version__
from fswatch.utils.config import Settings, get_settings
from fswatch.utils.logger import LoggerMixin, configure_logging, get_logger


@pytest.fixture
def restore_root_logging():
    """Undo handlers added by logging.basicConfig."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        settings = get_settings()

        assert settings.app_name == "fswatch"
        assert settings.app_version == __version__
        assert settings.watcher.debounce_interval == 2
        assert settings.watcher.polling is False
        assert settings.logging.level == "WARNING"
        assert settings.logging.format == "console"

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("WATCHER_POLLING", "true")
        monkeypatch.setenv("WATCHER_POLLING_INTERVAL", "0.25")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.watcher.polling is True
        assert settings.watcher.polling_interval == 0.25
        assert settings.logging.level == "DEBUG"

    def test_negative_debounce_rejected(self, monkeypatch):
        monkeypatch.setenv("WATCHER_DEBOUNCE_INTERVAL", "-3")

        with pytest.raises(ValidationError):
            Settings()

    def test_unknown_log_format_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValidationError):
            Settings()


class TestLogging:
    """Test cases for structlog configuration."""

    def test_json_logs_go_to_stderr(self, monkeypatch, capsys, restore_root_logging):
        monkeypatch.setenv("LOG_FORMAT", "json")
        get_settings.cache_clear()

        configure_logging("info")
        get_logger("test").info("watch_started", path="/w")

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "watch_started"
        assert record["path"] == "/w"
        assert record["app"] == "fswatch"
        assert record["level"] == "info"

    def test_level_filters(self, capsys, restore_root_logging):
        configure_logging("error")
        get_logger("test").warning("too_quiet")

        assert "too_quiet" not in capsys.readouterr().err

    def test_mixin_binds_class_logger(self):
        class Thing(LoggerMixin):
            pass

        thing = Thing()

        assert thing.log is thing.log
