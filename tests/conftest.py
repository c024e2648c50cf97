"""
fswatch Test Configuration.

Pytest fixtures and test doubles.
Requires Python 3.11+.
"""

import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from fswatch.core.dispatcher import Launched
from fswatch.core.models import TargetCommand, WatchTarget
from fswatch.utils.config import get_settings
from fswatch.watcher.file_watcher import EventChannel

_ENV_VARS = (
    "WATCHER_DEBOUNCE_INTERVAL",
    "WATCHER_POLLING",
    "WATCHER_POLLING_INTERVAL",
    "WATCHER_STOP_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test against default settings and unconfigured structlog."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


class FakeSource:
    """In-memory event source; tests feed its channel directly."""

    def __init__(self, target: WatchTarget, **kwargs: Any) -> None:
        self.target = target
        self.kwargs = kwargs
        self.channel = EventChannel()
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def get(self) -> Any:
        return self.channel.get()

    def stop(self) -> None:
        self.stopped = True
        self.channel.close()


class RecordingDispatcher:
    """Dispatcher double that counts launches instead of spawning."""

    def __init__(self, command: TargetCommand) -> None:
        self.command = command
        self.calls = 0

    def dispatch(self) -> Launched:
        self.calls += 1
        return Launched(pid=0)


@pytest.fixture
def sources() -> list[FakeSource]:
    """Every FakeSource built by ``source_factory`` in this test."""
    return []


@pytest.fixture
def source_factory(sources: list[FakeSource]):
    """Factory that builds and records FakeSources."""

    def factory(target: WatchTarget, **kwargs: Any) -> FakeSource:
        source = FakeSource(target, **kwargs)
        sources.append(source)
        return source

    return factory


@pytest.fixture
def dispatchers() -> list[RecordingDispatcher]:
    """Every RecordingDispatcher built by ``dispatcher_factory`` in this test."""
    return []


@pytest.fixture
def dispatcher_factory(dispatchers: list[RecordingDispatcher]):
    """Factory that builds and records RecordingDispatchers."""

    def factory(command: TargetCommand) -> RecordingDispatcher:
        dispatcher = RecordingDispatcher(command)
        dispatchers.append(dispatcher)
        return dispatcher

    return factory


@pytest.fixture
def noop_command() -> list[str]:
    """A command that always launches and exits immediately."""
    return [sys.executable, "-c", "pass"]


@pytest.fixture
def watch_dir(tmp_path: Path) -> Path:
    """Directory to watch, kept apart from other test files."""
    path = tmp_path / "watched"
    path.mkdir()
    return path.resolve()
