"""
fswatch Watch Loop.

Top-level control loop: sets up the matcher, command and event source,
then threads each raw notification through classify, filter and
dispatch until the source fails or the loop is stopped.
Requires Python 3.11+.
"""

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from fswatch.core.classifier import classify
from fswatch.core.dispatcher import CommandDispatcher, DispatchOutcome
from fswatch.core.event_filter import should_trigger
from fswatch.core.matcher import ExclusionMatcher, compile_matcher
from fswatch.core.models import ChangeEvent, TargetCommand, WatchTarget
from fswatch.errors import ConfigError, SourceError
from fswatch.utils.logger import LoggerMixin
from fswatch.watcher.file_watcher import ChannelClosed, FileWatcher


class LoopState(str, Enum):
    """Lifecycle states of the watch loop."""

    INITIALIZING = "initializing"
    WATCHING = "watching"
    TERMINATED = "terminated"


class TerminationReason(str, Enum):
    """Why the loop reached TERMINATED."""

    SETUP_ERROR = "setup_error"
    SOURCE_ERROR = "source_error"
    STOPPED = "stopped"


class EventSource(Protocol):
    """What the loop needs from an event source."""

    def start(self) -> None: ...

    def get(self) -> Any: ...

    def stop(self) -> None: ...


SourceFactory = Callable[..., EventSource]
TriggerHook = Callable[[ChangeEvent, DispatchOutcome], Any]


@dataclass(frozen=True)
class WatchConfig:
    """Everything the loop is started with. Immutable for the whole run."""

    file_path: str | Path
    command: Sequence[str]
    exclude: str | None = None
    debounce_interval: int = 2
    polling: bool = False
    polling_interval: float = 1.0
    stop_timeout: float = 5.0


class WatchLoop(LoggerMixin):
    """
    Runs a watch from setup to termination.

    ``initialize`` performs every fallible setup step before the event
    source is touched. ``step`` is the per-event unit and has no side
    effects beyond dispatch, so ``stop`` can end ``run`` from another
    thread without involving the event-handling logic.
    """

    def __init__(
        self,
        config: WatchConfig,
        source_factory: SourceFactory = FileWatcher,
        dispatcher_factory: Callable[[TargetCommand], CommandDispatcher] = CommandDispatcher,
        on_trigger: TriggerHook | None = None,
    ) -> None:
        """
        Initialize the loop.

        Args:
            config: Startup configuration
            source_factory: Builds the event source from a WatchTarget
            dispatcher_factory: Builds the dispatcher from the TargetCommand
            on_trigger: Called after every dispatch with the event and outcome
        """
        self._config = config
        self._source_factory = source_factory
        self._dispatcher_factory = dispatcher_factory
        self._on_trigger = on_trigger

        self._state = LoopState.INITIALIZING
        self._reason: TerminationReason | None = None
        self._stop_requested = threading.Event()

        self._matcher: ExclusionMatcher | None = None
        self._dispatcher: CommandDispatcher | None = None
        self._target: WatchTarget | None = None
        self._source: EventSource | None = None

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def reason(self) -> TerminationReason | None:
        return self._reason

    def _terminate(self, reason: TerminationReason) -> None:
        self._state = LoopState.TERMINATED
        self._reason = reason

    def initialize(self) -> None:
        """
        Set up the watch.

        The exclusion pattern is compiled and the command validated before
        the event source is built, so configuration errors never leave a
        partial watch behind.

        Raises:
            ConfigError: On an invalid pattern, empty command or unwatchable path
        """
        if self._state is not LoopState.INITIALIZING:
            return

        try:
            self._matcher = compile_matcher(self._config.exclude)
            command = TargetCommand.from_args(self._config.command)
            self._dispatcher = self._dispatcher_factory(command)
            self._target = WatchTarget.from_path(self._config.file_path)

            self._source = self._source_factory(
                self._target,
                debounce_interval=self._config.debounce_interval,
                polling=self._config.polling,
                polling_interval=self._config.polling_interval,
                stop_timeout=self._config.stop_timeout,
            )
            self._source.start()
        except ConfigError as e:
            self.log.error("watch_setup_failed", error=str(e))
            self._terminate(TerminationReason.SETUP_ERROR)
            raise

        self._state = LoopState.WATCHING
        print(f"fswatch: watching {self._target.path} for changes...", flush=True)
        self.log.info(
            "watch_started",
            path=str(self._target.path),
            exclude=self._matcher.pattern,
            command=str(command),
        )

    def step(self, raw: Any) -> tuple[ChangeEvent, DispatchOutcome] | None:
        """
        Handle one raw notification.

        Returns:
            The triggered event and its dispatch outcome, or None if the
            notification was dropped or excluded
        """
        assert self._matcher is not None and self._dispatcher is not None

        event = classify(raw)
        if event is None:
            self.log.debug("event_dropped", raw=repr(raw))
            return None

        if not should_trigger(event, self._matcher):
            self.log.debug("event_excluded", kind=event.kind.value, path=str(event.path))
            return None

        print(f"fswatch: ChangeEvent: {event}", flush=True)
        outcome = self._dispatcher.dispatch()

        if self._on_trigger is not None:
            try:
                self._on_trigger(event, outcome)
            except Exception as e:
                self.log.error("trigger_hook_failed", path=str(event.path), error=str(e))
        return event, outcome

    def run(self) -> None:
        """
        Initialize if needed, then consume events until terminated.

        Returns normally only after ``stop``.

        Raises:
            ConfigError: If setup fails
            SourceError: If the event source's channel fails
        """
        self.initialize()
        if self._state is LoopState.TERMINATED:
            return
        assert self._source is not None

        while True:
            try:
                raw = self._source.get()
            except ChannelClosed as e:
                if self._stop_requested.is_set() and e.error is None:
                    self._terminate(TerminationReason.STOPPED)
                    self.log.info("watch_stopped")
                    return
                self._terminate(TerminationReason.SOURCE_ERROR)
                self.log.error("source_failed", error=str(e))
                raise SourceError(f"watcher error from channel: {e}") from e

            self.step(raw)

    def stop(self) -> None:
        """Ask a running loop to finish. Safe to call from any thread."""
        self._stop_requested.set()
        if self._source is not None:
            self._source.stop()
        elif self._state is LoopState.INITIALIZING:
            self._terminate(TerminationReason.STOPPED)
