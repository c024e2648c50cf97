"""
fswatch File Watcher.

Cross-platform event source built on watchdog. Raw notifications are
debounced and delivered, in order, through an unbounded channel that the
watch loop consumes from a single thread.
Requires Python 3.11+.
"""

import os
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from watchdog.events import EVENT_TYPE_MOVED, FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.observers.polling import PollingObserver

from fswatch.core.models import WatchTarget
from fswatch.errors import SourceError, UnwatchablePath
from fswatch.utils.logger import LoggerMixin
from fswatch.watcher.debouncer import Debouncer


class ChannelClosed(Exception):
    """Raised by EventChannel.get once the channel has been closed."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error
        super().__init__(str(error) if error else "channel closed")


@dataclass(frozen=True)
class _Close:
    error: BaseException | None


class EventChannel:
    """
    Single-producer/single-consumer FIFO between the source and the loop.

    Closing enqueues a marker behind any items already delivered, so the
    consumer drains them before seeing the close. Items put after close
    are discarded.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[Any] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: Any) -> None:
        with self._lock:
            if self._closed:
                return
            self._queue.put(item)

    def close(self, error: BaseException | None = None) -> None:
        """Close the channel, optionally recording why it failed."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_Close(error))

    def get(self) -> Any:
        """
        Block until the next item is available.

        Raises:
            ChannelClosed: If the channel was closed
        """
        item = self._queue.get()
        if isinstance(item, _Close):
            # Leave the marker for any later reader
            self._queue.put(item)
            raise ChannelClosed(item.error)
        return item


class ChangeHandler(FileSystemEventHandler, LoggerMixin):
    """
    Forwards every watchdog event to the debouncer.

    When watching a single file the parent directory is scheduled, so
    events for siblings are discarded here.
    """

    def __init__(self, debouncer: Debouncer, only: Path | None = None) -> None:
        """
        Initialize the handler.

        Args:
            debouncer: Debouncer to accumulate events
            only: Restrict events to this exact path
        """
        super().__init__()
        self._debouncer = debouncer
        self._only = os.fsdecode(only) if only is not None else None

    def _concerns(self, event: FileSystemEvent) -> bool:
        if self._only is None:
            return True
        if os.fsdecode(event.src_path) == self._only:
            return True
        return (
            event.event_type == EVENT_TYPE_MOVED
            and os.fsdecode(event.dest_path) == self._only
        )

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Handle any filesystem event."""
        if not self._concerns(event):
            return
        self.log.debug(
            "raw_event",
            event_type=event.event_type,
            path=os.fsdecode(event.src_path),
        )
        self._debouncer.debounce(event)


class FileWatcher(LoggerMixin):
    """
    Watches a file or directory tree and delivers debounced raw events.

    Uses the native watchdog observer by default, or the polling observer
    when requested. A supervisor thread closes the channel with a
    SourceError if the observer dies without being stopped.
    """

    def __init__(
        self,
        target: WatchTarget,
        debounce_interval: float = 2,
        polling: bool = False,
        polling_interval: float = 1.0,
        stop_timeout: float = 5.0,
    ) -> None:
        """
        Initialize the file watcher.

        Args:
            target: Root to watch
            debounce_interval: Coalescing window in seconds
            polling: Use the polling observer instead of the native one
            polling_interval: Seconds between polling scans
            stop_timeout: Seconds to wait for the observer thread on stop
        """
        self._target = target
        self._polling = polling
        self._polling_interval = polling_interval
        self._stop_timeout = stop_timeout

        self._channel = EventChannel()
        self._debouncer = Debouncer(
            delay_s=debounce_interval,
            callback=self._deliver,
        )
        self._handler = ChangeHandler(
            debouncer=self._debouncer,
            only=None if target.is_dir else target.path,
        )

        self._observer: BaseObserver | None = None
        self._supervisor: threading.Thread | None = None
        self._stopping = threading.Event()

    @property
    def channel(self) -> EventChannel:
        return self._channel

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._observer is not None and not self._stopping.is_set()

    def _deliver(self, events: list[FileSystemEvent]) -> None:
        for event in events:
            self._channel.put(event)

    def _make_observer(self) -> BaseObserver:
        if self._polling:
            return PollingObserver(timeout=self._polling_interval)
        return Observer()

    def start(self) -> None:
        """
        Register the target and start delivering events.

        Raises:
            UnwatchablePath: If the target cannot be watched
        """
        if self._observer is not None:
            return

        path = self._target.path
        if not path.exists():
            raise UnwatchablePath(str(path), "No such file or directory")

        watch_path = path if self._target.is_dir else path.parent
        observer = self._make_observer()
        try:
            observer.schedule(
                self._handler,
                str(watch_path),
                recursive=self._target.recursive,
            )
            observer.start()
        except OSError as e:
            raise UnwatchablePath(str(path), e.strerror or str(e)) from e

        self._observer = observer
        self._supervisor = threading.Thread(
            target=self._supervise,
            name="fswatch-supervisor",
            daemon=True,
        )
        self._supervisor.start()

        self.log.info(
            "file_watcher_started",
            path=str(path),
            recursive=self._target.recursive,
            polling=self._polling,
        )

    def _supervise(self) -> None:
        observer = self._observer
        if observer is None:
            return
        observer.join()
        if not self._stopping.is_set():
            self.log.error("source_failed", path=str(self._target.path))
            self._channel.close(SourceError("filesystem observer stopped unexpectedly"))

    def get(self) -> Any:
        """
        Block until the next raw event is available.

        Raises:
            ChannelClosed: Once the watcher is stopped or has failed
        """
        return self._channel.get()

    def stop(self) -> None:
        """Stop watching and close the channel. Pending events are dropped."""
        if self._stopping.is_set():
            return
        self._stopping.set()

        self._debouncer.clear()

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=self._stop_timeout)

        self._channel.close()
        self.log.info("file_watcher_stopped")

    def __enter__(self) -> "FileWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
