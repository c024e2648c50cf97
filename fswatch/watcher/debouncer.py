"""
fswatch Debouncer.

Coalesces bursts of raw watchdog events before they reach the watch loop.
Requires Python 3.11+.
"""

import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
)

from fswatch.utils.logger import LoggerMixin

_COALESCED_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}
)


@dataclass
class PendingChange:
    """A pending event waiting for its window to close."""

    event: FileSystemEvent
    # Monotonic time of the first event folded into this change
    timestamp: float


def _key(event: FileSystemEvent) -> str:
    if event.event_type == EVENT_TYPE_MOVED:
        return os.fsdecode(event.dest_path)
    return os.fsdecode(event.src_path)


def _created(path: str, is_directory: bool) -> FileSystemEvent:
    return DirCreatedEvent(path) if is_directory else FileCreatedEvent(path)


def _modified(path: str, is_directory: bool) -> FileSystemEvent:
    return DirModifiedEvent(path) if is_directory else FileModifiedEvent(path)


def _deleted(path: str, is_directory: bool) -> FileSystemEvent:
    return DirDeletedEvent(path) if is_directory else FileDeletedEvent(path)


def _moved(src: str, dest: str, is_directory: bool) -> FileSystemEvent:
    return DirMovedEvent(src, dest) if is_directory else FileMovedEvent(src, dest)


def merge_events(
    previous: FileSystemEvent | None, current: FileSystemEvent
) -> FileSystemEvent | None:
    """
    Fold a new event for a path into the one already pending for it.

    Returns:
        The event to keep pending, or None if the two cancel out
    """
    if previous is None:
        return current

    prev_type = previous.event_type
    cur_type = current.event_type

    if prev_type == EVENT_TYPE_CREATED:
        if cur_type == EVENT_TYPE_MODIFIED:
            return previous
        if cur_type == EVENT_TYPE_DELETED:
            return None
    elif prev_type == EVENT_TYPE_DELETED and cur_type == EVENT_TYPE_CREATED:
        # Replaced in place
        return _modified(_key(current), current.is_directory)
    elif prev_type == EVENT_TYPE_MOVED:
        if cur_type == EVENT_TYPE_MODIFIED:
            return previous
        if cur_type == EVENT_TYPE_DELETED:
            # Renamed away then removed: only the origin is really gone
            return _deleted(os.fsdecode(previous.src_path), previous.is_directory)

    return current


class Debouncer(LoggerMixin):
    """
    Debounces rapid filesystem events.

    Accumulates events per path. Each path is released once ``delay_s``
    has passed since its first pending event, however busy other paths
    are. Events that are not created/modified/deleted/moved are passed
    through immediately. A delay of zero disables coalescing.
    """

    def __init__(
        self,
        delay_s: float = 2.0,
        callback: Callable[[list[FileSystemEvent]], Any] | None = None,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            delay_s: Window in seconds during which events for a path are merged
            callback: Function to call with the coalesced events, in order
        """
        self._delay = delay_s
        self._callback = callback
        self._pending: dict[str, PendingChange] = {}
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def debounce(self, event: FileSystemEvent) -> None:
        """
        Add an event to the pending set.

        Args:
            event: Raw event from the observer
        """
        if self._delay <= 0 or event.event_type not in _COALESCED_TYPES:
            self._emit([event])
            return

        with self._lock:
            self._fold(event)
            self._schedule()

    def _fold(self, event: FileSystemEvent) -> None:
        """Merge event into the pending set. Caller holds the lock."""
        key = _key(event)
        first_seen = time.monotonic()

        if event.event_type == EVENT_TYPE_MOVED:
            origin = self._pending.pop(os.fsdecode(event.src_path), None)
            if origin is not None:
                first_seen = origin.timestamp
                origin_type = origin.event.event_type
                if origin_type == EVENT_TYPE_CREATED:
                    event = _created(key, event.is_directory)
                elif origin_type == EVENT_TYPE_MOVED:
                    event = _moved(
                        os.fsdecode(origin.event.src_path), key, event.is_directory
                    )

        existing = self._pending.get(key)
        merged = merge_events(existing.event if existing else None, event)
        if merged is None:
            self._pending.pop(key, None)
            return

        if existing is not None:
            first_seen = min(first_seen, existing.timestamp)
        merged_key = _key(merged)
        if merged_key != key:
            self._pending.pop(key, None)
        self._pending[merged_key] = PendingChange(event=merged, timestamp=first_seen)

    def _schedule(self) -> None:
        """Arm the timer for the oldest pending change. Caller holds the lock."""
        if self._timer is not None or not self._pending:
            return

        oldest = min(change.timestamp for change in self._pending.values())
        wait = max(0.0, oldest + self._delay - time.monotonic())
        self._timer = threading.Timer(wait, self._process_pending)
        self._timer.daemon = True
        self._timer.start()

    def _process_pending(self) -> None:
        """Release every pending change whose window has closed."""
        with self._lock:
            self._timer = None
            now = time.monotonic()
            due = [
                key
                for key, change in self._pending.items()
                if now - change.timestamp >= self._delay
            ]
            changes = [self._pending.pop(key).event for key in due]
            self._schedule()

        if not changes:
            return

        self.log.debug("processing_debounced_changes", count=len(changes))
        self._emit(changes)

    def _emit(self, changes: list[FileSystemEvent]) -> None:
        if self._callback is None:
            return
        try:
            self._callback(changes)
        except Exception as e:
            self.log.error("debounce_callback_failed", error=str(e))

    def flush(self) -> list[FileSystemEvent]:
        """
        Immediately release all pending events.

        Returns:
            The events that were pending
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

            changes = [change.event for change in self._pending.values()]
            self._pending.clear()

        if changes:
            self._emit(changes)

        return changes

    def clear(self) -> None:
        """Drop all pending events without releasing them."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()

    @property
    def pending_count(self) -> int:
        """Get number of pending events."""
        return len(self._pending)
