"""
fswatch Watcher Package.

Event source, coalescing and the watch loop.
Requires Python 3.11+.
"""

from fswatch.watcher.debouncer import Debouncer
from fswatch.watcher.file_watcher import ChannelClosed, EventChannel, FileWatcher
from fswatch.watcher.loop import (
    LoopState,
    TerminationReason,
    WatchConfig,
    WatchLoop,
)

__all__ = [
    "ChannelClosed",
    "Debouncer",
    "EventChannel",
    "FileWatcher",
    "LoopState",
    "TerminationReason",
    "WatchConfig",
    "WatchLoop",
]
