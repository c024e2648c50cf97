"""
fswatch Event Classifier.

Normalizes raw watchdog notifications into ChangeEvents.
Requires Python 3.11+.
"""

import os
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
)

from fswatch.core.models import ChangeEvent, ChangeKind

_KINDS: dict[str, ChangeKind] = {
    EVENT_TYPE_CREATED: ChangeKind.CREATED,
    EVENT_TYPE_MODIFIED: ChangeKind.MODIFIED,
    EVENT_TYPE_DELETED: ChangeKind.REMOVED,
    EVENT_TYPE_MOVED: ChangeKind.RENAMED,
}


def _as_path(raw_path: str | bytes) -> Path:
    return Path(os.fsdecode(raw_path))


def classify(raw: FileSystemEvent) -> ChangeEvent | None:
    """
    Map a raw notification to a ChangeEvent.

    Open/close notifications and anything else outside the four change
    kinds yield None. So do modifications of directories: the backends
    report those for a parent whenever a child is added or removed, and
    the child's own event already describes the change.

    Args:
        raw: Notification from the event source

    Returns:
        The classified event, or None if it should be dropped
    """
    kind = _KINDS.get(getattr(raw, "event_type", None))
    if kind is None:
        return None

    if kind is ChangeKind.MODIFIED and raw.is_directory:
        return None

    if kind is ChangeKind.RENAMED:
        return ChangeEvent(
            kind=kind,
            path=_as_path(raw.dest_path),
            origin_path=_as_path(raw.src_path),
        )

    return ChangeEvent(kind=kind, path=_as_path(raw.src_path))
