"""
fswatch Event Filter.

Requires Python 3.11+.
"""

from fswatch.core.matcher import ExclusionMatcher
from fswatch.core.models import ChangeEvent


def should_trigger(event: ChangeEvent | None, matcher: ExclusionMatcher) -> bool:
    """
    Decide whether a classified event should run the command.

    Only the event's current path is checked. A rename into an excluded
    name is suppressed; a rename out of one is not.
    """
    if event is None:
        return False
    return not matcher.matches(event.path)
