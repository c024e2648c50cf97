"""
fswatch Core Package.

Classification, exclusion, trigger decisions and command dispatch.
Requires Python 3.11+.
"""

from fswatch.core.classifier import classify
from fswatch.core.dispatcher import (
    CommandDispatcher,
    DispatchOutcome,
    LaunchFailed,
    Launched,
)
from fswatch.core.event_filter import should_trigger
from fswatch.core.matcher import (
    ExclusionMatcher,
    NullMatcher,
    RegexMatcher,
    compile_matcher,
)
from fswatch.core.models import ChangeEvent, ChangeKind, TargetCommand, WatchTarget

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "CommandDispatcher",
    "DispatchOutcome",
    "ExclusionMatcher",
    "LaunchFailed",
    "Launched",
    "NullMatcher",
    "RegexMatcher",
    "TargetCommand",
    "WatchTarget",
    "classify",
    "compile_matcher",
    "should_trigger",
]
