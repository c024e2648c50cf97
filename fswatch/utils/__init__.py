"""
fswatch Utilities Package.

Configuration and logging shared across the watcher.
Requires Python 3.11+.
"""

from fswatch.utils.config import Settings, get_settings
from fswatch.utils.logger import configure_logging, get_logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggerMixin",
]
