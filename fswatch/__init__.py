"""
fswatch.

Watches a file or directory tree and runs a command when it changes.
Requires Python 3.11+.
"""

__version__ = "0.1.0"

from fswatch.errors import (
    ConfigError,
    EmptyCommand,
    FswatchError,
    InvalidPattern,
    SourceError,
    UnwatchablePath,
)

__all__ = [
    "__version__",
    "ConfigError",
    "EmptyCommand",
    "FswatchError",
    "InvalidPattern",
    "SourceError",
    "UnwatchablePath",
]
