"""
fswatch Error Types.

Startup errors are fatal and propagate to the CLI. Runtime launch
failures never leave the dispatcher, so they have no exception here.
Requires Python 3.11+.
"""


class FswatchError(Exception):
    """Base class for all fswatch errors."""


class ConfigError(FswatchError):
    """Raised when the watch cannot be set up from the given configuration."""


class InvalidPattern(ConfigError):
    """The exclusion pattern is not a valid regular expression."""

    def __init__(self, pattern: str, diagnostic: str) -> None:
        self.pattern = pattern
        self.diagnostic = diagnostic
        super().__init__(
            f"Could not compile regular expression {pattern!r} "
            f"for 'exclude' argument: {diagnostic}"
        )


class UnwatchablePath(ConfigError):
    """The root path cannot be registered with the event source."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to watch filepath {path}: {reason}")


class EmptyCommand(ConfigError):
    """No command was given to run on changes."""

    def __init__(self) -> None:
        super().__init__("No command given: at least an executable name is required")


class SourceError(FswatchError):
    """The event source's delivery channel closed or failed mid-run."""
