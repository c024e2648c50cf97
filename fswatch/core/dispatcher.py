"""
fswatch Command Dispatcher.

Launches the configured command as a detached child process. The child
is never waited on; its output goes wherever the watcher's own output
goes, and its exit status is not collected. Overlapping runs are allowed.
Requires Python 3.11+.
"""

import subprocess
import sys
from dataclasses import dataclass

from fswatch.core.models import TargetCommand
from fswatch.utils.logger import LoggerMixin


@dataclass(frozen=True, slots=True)
class Launched:
    """The child process was started."""

    pid: int


@dataclass(frozen=True, slots=True)
class LaunchFailed:
    """The OS refused to start the child process."""

    reason: str


DispatchOutcome = Launched | LaunchFailed


class CommandDispatcher(LoggerMixin):
    """
    Fire-and-forget launcher for the target command.

    Launch failures are reported to the operator on stderr and returned
    as LaunchFailed; they never raise.
    """

    def __init__(self, command: TargetCommand) -> None:
        """
        Initialize the dispatcher.

        Args:
            command: Command to run on every trigger
        """
        self._command = command

    def dispatch(self) -> DispatchOutcome:
        """Spawn the command once."""
        try:
            process = subprocess.Popen(
                list(self._command.argv),
                start_new_session=True,
            )
        except OSError as e:
            reason = str(e)
            print(
                f"fswatch: {self._command} failed with error {reason}",
                file=sys.stderr,
                flush=True,
            )
            self.log.warning(
                "command_launch_failed",
                command=str(self._command),
                error=reason,
            )
            return LaunchFailed(reason=reason)

        self.log.debug("command_launched", command=str(self._command), pid=process.pid)
        return Launched(pid=process.pid)
