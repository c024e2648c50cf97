"""
fswatch Core Data Models.

Value types shared by the classifier, filter, dispatcher and loop.
Requires Python 3.11+.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from fswatch.errors import EmptyCommand


class ChangeKind(str, Enum):
    """Semantic kinds of filesystem change that can trigger a command."""

    CREATED = "Created"
    MODIFIED = "Modified"
    REMOVED = "Removed"
    RENAMED = "Renamed"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """One classified filesystem occurrence."""

    kind: ChangeKind
    path: Path
    origin_path: Path | None = None

    def __str__(self) -> str:
        if self.origin_path is not None:
            return f"{self.kind.value}({self.origin_path} -> {self.path})"
        return f"{self.kind.value}({self.path})"


@dataclass(frozen=True, slots=True)
class WatchTarget:
    """The root path being observed for the lifetime of the process."""

    path: Path
    is_dir: bool

    @classmethod
    def from_path(cls, file_path: str | Path) -> "WatchTarget":
        """Build a target from user input, resolving it to an absolute path."""
        path = Path(file_path).expanduser().resolve()
        return cls(path=path, is_dir=path.is_dir())

    @property
    def recursive(self) -> bool:
        """Directories are watched recursively, single files are not."""
        return self.is_dir


@dataclass(frozen=True, slots=True)
class TargetCommand:
    """Executable name plus its ordered arguments."""

    argv: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.argv:
            raise EmptyCommand()

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "TargetCommand":
        """Build a command from a CLI argument list."""
        return cls(argv=tuple(args))

    @property
    def executable(self) -> str:
        return self.argv[0]

    def __str__(self) -> str:
        return " ".join(self.argv)
