"""
fswatch Command Line Interface.

Usage:
    fswatch [-d SECONDS] [-e PATTERN] FILE_PATH COMMAND [ARGS...]

Options must come before FILE_PATH; everything after it is the command,
taken verbatim.
"""

import argparse
import signal
import sys
from collections.abc import Sequence
from typing import Any

from fswatch import __version__
from fswatch.errors import ConfigError, SourceError
from fswatch.utils.config import get_settings
from fswatch.utils.logger import configure_logging, get_logger
from fswatch.watcher.loop import WatchConfig, WatchLoop

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_SOURCE_ERROR = 3
EXIT_INTERRUPTED = 130

logger = get_logger("fswatch.cli")


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser, taking defaults from settings."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="fswatch",
        description="Watches a file path for changes; runs a command on those changes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-d",
        "--debounce-interval",
        type=_non_negative_int,
        default=settings.watcher.debounce_interval,
        help="Interval in seconds used to debounce file change events (default: %(default)s)",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        default=None,
        help="Regex pattern to exclude from watch",
    )
    parser.add_argument(
        "--poll",
        action="store_true",
        default=settings.watcher.polling,
        help="Poll the filesystem instead of using native notifications",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Diagnostic log level (default: LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "file_path",
        help=(
            "File or directory to watch for changes. Glob patterns are not "
            "supported: use --exclude to filter changes in a directory"
        ),
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run when the file path changes",
    )
    return parser


def _command_from(args: argparse.Namespace) -> list[str]:
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    return command


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    settings = get_settings()
    config = WatchConfig(
        file_path=args.file_path,
        command=_command_from(args),
        exclude=args.exclude,
        debounce_interval=args.debounce_interval,
        polling=args.poll,
        polling_interval=settings.watcher.polling_interval,
        stop_timeout=settings.watcher.stop_timeout,
    )
    loop = WatchLoop(config)

    def _on_sigterm(signum: int, frame: Any) -> None:
        logger.info("signal_received", signal=signum)
        loop.stop()

    previous_handler = signal.signal(signal.SIGTERM, _on_sigterm)

    try:
        loop.run()
    except ConfigError as e:
        print(f"fswatch: error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except SourceError as e:
        print(f"fswatch: error: {e}", file=sys.stderr)
        return EXIT_SOURCE_ERROR
    except KeyboardInterrupt:
        loop.stop()
        print("\nfswatch: stopped", file=sys.stderr)
        return EXIT_INTERRUPTED
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
