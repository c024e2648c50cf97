"""Module entry point for ``python -m fswatch``."""

from fswatch.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
