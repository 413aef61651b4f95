"""Atto CLI entry point.

Allows running via `python -m atto` and provides the console script
defined in `pyproject.toml`.

Usage:
    atto [--version] [--log FILE] [path]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__

logger = logging.getLogger(__name__)

USAGE = "usage: atto [--version] [--log FILE] [path]"


def ensure_file(path: str) -> None:
    """Create an empty file at path if nothing exists there yet."""
    p = Path(path)
    if not p.exists():
        p.touch()
        logger.info(f"Created {path}")


def _parse_args(args: list[str]) -> tuple[Optional[str], Optional[str]]:
    """Return (filename, log file) or raise SystemExit on bad usage."""
    filename = None
    log_file = None
    while args:
        arg = args.pop(0)
        if arg == '--log':
            if not args:
                raise SystemExit(USAGE)
            log_file = args.pop(0)
        elif arg.startswith('-') and arg != '-':
            raise SystemExit(USAGE)
        elif filename is None:
            filename = arg
        else:
            raise SystemExit(USAGE)
    return filename, log_file


def main() -> None:
    # Very small arg parsing: version, optional log file and optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(f"atto {__version__}")
        return
    filename, log_file = _parse_args(list(args))
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    # Lazy import to avoid importing terminal deps for --version
    from .config import load_config
    from .editor import Editor

    config = load_config()
    try:
        if filename:
            ensure_file(filename)
        editor = Editor(filename, config)
        editor.session.load_file()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        sys.exit(1)
    editor.run()
    if editor.exit_message:
        print(editor.exit_message, file=sys.stderr)


if __name__ == "__main__":  # pragma: no cover
    main()
