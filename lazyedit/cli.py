"""Command-line front door for lazyedit.

Parses CLI options, opens the text source (a named file or redirected stdin),
and dispatches into the interactive editing runtime.
"""

from __future__ import annotations

import argparse
import contextlib
import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO

from . import __version__
from .errors import IOOpenError, LazyEditError, UsageError
from .runtime import run_editor
from .runtime.config import load_settings

logger = logging.getLogger(__name__)

LOG_ENV_VAR = "LAZYEDIT_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyedit",
        description="View piped or file text and edit it one line at a time in the terminal.",
    )
    parser.add_argument("filename", nargs="?", default=None, help="File to read. Defaults to redirected stdin.")
    parser.add_argument("--tab-width", type=_positive_int, default=None, help="Tab stop width (default: 4).")
    parser.add_argument("--no-terminators", action="store_true", help="Do not draw line-terminator glyphs.")
    parser.add_argument(
        "--log-file",
        default=None,
        help=f"Write debug log records to this file (default: ${LOG_ENV_VAR} if set).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(log_file: str | None) -> None:
    """Attach a DEBUG file handler to the ``lazyedit`` logger when a path is given.

    Raises ``IOOpenError`` when the log file cannot be opened.
    """
    path = log_file or os.environ.get(LOG_ENV_VAR, "").strip()
    if not path:
        return
    try:
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        raise IOOpenError(f"cannot open log file {path}: {exc.strerror or exc}") from exc
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("lazyedit")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


@contextlib.contextmanager
def open_source(filename: str | None, prog: str):
    """Yield ``(reader, display_name)`` for the text source, closing files on exit."""
    if filename is not None:
        path = Path(filename)
        try:
            handle: BinaryIO = path.open("rb")
        except OSError as exc:
            raise IOOpenError(f"{filename}: {exc.strerror or exc}") from exc
        with handle:
            yield handle, path.name
        return
    if sys.stdin.isatty():
        raise UsageError(f"Usage: {prog} FILENAME  or  {prog} < FILENAME")
    yield sys.stdin.buffer, "<stdin>"


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run an editing session.

    Any ``LazyEditError`` becomes ``SystemExit`` with its message, which prints
    to stderr and exits with status 1. Quitting from the editor returns normally.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_file)
        settings = load_settings()
        if args.tab_width is not None:
            settings = dataclasses.replace(settings, tab_width=args.tab_width)
        if args.no_terminators:
            settings = dataclasses.replace(settings, show_terminators=False)

        with open_source(args.filename, parser.prog) as (reader, name):
            run_editor(reader, name, settings)
    except LazyEditError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        raise SystemExit(str(exc)) from exc
    except KeyboardInterrupt:
        logger.info("interrupted")


if __name__ == "__main__":
    main()
