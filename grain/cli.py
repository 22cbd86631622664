"""Command-line front door for grain.

Parses CLI options over config-file defaults, sets up file logging, and
dispatches into the interactive watch runtime.
"""

from __future__ import annotations

import argparse
import logging
import shlex
from pathlib import Path

from .interval import DEFAULT_INTERVAL, IntervalError, apply_speed, parse_interval, parse_speed
from .runtime import run_watch
from .runtime.config import load_highlight, load_interval, load_log_file, load_speed, load_style
from .source import DEFAULT_SOURCE_PATH, DEFAULT_STYLE, SourceConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

KEY_HELP = """\
keys:
  Up/Down          scroll one line
  Left/Right       scroll one column
  PgUp/PgDn        scroll one page
  Home/End         jump to first/last column
  Ctrl+Home/End    jump to top/bottom
  q/Ctrl+C         quit
"""


def configure_logging(log_file: Path | None, verbose: bool = False) -> None:
    """Route ``grain`` loggers to ``log_file``, or silence them without one.

    The terminal belongs to the UI, so nothing is ever logged to stderr.
    """
    package_logger = logging.getLogger("grain")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = False

    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        return

    try:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"error: cannot open log file {log_file}: {exc}") from exc
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _split_command(parts: list[str] | None) -> tuple[str, ...] | None:
    """Flatten ``-c`` values, splitting each one shell-style (``-c "ls -l"``)."""
    if not parts:
        return None
    argv: list[str] = []
    for part in parts:
        try:
            argv.extend(shlex.split(part))
        except ValueError as exc:
            raise SystemExit(f"error: invalid command {part!r}: {exc}") from exc
    return tuple(argv) or None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grain",
        description="Periodically re-read a file or command output and browse it in the terminal.",
        epilog=KEY_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-i",
        "--interval",
        default=None,
        help=f"refresh interval: 100ms, 1, 2s (minimum 100ms, default {DEFAULT_INTERVAL}).",
    )
    parser.add_argument(
        "-f",
        "--file",
        default=None,
        help=f"file to watch (default: {DEFAULT_SOURCE_PATH}).",
    )
    parser.add_argument(
        "-c",
        "--command",
        nargs=argparse.REMAINDER,
        default=None,
        metavar="COMMAND",
        help=(
            "command to run each refresh; takes precedence over --file. "
            "Must come last: every following argument belongs to the command."
        ),
    )
    parser.add_argument("-s", "--speed", default=None, help="refresh speed multiplier (0.1-10.0).")
    parser.add_argument(
        "--highlight",
        action="store_true",
        default=None,
        help="syntax-highlight file content with Pygments.",
    )
    parser.add_argument("--style", default=None, help=f"Pygments style name (default {DEFAULT_STYLE}).")
    parser.add_argument("--log-file", default=None, help="append debug/info logs to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="log refresh details.")
    parser.add_argument("--once", action="store_true", help="print one snapshot and exit.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the watch loop."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is not None and not args.command:
        parser.error("argument -c/--command: expected a command")

    interval_text = args.interval or load_interval() or DEFAULT_INTERVAL
    try:
        base_interval_ms = parse_interval(interval_text)
    except IntervalError as exc:
        raise SystemExit(f"error: {exc}") from exc
    speed = parse_speed(args.speed if args.speed is not None else load_speed())
    interval_ms = apply_speed(base_interval_ms, speed) if speed != 1.0 else base_interval_ms

    log_file = Path(args.log_file).expanduser() if args.log_file else load_log_file()
    configure_logging(log_file, args.verbose)

    source = SourceConfig(
        file=Path(args.file) if args.file else None,
        command=_split_command(args.command),
        highlight=args.highlight if args.highlight is not None else load_highlight(),
        style=args.style or load_style() or DEFAULT_STYLE,
    )
    run_watch(source, interval_ms, once=args.once)


if __name__ == "__main__":
    main()
