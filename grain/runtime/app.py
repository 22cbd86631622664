"""Runtime composition layer for grain.

Builds the initial state, wires the content source and renderer into the
loop callbacks, and owns terminal setup and restoration.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from functools import partial

from ..render import render_frame
from ..scheduler import RefreshScheduler
from ..source import SourceConfig, read_content
from .loop import RuntimeLoopCallbacks, run_main_loop
from .state import WatchState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def _load_lines(source: SourceConfig, interval_ms: int) -> tuple[str, ...]:
    return read_content(source, interval_ms).lines


def print_snapshot(source: SourceConfig, interval_ms: int) -> None:
    """Write one read of the source to stdout, resetting style after styled lines."""
    out: list[str] = []
    for line in _load_lines(source, interval_ms):
        out.append(line)
        if "\033" in line:
            out.append("\033[0m")
        out.append("\n")
    sys.stdout.write("".join(out))
    sys.stdout.flush()


def run_watch(source: SourceConfig, interval_ms: int, once: bool = False) -> None:
    """Watch ``source`` every ``interval_ms`` milliseconds until the user quits.

    Falls back to a single printed snapshot when ``once`` is set or when
    stdin/stdout is not a terminal.
    """
    if once or not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        print_snapshot(source, interval_ms)
        return

    load_content = partial(_load_lines, source, interval_ms)
    state = WatchState(
        source=source,
        interval_ms=interval_ms,
        scheduler=RefreshScheduler(time.monotonic()),
    )
    state.apply_refresh(load_content())

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    terminal.install_restore_hooks()
    logger.info("watching %s every %dms", source.describe(200), interval_ms)
    run_main_loop(
        state,
        terminal,
        sys.stdin.fileno(),
        RuntimeLoopCallbacks(
            load_content=load_content,
            monotonic=time.monotonic,
            render=render_frame,
        ),
    )
    logger.info("stopped after %d refreshes", state.refresh_count)
