"""Main interactive event loop for the terminal UI.

One iteration: observe the terminal size, refresh if the schedule says so,
repaint when something changed, then wait a bounded time for one key.
Everything runs on a single thread, so refresh and navigation never overlap.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..input import read_key
from ..render import ScreenLayout
from ..scheduler import POLL_TIMEOUT_CAP
from .state import WatchState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "Q", "CTRL_C"})


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    load_content: Callable[[], Sequence[str]]
    monotonic: Callable[[], float]
    render: Callable[[ScreenLayout, str, Sequence[str]], None]


def run_main_loop(
    state: WatchState,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the loop until a quit key arrives."""
    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            if state.observe_terminal_size(term.columns, term.lines):
                logger.debug("visible window now %sx%s", state.window.width, state.window.height)

            if state.scheduler.consume_due(callbacks.monotonic(), state.interval_seconds):
                if state.apply_refresh(callbacks.load_content()):
                    logger.debug("content replaced (%d lines)", len(state.content))

            if state.dirty:
                callbacks.render(state.layout, state.status_text(), state.visible_lines())
                state.dirty = False

            timeout = state.scheduler.poll_timeout(
                callbacks.monotonic(),
                state.interval_seconds,
                POLL_TIMEOUT_CAP,
            )
            key = read_key(stdin_fd, timeout_ms=int(timeout * 1000))
            if key == "":
                continue
            if key in QUIT_KEYS:
                break
            state.navigate(key)
