"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle and alternate-screen switching. Restoration is
idempotent and is also hooked into ``atexit`` and ``SIGTERM`` so the user's
shell gets its terminal back no matter how the process goes down.
"""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import signal
import termios
import tty

logger = logging.getLogger(__name__)

ENTER_TUI_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[2J"
EXIT_TUI_SEQUENCE = b"\x1b[0m\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage raw mode and the alternate screen for one session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False
        self._hooks_installed = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        # Marked active first so a failure halfway through still gets undone.
        self._active = True
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI_SEQUENCE)

    def disable_tui_mode(self) -> None:
        """Restore the saved terminal state; later calls are no-ops."""
        if not self._active:
            return
        self._active = False
        try:
            os.write(self.stdout_fd, EXIT_TUI_SEQUENCE)
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def _handle_sigterm(self, signum, _frame) -> None:
        logger.info("received signal %d, restoring terminal", signum)
        self.disable_tui_mode()
        raise SystemExit(128 + signum)

    def install_restore_hooks(self) -> None:
        """Register process-exit and SIGTERM restoration for crash paths."""
        if self._hooks_installed:
            return
        atexit.register(self.disable_tui_mode)
        signal.signal(signal.SIGTERM, self._handle_sigterm)
        self._hooks_installed = True

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
