"""Content acquisition from a file or a spawned command.

Every read produces at least one line. Failures, empty sources, and timeouts
become a single descriptive line instead of an exception, so the refresh loop
simply retries on its next tick.
"""

from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ansi import expand_tabs, strip_sgr
from .interval import source_timeout_seconds

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_PATH = Path("/proc/interrupts")
DEFAULT_STYLE = "monokai"
STATUS_PREFIX_RESERVE = 10
KILL_GRACE_SECONDS = 0.5

STDERR_START = "\x1b[31m"
STDERR_END = "\x1b[0m"

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_UNAVAILABLE = "unavailable"
STATUS_TIMEOUT = "timeout"

NO_COMMAND_OUTPUT = "command produced no output"

# C0 controls other than ESC and TAB, plus DEL and C1 controls.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0a-\x1a\x1c-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}


@dataclass(frozen=True)
class SourceConfig:
    """Where content comes from; ``command`` wins over ``file`` when both are set."""

    file: Path | None = None
    command: tuple[str, ...] | None = None
    highlight: bool = False
    style: str = DEFAULT_STYLE

    @property
    def path(self) -> Path:
        return self.file if self.file is not None else DEFAULT_SOURCE_PATH

    def describe(self, width: int) -> str:
        """Short source label for the status line, truncating long commands."""
        if self.command:
            full_cmd = " ".join(self.command)
            max_len = max(0, width - STATUS_PREFIX_RESERVE)
            if len(full_cmd) > max_len:
                return f"{full_cmd[:max_len]}..."
            return full_cmd
        return str(self.path)


@dataclass(frozen=True)
class SourceResult:
    lines: tuple[str, ...]
    status: str = STATUS_OK


def sanitize_terminal_text(source: str) -> str:
    """Escape control bytes that could move the cursor or ring the bell.

    ESC is kept so SGR styling survives; newlines must already be split off.
    """
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def _sanitize_lines(text: str) -> str:
    """Sanitize each ``\\n``-separated line, dropping a trailing ``\\r``."""
    return "\n".join(sanitize_terminal_text(raw.removesuffix("\r")) for raw in text.split("\n"))


def _split_lines(text: str) -> list[str]:
    """Split sanitized text into lines, expanding tabs and dropping blank lines."""
    out: list[str] = []
    for raw in _sanitize_lines(text).split("\n"):
        line = expand_tabs(raw)
        if not strip_sgr(line).strip():
            continue
        out.append(line)
    return out


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    resolved = style
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        resolved = DEFAULT_STYLE
    formatter = Terminal256Formatter(style=resolved)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_text(text: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Colorize ``text`` with Pygments using a lexer picked from ``path``'s name."""
    try:
        lexer = get_lexer_for_filename(path.name, text)
    except ClassNotFound:
        lexer = TextLexer()
    return pygments_highlight(text, lexer, _formatter_for_style(style))


def read_file_content(config: SourceConfig) -> SourceResult:
    path = config.path
    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.warning("cannot read %s: %s", path, exc)
        return SourceResult((f"read failed: {exc}",), STATUS_UNAVAILABLE)

    # Control bytes are escaped before highlighting so only Pygments' own SGR
    # runs reach the terminal.
    text = _sanitize_lines(_decode(data))
    if config.highlight and text.strip():
        text = highlight_text(text, path, config.style)
    lines = _split_lines(text)
    if not lines:
        label = f"{path} is empty" if config.file is None else f"file {path} is empty"
        return SourceResult((label,), STATUS_EMPTY)
    return SourceResult(tuple(lines))


def _kill_process_group(proc: subprocess.Popen) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    except PermissionError:
        proc.kill()


def read_command_output(command: tuple[str, ...], timeout: float) -> SourceResult:
    """Run ``command`` for at most ``timeout`` seconds and collect its output.

    Standard output lines come first, then standard error lines wrapped in
    red. A command that overruns is killed together with its process group
    and whatever it wrote before that is still returned.
    """
    try:
        proc = subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
    except (OSError, ValueError) as exc:
        logger.warning("cannot spawn %r: %s", command, exc)
        return SourceResult((f"read failed: {exc}",), STATUS_UNAVAILABLE)

    status = STATUS_OK
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("command %r exceeded %.2fs, killing it", command, timeout)
        status = STATUS_TIMEOUT
        _kill_process_group(proc)
        try:
            stdout, stderr = proc.communicate(timeout=KILL_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            # Killed child still has descendants holding the pipes open.
            proc.stdout.close()
            proc.stderr.close()
            proc.wait()
            stdout, stderr = b"", b""

    lines = _split_lines(_decode(stdout))
    lines.extend(f"{STDERR_START}{line}{STDERR_END}" for line in _split_lines(_decode(stderr)))
    if not lines:
        if status == STATUS_TIMEOUT:
            return SourceResult((f"command timed out after {timeout:.1f}s",), STATUS_TIMEOUT)
        return SourceResult((NO_COMMAND_OUTPUT,), STATUS_EMPTY)
    return SourceResult(tuple(lines), status)


def read_content(config: SourceConfig, interval_ms: int) -> SourceResult:
    """Acquire one snapshot of the configured source."""
    if config.command:
        result = read_command_output(config.command, source_timeout_seconds(interval_ms))
    else:
        result = read_file_content(config)
    logger.debug("read %d line(s) from %s (%s)", len(result.lines), config.describe(80), result.status)
    return result
