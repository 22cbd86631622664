"""Frame composition for the status row, separator, and content rows.

Layout degrades as the terminal shrinks: the separator goes first, then the
status row, and content always keeps at least one row.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from .ansi import ESC, clip_to_width
from .interval import format_interval
from .viewport import VisibleWindow

STATUS_HEIGHT = 1
SEPARATOR_HEIGHT = 1
MIN_FULL_LAYOUT_ROWS = STATUS_HEIGHT + SEPARATOR_HEIGHT + 1
STATUS_SGR = "\033[32m"
RESET_SGR = "\033[0m"
ERASE_LINE = "\033[2K"


@dataclass(frozen=True)
class ScreenLayout:
    """Row assignment for one terminal size; ``None`` rows are not drawn."""

    status_row: int | None
    separator_row: int | None
    content_top: int
    window: VisibleWindow


def compute_layout(columns: int, rows: int) -> ScreenLayout:
    width = max(1, columns)
    if rows >= MIN_FULL_LAYOUT_ROWS:
        return ScreenLayout(
            status_row=0,
            separator_row=STATUS_HEIGHT,
            content_top=STATUS_HEIGHT + SEPARATOR_HEIGHT,
            window=VisibleWindow(width, rows - STATUS_HEIGHT - SEPARATOR_HEIGHT),
        )
    if rows >= STATUS_HEIGHT + 1:
        return ScreenLayout(
            status_row=0,
            separator_row=None,
            content_top=STATUS_HEIGHT,
            window=VisibleWindow(width, rows - STATUS_HEIGHT),
        )
    return ScreenLayout(status_row=None, separator_row=None, content_top=0, window=VisibleWindow(width, 1))


def build_status_line(source_text: str, interval_ms: int) -> str:
    return f"{source_text}  {format_interval(interval_ms)}"


def compose_frame(layout: ScreenLayout, status_text: str, lines: Sequence[str]) -> str:
    """Return the escape-sequence payload that paints one full frame."""
    width = layout.window.width
    rows: list[str] = []
    if layout.status_row is not None:
        rows.append(f"{STATUS_SGR}{clip_to_width(status_text, width)}{RESET_SGR}")
    if layout.separator_row is not None:
        rows.append("")
    for row in range(layout.window.height):
        if row >= len(lines):
            rows.append("")
            continue
        text = clip_to_width(lines[row], width)
        if ESC in text:
            text += RESET_SGR
        rows.append(text)

    out: list[str] = ["\033[H"]
    for idx, text in enumerate(rows):
        # Clear before writing: erasing after a full-width row would eat its last cell.
        out.append(ERASE_LINE)
        out.append(text)
        if idx < len(rows) - 1:
            out.append("\r\n")
    return "".join(out)


def render_frame(layout: ScreenLayout, status_text: str, lines: Sequence[str]) -> None:
    payload = compose_frame(layout, status_text, lines)
    os.write(sys.stdout.fileno(), payload.encode("utf-8", errors="replace"))
