"""ANSI-aware text measurement and line shaping utilities.

Only SGR styling runs (``ESC`` ... ``m``) are understood. They occupy no
columns and are never split, so color applied early in a line still reaches
whatever part of the line ends up on screen.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable

ESC = "\x1b"
SGR_TERMINATOR = "m"
TAB_STOP = 8


def visual_width(line: str) -> int:
    """Return the number of terminal columns ``line`` occupies.

    An unterminated escape run at the end of the line is simply not counted.
    """
    width = 0
    in_escape = False
    for ch in line:
        if ch == ESC:
            in_escape = True
            continue
        if in_escape:
            if ch == SGR_TERMINATOR:
                in_escape = False
            continue
        width += 1
    return width


def max_visual_width(lines: Iterable[str]) -> int:
    return max((visual_width(line) for line in lines), default=0)


def strip_sgr(line: str) -> str:
    """Return ``line`` with every escape run removed."""
    if ESC not in line:
        return line
    out: list[str] = []
    in_escape = False
    for ch in line:
        if ch == ESC:
            in_escape = True
        elif in_escape:
            if ch == SGR_TERMINATOR:
                in_escape = False
        else:
            out.append(ch)
    return "".join(out)


def crop_from_column(line: str, column: int) -> str:
    """Drop the first ``column`` visible characters of ``line``.

    Every complete escape run is kept wherever it appears, including runs that
    precede the crop point. A run left open at end-of-line is flushed as is.
    A non-empty line that crops to nothing becomes a single space so the row
    keeps its height.
    """
    if column <= 0:
        return line

    out: list[str] = []
    escape_buffer: list[str] = []
    in_escape = False
    visual_pos = 0
    for ch in line:
        if in_escape:
            escape_buffer.append(ch)
            if ch == SGR_TERMINATOR:
                in_escape = False
                out.extend(escape_buffer)
                escape_buffer.clear()
        elif ch == ESC:
            in_escape = True
            escape_buffer.append(ch)
        else:
            if visual_pos >= column:
                out.append(ch)
            visual_pos += 1

    if in_escape:
        out.extend(escape_buffer)

    result = "".join(out)
    if not result and line:
        return " "
    return result


def char_display_width(ch: str) -> int:
    """Terminal cells one character occupies on screen.

    Combining marks take none and East Asian wide/fullwidth characters take
    two. Only the renderer uses this; scroll positions count characters.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_to_width(line: str, max_cols: int) -> str:
    """Keep the visible characters of ``line`` that fit in ``max_cols`` cells.

    Escape runs are preserved verbatim so styling that follows the last
    visible character (usually a reset) still reaches the terminal. A wide
    character that would straddle the edge is dropped.
    """
    if max_cols <= 0 or not line:
        return ""

    out: list[str] = []
    in_escape = False
    cells = 0
    full = False
    for ch in line:
        if in_escape:
            out.append(ch)
            if ch == SGR_TERMINATOR:
                in_escape = False
            continue
        if ch == ESC:
            in_escape = True
            out.append(ch)
            continue
        if full:
            continue
        width = char_display_width(ch)
        if cells + width > max_cols:
            full = True
            continue
        out.append(ch)
        cells += width
    return "".join(out)


def expand_tabs(line: str, tab_stop: int = TAB_STOP) -> str:
    """Replace tabs with spaces up to the next tab stop.

    Columns are measured with the same zero-width rules as
    :func:`visual_width`, so styled lines line up with plain ones.
    """
    if "\t" not in line:
        return line

    out: list[str] = []
    in_escape = False
    col = 0
    for ch in line:
        if in_escape:
            out.append(ch)
            if ch == SGR_TERMINATOR:
                in_escape = False
            continue
        if ch == ESC:
            in_escape = True
            out.append(ch)
            continue
        if ch == "\t":
            pad = tab_stop - (col % tab_stop)
            out.append(" " * pad)
            col += pad
            continue
        out.append(ch)
        col += 1
    return "".join(out)
