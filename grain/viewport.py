"""Scroll state over a periodically replaced body of lines.

The viewport owns only two offsets. Bounds are always derived from the
content and window passed in at call time, never cached, so a refresh or a
resize can never leave an offset pointing past the end of the content.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .ansi import crop_from_column, max_visual_width

EMPTY_PLACEHOLDER = "no content to display"

UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
PAGE_UP = "PAGE_UP"
PAGE_DOWN = "PAGE_DOWN"
HOME = "HOME"
END = "END"
CTRL_HOME = "CTRL_HOME"
CTRL_END = "CTRL_END"

NAVIGATION_COMMANDS = frozenset(
    {UP, DOWN, LEFT, RIGHT, PAGE_UP, PAGE_DOWN, HOME, END, CTRL_HOME, CTRL_END}
)


@dataclass(frozen=True)
class VisibleWindow:
    """Cells available for content once status/separator rows are reserved."""

    width: int
    height: int


class Viewport:
    def __init__(self, scroll_y: int = 0, scroll_x: int = 0) -> None:
        self.scroll_y = max(0, scroll_y)
        self.scroll_x = max(0, scroll_x)

    def __repr__(self) -> str:
        return f"Viewport(scroll_y={self.scroll_y}, scroll_x={self.scroll_x})"

    @staticmethod
    def bounds(
        content: Sequence[str],
        window: VisibleWindow,
        content_width: int | None = None,
    ) -> tuple[int, int]:
        """Return ``(max_scroll_y, max_scroll_x)`` for ``content`` in ``window``.

        ``content_width`` may carry a precomputed maximum visual width.
        """
        if content_width is None:
            content_width = max_visual_width(content)
        max_y = max(0, len(content) - window.height)
        max_x = max(0, content_width - window.width)
        return max_y, max_x

    def reclamp(
        self,
        content: Sequence[str],
        window: VisibleWindow,
        content_width: int | None = None,
    ) -> bool:
        """Pull offsets back inside the current bounds.

        Returns whether either offset moved.
        """
        max_y, max_x = self.bounds(content, window, content_width)
        prev = (self.scroll_y, self.scroll_x)
        self.scroll_y = min(self.scroll_y, max_y)
        self.scroll_x = min(self.scroll_x, max_x)
        return (self.scroll_y, self.scroll_x) != prev

    def visible_lines(self, content: Sequence[str], window: VisibleWindow) -> list[str]:
        """Materialize the rows currently on screen, cropped at ``scroll_x``."""
        start = self.scroll_y
        end = min(start + window.height, len(content))
        if start >= end:
            return [EMPTY_PLACEHOLDER]
        return [crop_from_column(line, self.scroll_x) for line in content[start:end]]

    def handle_navigation(
        self,
        command: str,
        content: Sequence[str],
        window: VisibleWindow,
        content_width: int | None = None,
    ) -> bool:
        """Apply one navigation command.

        Recognized commands return ``True`` even when the offset is already
        pinned at a bound; unknown commands leave the state alone and return
        ``False``.
        """
        if command not in NAVIGATION_COMMANDS:
            return False

        max_y, max_x = self.bounds(content, window, content_width)
        page = max(1, window.height)
        vertical = {
            UP: self.scroll_y - 1,
            DOWN: self.scroll_y + 1,
            PAGE_UP: self.scroll_y - page,
            PAGE_DOWN: self.scroll_y + page,
            CTRL_HOME: 0,
            CTRL_END: max_y,
        }
        horizontal = {
            LEFT: self.scroll_x - 1,
            RIGHT: self.scroll_x + 1,
            HOME: 0,
            END: max_x,
        }
        # Saturate at both ends; targets may fall outside [0, max].
        if command in vertical:
            self.scroll_y = max(0, min(vertical[command], max_y))
        else:
            self.scroll_x = max(0, min(horizontal[command], max_x))
        return True
