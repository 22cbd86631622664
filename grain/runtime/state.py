"""Mutable session state shared by the loop and its helpers.

Refreshes, navigation, and resizes all go through the methods here so the
viewport is reclamped every time the content or the window changes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..ansi import max_visual_width
from ..content import ContentStore
from ..render import ScreenLayout, build_status_line, compute_layout
from ..scheduler import RefreshScheduler
from ..source import SourceConfig
from ..viewport import Viewport, VisibleWindow


@dataclass
class WatchState:
    source: SourceConfig
    interval_ms: int
    scheduler: RefreshScheduler
    content: ContentStore = field(default_factory=ContentStore)
    viewport: Viewport = field(default_factory=Viewport)
    layout: ScreenLayout = field(default_factory=lambda: compute_layout(80, 24))
    dirty: bool = True
    refresh_count: int = 0

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000.0

    @property
    def window(self) -> VisibleWindow:
        return self.layout.window

    def observe_terminal_size(self, columns: int, rows: int) -> bool:
        """Recompute the layout and reclamp if the visible window changed."""
        layout = compute_layout(columns, rows)
        if layout == self.layout:
            return False
        self.layout = layout
        self.viewport.reclamp(self.content.lines, layout.window, self.content.max_width)
        self.dirty = True
        return True

    def apply_refresh(self, lines: Sequence[str]) -> bool:
        """Offer freshly read lines to the store.

        Identical content returns early without touching the offsets, even
        when they sit at a bound computed for older, larger content.
        """
        self.refresh_count += 1
        candidate = tuple(lines)
        if not self.content.differs(candidate):
            return False
        width = max_visual_width(candidate)
        self.viewport.reclamp(candidate, self.window, width)
        self.content.replace(candidate, max_width=width)
        self.dirty = True
        return True

    def navigate(self, command: str) -> bool:
        """Apply a navigation command, marking the frame dirty if an offset moved."""
        before = (self.viewport.scroll_y, self.viewport.scroll_x)
        handled = self.viewport.handle_navigation(
            command,
            self.content.lines,
            self.window,
            self.content.max_width,
        )
        if (self.viewport.scroll_y, self.viewport.scroll_x) != before:
            self.dirty = True
        return handled

    def status_text(self) -> str:
        return build_status_line(self.source.describe(self.window.width), self.interval_ms)

    def visible_lines(self) -> list[str]:
        return self.viewport.visible_lines(self.content.lines, self.window)
