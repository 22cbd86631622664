"""Holder for the most recently acquired body of lines.

Content is only ever replaced wholesale. A refresh that yields exactly the
same lines is a no-op, which callers rely on to skip reclamping and redraws.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import max_visual_width


class ContentStore:
    def __init__(self, lines: Sequence[str] = ()) -> None:
        self._lines: tuple[str, ...] = tuple(lines)
        self._max_width = max_visual_width(self._lines)

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    @property
    def max_width(self) -> int:
        """Widest visual width over the current lines, cached per replacement."""
        return self._max_width

    def __len__(self) -> int:
        return len(self._lines)

    def differs(self, new_lines: Sequence[str]) -> bool:
        """Return whether ``new_lines`` differs from the stored lines in any position."""
        return tuple(new_lines) != self._lines

    def replace(self, new_lines: Sequence[str], max_width: int | None = None) -> bool:
        """Swap in ``new_lines`` unless they equal the current content.

        ``max_width`` may carry the width a caller already measured for
        ``new_lines``. Returns ``True`` when the content actually changed.
        """
        candidate = tuple(new_lines)
        if candidate == self._lines:
            return False
        self._lines = candidate
        self._max_width = max_visual_width(candidate) if max_width is None else max_width
        return True
