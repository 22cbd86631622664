from __future__ import annotations

import os
from contextlib import contextmanager
import unittest
from unittest import mock

from grain.runtime import RuntimeLoopCallbacks, run_main_loop
from grain.runtime.state import WatchState
from grain.scheduler import RefreshScheduler
from grain.source import SourceConfig


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _make_state(lines: list[str]) -> WatchState:
    state = WatchState(
        source=SourceConfig(),
        interval_ms=1000,
        scheduler=RefreshScheduler(0.0),
    )
    state.apply_refresh(lines)
    return state


class _LoopHarness:
    """Drive ``run_main_loop`` with scripted keys, sizes, and content."""

    def __init__(self, state: WatchState, keys: list, *, size=os.terminal_size((20, 12))) -> None:
        self.state = state
        self.keys = list(keys)
        self.size = size
        self.clock = _FakeClock()
        self.loads: list[list[str]] = []
        self.next_content: list[str] | None = None
        self.frames: list[tuple[str, list[str]]] = []
        self.timeouts: list[int] = []
        self.terminal = _FakeTerminal()

    def _load(self) -> list[str]:
        lines = self.next_content if self.next_content is not None else list(self.state.content.lines)
        self.loads.append(lines)
        return lines

    def _render(self, _layout, status: str, lines) -> None:
        self.frames.append((status, list(lines)))

    def _read_key(self, _fd: int, timeout_ms: int) -> str:
        self.timeouts.append(timeout_ms)
        step = self.keys.pop(0)
        if callable(step):
            return step(self)
        return step

    def run(self) -> None:
        callbacks = RuntimeLoopCallbacks(
            load_content=self._load,
            monotonic=self.clock,
            render=self._render,
        )
        with mock.patch(
            "grain.runtime.loop.shutil.get_terminal_size", side_effect=lambda _fallback: self.size
        ), mock.patch("grain.runtime.loop.read_key", side_effect=self._read_key):
            run_main_loop(self.state, self.terminal, 0, callbacks)


class RuntimeLoopBehaviorTests(unittest.TestCase):
    def test_quit_keys_end_loop_inside_raw_mode(self) -> None:
        for quit_key in ("q", "Q", "CTRL_C"):
            with self.subTest(key=quit_key):
                harness = _LoopHarness(_make_state(["a", "b"]), [quit_key])
                harness.run()
                self.assertEqual(harness.terminal.entered, 1)
                self.assertEqual(harness.terminal.exited, 1)

    def test_first_iteration_renders_status_and_content(self) -> None:
        harness = _LoopHarness(_make_state(["alpha", "beta"]), ["q"])
        harness.run()
        self.assertEqual(len(harness.frames), 1)
        status, lines = harness.frames[0]
        self.assertEqual(status, "/proc/interrupts  1s")
        self.assertEqual(lines, ["alpha", "beta"])

    def test_navigation_redraws_only_when_offset_moves(self) -> None:
        lines = [f"line {idx}" for idx in range(30)]
        harness = _LoopHarness(_make_state(lines), ["DOWN", "UP", "UP", "q"])
        harness.run()
        # Initial frame, after DOWN, after the first UP; the second UP is pinned at 0.
        self.assertEqual(len(harness.frames), 3)
        self.assertEqual(harness.frames[1][1][0], "line 1")
        self.assertEqual(harness.frames[2][1][0], "line 0")

    def test_timeout_tokens_do_not_redraw(self) -> None:
        harness = _LoopHarness(_make_state(["a"]), ["", "", "q"])
        harness.run()
        self.assertEqual(len(harness.frames), 1)

    def test_unknown_keys_are_ignored(self) -> None:
        harness = _LoopHarness(_make_state(["a"]), ["x", "ESC", "q"])
        harness.run()
        self.assertEqual(len(harness.frames), 1)
        self.assertEqual(harness.state.viewport.scroll_y, 0)

    def test_refresh_runs_when_interval_elapses(self) -> None:
        def elapse(h: _LoopHarness) -> str:
            h.clock.now = 1.0
            h.next_content = ["fresh"]
            return ""

        harness = _LoopHarness(_make_state(["stale"]), [elapse, "q"])
        harness.run()
        self.assertEqual(harness.loads, [["fresh"]])
        self.assertEqual(harness.frames[-1][1], ["fresh"])
        self.assertEqual(harness.state.scheduler.reference_instant, 1.0)

    def test_identical_refresh_does_not_redraw(self) -> None:
        def elapse(h: _LoopHarness) -> str:
            h.clock.now = 1.0
            return ""

        harness = _LoopHarness(_make_state(["same"]), [elapse, "q"])
        harness.run()
        self.assertEqual(len(harness.loads), 1)
        self.assertEqual(len(harness.frames), 1)

    def test_shrinking_refresh_reclamps_scroll(self) -> None:
        lines = [f"row {idx}" for idx in range(40)]

        def elapse(h: _LoopHarness) -> str:
            h.clock.now = 1.0
            h.next_content = ["only", "two"]
            return ""

        harness = _LoopHarness(_make_state(lines), ["CTRL_END", elapse, "q"])
        harness.run()
        self.assertEqual(harness.state.viewport.scroll_y, 0)
        self.assertEqual(harness.frames[-1][1], ["only", "two"])

    def test_resize_reclamps_and_redraws(self) -> None:
        lines = [f"row {idx}" for idx in range(15)]

        def grow(h: _LoopHarness) -> str:
            h.size = os.terminal_size((20, 40))
            return ""

        harness = _LoopHarness(_make_state(lines), ["CTRL_END", grow, "q"])
        harness.run()
        # 12 rows leave a 10-row window, so the bottom is row 5; 40 rows fit everything.
        self.assertEqual(harness.frames[1][1][0], "row 5")
        self.assertEqual(harness.state.viewport.scroll_y, 0)
        self.assertEqual(harness.frames[-1][1][0], "row 0")

    def test_poll_timeout_is_capped(self) -> None:
        harness = _LoopHarness(_make_state(["a"]), ["q"])
        harness.run()
        self.assertEqual(harness.timeouts, [100])


if __name__ == "__main__":
    unittest.main()
