"""Refresh interval parsing, formatting, and derived timeouts.

Intervals are carried as integer milliseconds so that formatting round-trips
exactly (``1500`` prints as ``1500ms``, ``2000`` as ``2s``).
"""

from __future__ import annotations

MIN_INTERVAL_MS = 100
DEFAULT_INTERVAL = "1s"
MIN_SPEED = 0.1
MAX_SPEED = 10.0

SOURCE_TIMEOUT_RATIO = 0.8
SOURCE_TIMEOUT_MIN_SECONDS = 0.1
SOURCE_TIMEOUT_MAX_SECONDS = 3.0


class IntervalError(ValueError):
    """Raised for interval strings that cannot be used as a refresh period."""


def parse_interval(text: str) -> int:
    """Parse ``100ms``, ``1``, ``2s`` or ``1.5s`` into milliseconds.

    A bare number means seconds. Values under 100ms are rejected.
    """
    value_text = text.strip().lower()
    if value_text.endswith("ms"):
        value_text = value_text[:-2]
        scale = 1.0
    elif value_text.endswith("s"):
        value_text = value_text[:-1]
        scale = 1000.0
    else:
        scale = 1000.0

    try:
        value = float(value_text)
    except ValueError as exc:
        raise IntervalError(f"invalid interval value: {text!r}") from exc
    if value != value or value in (float("inf"), float("-inf")):
        raise IntervalError(f"invalid interval value: {text!r}")

    ms = int(value * scale)
    if ms < MIN_INTERVAL_MS:
        raise IntervalError(f"interval must be at least {MIN_INTERVAL_MS}ms")
    return ms


def parse_speed(text: str | float | None) -> float:
    """Return a speed multiplier clamped to ``[0.1, 10.0]``; junk means 1.0."""
    if text is None:
        return 1.0
    try:
        speed = float(text)
    except (TypeError, ValueError):
        return 1.0
    if speed != speed:
        return 1.0
    return max(MIN_SPEED, min(MAX_SPEED, speed))


def apply_speed(interval_ms: int, speed: float) -> int:
    """Scale an interval by a speed multiplier (faster speed, shorter interval)."""
    return int(interval_ms / speed)


def format_interval(interval_ms: int) -> str:
    if interval_ms % 1000 == 0:
        return f"{interval_ms // 1000}s"
    return f"{interval_ms}ms"


def source_timeout_seconds(interval_ms: int) -> float:
    """Bound for one command read: 80% of the interval, kept within 0.1s..3s."""
    timeout = (interval_ms / 1000.0) * SOURCE_TIMEOUT_RATIO
    return max(SOURCE_TIMEOUT_MIN_SECONDS, min(SOURCE_TIMEOUT_MAX_SECONDS, timeout))
