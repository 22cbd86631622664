"""Drift-free periodic refresh timing.

The reference instant always advances by whole intervals, never to "now".
When a refresh overruns its interval the following due-checks fire back to
back until the schedule has caught up, instead of shifting every later
refresh by the overrun.
"""

from __future__ import annotations

POLL_TIMEOUT_CAP = 0.1


class RefreshScheduler:
    def __init__(self, reference_instant: float) -> None:
        self.reference_instant = reference_instant

    def is_refresh_due(self, now: float, interval: float) -> bool:
        return (now - self.reference_instant) >= interval

    def advance(self, interval: float) -> None:
        self.reference_instant += interval

    def consume_due(self, now: float, interval: float) -> bool:
        """Return whether a refresh is due, advancing the reference if so."""
        if not self.is_refresh_due(now, interval):
            return False
        self.advance(interval)
        return True

    def poll_timeout(self, now: float, interval: float, cap: float = POLL_TIMEOUT_CAP) -> float:
        """Seconds the input wait may block without delaying a refresh past ``cap``."""
        remaining = max(0.0, interval - (now - self.reference_instant))
        return min(cap, remaining)
