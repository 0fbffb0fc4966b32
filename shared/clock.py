"""
Wall-clock access and countdown helpers.

Timer anchors are stored as integer epoch milliseconds, matching what the
sign-in page historically wrote to browser storage, so every derived
countdown is recomputed from an absolute timestamp.
"""

from __future__ import annotations

import math
import time
from typing import Optional, Protocol


class Clock(Protocol):
    def now_ms(self) -> int: ...


class SystemClock:
    """Clock backed by ``time.time()``."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


def seconds_until(deadline_ms: Optional[int], now_ms: int) -> int:
    """Whole seconds left until *deadline_ms*, rounded up; 0 when passed or unset."""
    if deadline_ms is None:
        return 0
    remaining = math.ceil((deadline_ms - now_ms) / 1000)
    return remaining if remaining > 0 else 0


def seconds_remaining(issued_at_ms: int, window_seconds: int, now_ms: int) -> int:
    """Seconds left in a validity window that opened at *issued_at_ms*.

    Elapsed time is floored, so the result reaches exactly 0 at
    ``issued_at_ms + window_seconds * 1000`` and never exceeds the window even
    if the anchor lies in the future.
    """
    elapsed = (now_ms - issued_at_ms) // 1000
    remaining = window_seconds - elapsed
    return max(0, min(window_seconds, remaining))


def format_countdown(seconds: int) -> str:
    """Render seconds as ``m:ss`` (e.g. ``600`` → ``"10:00"``)."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"
