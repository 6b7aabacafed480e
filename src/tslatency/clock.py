"""
Clock Sources
=============

Timestamp sources shared by the stamp and measure sides.

Both sides of a session must read the same clock: the same host, or
clocks synchronized externally (PTP, NTP). Nothing here corrects skew.

Sources:
    - MonotonicClock: time.monotonic_ns(), same-host sessions (default)
    - RealtimeClock: time.time_ns(), for externally synchronized hosts
    - ManualClock: explicitly advanced, for harnesses and tests
"""

import time
from enum import Enum
from typing import Protocol


class Clock(Protocol):
    """Read-only nanosecond clock."""

    def now_ns(self) -> int:
        """Current reading in nanoseconds."""
        ...


class ClockSource(str, Enum):
    """Configurable clock sources."""

    MONOTONIC = "monotonic"
    REALTIME = "realtime"


class MonotonicClock:
    """System monotonic clock."""

    def now_ns(self) -> int:
        return time.monotonic_ns()

    def __repr__(self) -> str:
        return "MonotonicClock()"


class RealtimeClock:
    """Wall clock, nanoseconds since the UNIX epoch."""

    def now_ns(self) -> int:
        return time.time_ns()

    def __repr__(self) -> str:
        return "RealtimeClock()"


class ManualClock:
    """
    Clock that only moves when told to.

    Example:
        clock = ManualClock(start_ns=1_000)
        clock.advance(500)
        assert clock.now_ns() == 1_500
    """

    def __init__(self, start_ns: int = 0) -> None:
        self._now = start_ns

    def now_ns(self) -> int:
        return self._now

    def advance(self, delta_ns: int) -> None:
        self._now += delta_ns

    def set(self, now_ns: int) -> None:
        self._now = now_ns

    def __repr__(self) -> str:
        return f"ManualClock(now_ns={self._now})"


def create_clock(source: ClockSource) -> Clock:
    """Instantiate a clock for a configured source."""
    source = ClockSource(source)
    if source is ClockSource.REALTIME:
        return RealtimeClock()
    return MonotonicClock()
