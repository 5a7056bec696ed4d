"""
Clock
=====

Source of "now" for every timestamp the application writes or compares.

Services receive a clock instead of calling ``datetime.now`` so tests can
freeze and advance time.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything with a ``now()`` returning an aware UTC datetime."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
