"""
SLA Value Objects
==================

Immutable value objects and pure calculations for the SLA domain.

Every ticket gets one resolution deadline, fixed at creation from its
priority tier:

| Priority | Window |
|----------|--------|
| High     | 4h     |
| Medium   | 12h    |
| Low      | 24h    |

Anything else falls back to the Low window.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Union

from src.config import Priority, SLAState


SLA_WINDOW_HOURS: Dict[Priority, int] = {
    Priority.HIGH: 4,
    Priority.MEDIUM: 12,
    Priority.LOW: 24,
}
DEFAULT_SLA_WINDOW_HOURS = 24

# Tickets with less than this many hours left are at risk
WARNING_THRESHOLD_HOURS = 4


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Stateless utility class - all SLA calculation logic in one place.
    Callers pass "now" explicitly; nothing here reads the clock.
    """

    @staticmethod
    def window_hours(priority: Union[Priority, str, None]) -> int:
        """SLA window in hours for a priority, with the Low window as fallback."""
        try:
            return SLA_WINDOW_HOURS[Priority(priority)]
        except ValueError:
            return DEFAULT_SLA_WINDOW_HOURS

    @staticmethod
    def calculate_due_date(priority: Union[Priority, str, None], now: datetime) -> datetime:
        """
        Calculate the SLA deadline for a ticket created at ``now``.

        Args:
            priority: Ticket priority
            now: Creation instant

        Returns:
            The SLA due date
        """
        return now + timedelta(hours=SLACalculator.window_hours(priority))

    @staticmethod
    def hours_left(due_date: datetime, now: datetime) -> float:
        """Fractional hours until the deadline, negative once passed."""
        return (due_date - now).total_seconds() / 3600

    @staticmethod
    def calculate_status(due_date: datetime, now: datetime) -> SLAState:
        """
        Calculate the current SLA state.

        Args:
            due_date: The SLA deadline
            now: Current time for evaluation

        Returns:
            SLAState: breach when past due, warning inside the last
            four hours, ok otherwise
        """
        hours_left = SLACalculator.hours_left(due_date, now)

        if hours_left < 0:
            return SLAState.BREACH
        elif hours_left < WARNING_THRESHOLD_HOURS:
            return SLAState.WARNING
        else:
            return SLAState.OK

    @staticmethod
    def describe(due_date: datetime, now: datetime) -> str:
        """
        Human-readable SLA text, e.g. "5h remaining" or "Breached 2h ago".

        Hours are floored, so 90 minutes overdue reads as 2h.
        """
        hours_left = math.floor(SLACalculator.hours_left(due_date, now))

        if hours_left < 0:
            return f"Breached {abs(hours_left)}h ago"
        if hours_left < 1:
            return "Due in < 1 hour"
        return f"{hours_left}h remaining"


@dataclass(frozen=True)
class SLASnapshot:
    """
    SLA view of a deadline at one instant.

    Derived at read time and never persisted.
    """
    due_date: datetime
    evaluated_at: datetime
    state: SLAState
    text: str

    @classmethod
    def evaluate(cls, due_date: datetime, now: datetime) -> "SLASnapshot":
        return cls(
            due_date=due_date,
            evaluated_at=now,
            state=SLACalculator.calculate_status(due_date, now),
            text=SLACalculator.describe(due_date, now),
        )

    @property
    def is_breached(self) -> bool:
        return self.state == SLAState.BREACH
