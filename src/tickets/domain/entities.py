"""
Ticket Domain Entities
======================

Pure Python domain entities for helpdesk tickets and their comments.

Following Domain-Driven Design principles, these entities contain
business logic and are free of infrastructure concerns.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.config import TicketStatus, UserType
from src.sla.domain import SLACalculator, SLASnapshot


@dataclass
class Ticket:
    """
    Ticket entity representing a support ticket.

    ``title``, ``description``, ``category``, ``priority``, ``created_at``
    and ``sla_due_date`` never change after creation.
    """

    id: Optional[int]
    title: str
    description: str
    category: str
    priority: str
    status: str

    # Timestamps
    created_at: datetime
    updated_at: datetime
    sla_due_date: datetime

    @classmethod
    def open(
        cls,
        title: str,
        description: str,
        category: str,
        priority: str,
        now: datetime
    ) -> "Ticket":
        """New, unsaved ticket in the Open state with its deadline fixed."""
        return cls(
            id=None,
            title=title,
            description=description,
            category=category,
            priority=priority,
            status=TicketStatus.OPEN.value,
            created_at=now,
            updated_at=now,
            sla_due_date=SLACalculator.calculate_due_date(priority, now),
        )

    def refreshed_at(self, now: datetime) -> datetime:
        """
        Next ``updated_at`` for a change made at ``now``.

        Never earlier than the stored value, even if the clock stepped back.
        """
        return max(now, self.updated_at)

    def sla(self, now: datetime) -> SLASnapshot:
        """SLA state and text as of ``now``."""
        return SLASnapshot.evaluate(self.sla_due_date, now)


@dataclass
class Comment:
    """
    Comment entity attached to a ticket.

    Append-only: comments are never edited, only removed with their ticket.
    """

    id: Optional[int]
    ticket_id: int
    comment: str
    user_type: str
    created_at: datetime

    @property
    def is_system(self) -> bool:
        """True for audit-trail entries written by the service itself."""
        return self.user_type == UserType.SYSTEM.value
