"""
Stats Application Services
==========================

Read-only aggregates over the ticket store, recomputed on every call.
"""

from dataclasses import dataclass
from typing import List

from src.config import TicketStatus
from src.shared.infrastructure.logging import get_logger, log_latency
from src.tickets.application import IUnitOfWork
from src.tickets.domain import Comment, Ticket

logger = get_logger(__name__)


@dataclass(frozen=True)
class TicketStats:
    """Ticket counts per workflow status."""
    total: int
    open: int
    in_progress: int
    resolved: int
    closed: int


@dataclass(frozen=True)
class TableDump:
    """Every stored ticket and comment."""
    tickets: List[Ticket]
    comments: List[Comment]

    @property
    def total_tickets(self) -> int:
        return len(self.tickets)

    @property
    def total_comments(self) -> int:
        return len(self.comments)


class StatsService:
    """Dashboard counts and the debug table view."""

    def __init__(self, unit_of_work: IUnitOfWork):
        self._uow = unit_of_work

    async def compute(self) -> TicketStats:
        """
        Counts per status plus the grand total.

        All five figures come from one grouped query. ``total`` also counts
        tickets whose status is outside the fixed set.
        """
        with log_latency(logger, "stats_compute"):
            counts = await self._uow.tickets.count_by_status()

        return TicketStats(
            total=sum(counts.values()),
            open=counts.get(TicketStatus.OPEN.value, 0),
            in_progress=counts.get(TicketStatus.IN_PROGRESS.value, 0),
            resolved=counts.get(TicketStatus.RESOLVED.value, 0),
            closed=counts.get(TicketStatus.CLOSED.value, 0)
        )

    async def dump(self) -> TableDump:
        """Both tables in ID order."""
        tickets = await self._uow.tickets.list(newest_first=False)
        comments = await self._uow.comments.list()
        return TableDump(tickets=tickets, comments=comments)
