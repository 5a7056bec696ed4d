"""
Stats Application DTOs
======================

Response models for the stats and debug endpoints.
"""

from typing import List

from pydantic import BaseModel, Field

from src.stats.application.services import TableDump, TicketStats
from src.tickets.application import CommentResponse, TicketRecord


class StatsResponse(BaseModel):
    """Ticket counts per status."""
    total: int
    open: int
    in_progress: int = Field(..., serialization_alias="inProgress")
    resolved: int
    closed: int

    @classmethod
    def from_stats(cls, stats: TicketStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            open=stats.open,
            in_progress=stats.in_progress,
            resolved=stats.resolved,
            closed=stats.closed
        )


class DebugTablesResponse(BaseModel):
    """Raw contents of both tables."""
    tickets: List[TicketRecord]
    comments: List[CommentResponse]
    total_tickets: int
    total_comments: int

    @classmethod
    def from_dump(cls, dump: TableDump) -> "DebugTablesResponse":
        return cls(
            tickets=[TicketRecord.from_domain(t) for t in dump.tickets],
            comments=[CommentResponse.from_domain(c) for c in dump.comments],
            total_tickets=dump.total_tickets,
            total_comments=dump.total_comments
        )
