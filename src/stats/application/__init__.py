"""
Stats Application Layer
=======================

Aggregates derived from the ticket store. Read only.
"""

from src.stats.application.services import StatsService, TicketStats, TableDump
from src.stats.application.dto import StatsResponse, DebugTablesResponse

__all__ = [
    "StatsService",
    "TicketStats",
    "TableDump",
    "StatsResponse",
    "DebugTablesResponse",
]
