"""
Ticket Infrastructure Layer
===========================

Infrastructure implementations for the ticket module:
- Models: SQLAlchemy ORM models
- Repositories: Data access layer and the unit of work tying them together
"""

from src.tickets.infrastructure.models import TicketModel, CommentModel
from src.tickets.infrastructure.repositories import (
    SQLAlchemyTicketRepository,
    SQLAlchemyCommentRepository,
    SQLAlchemyUnitOfWork,
)

__all__ = [
    "TicketModel",
    "CommentModel",
    "SQLAlchemyTicketRepository",
    "SQLAlchemyCommentRepository",
    "SQLAlchemyUnitOfWork",
]
