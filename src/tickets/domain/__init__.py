"""
Ticket Domain Layer
===================

Contains:
- Entities: Core business objects with identity (Ticket, Comment)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from src.tickets.domain.entities import Ticket, Comment

__all__ = [
    "Ticket",
    "Comment",
]
