"""
Ticket Infrastructure Models
============================

SQLAlchemy ORM models for the ticket module.

These are the database representations of our domain entities.
They belong in the infrastructure layer, not the domain layer.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config import TicketStatus
from src.infrastructure.database import Base, UTCDateTime


class TicketModel(Base):
    """
    Database model for Ticket entity.

    Maps to the 'tickets' table.
    """
    __tablename__ = "tickets"
    # AUTOINCREMENT so SQLite never hands out the ID of a deleted ticket again
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Ticket content
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False)

    # SLA attributes
    priority: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=TicketStatus.OPEN.value, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), nullable=False)
    sla_due_date: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), nullable=False)


class CommentModel(Base):
    """
    Database model for Comment entity.

    Maps to the 'comments' table.
    """
    __tablename__ = "comments"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Ticket reference
    ticket_id: Mapped[int] = mapped_column(Integer, ForeignKey("tickets.id"), nullable=False, index=True)

    comment: Mapped[str] = mapped_column(Text, nullable=False)
    user_type: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), nullable=False)
