"""
Ticket Application DTOs
=======================

Data Transfer Objects for the ticket API layer.

Request fields are optional at the schema level so that a missing or empty
value reaches the service and is reported as a 400 with the service's own
message, rather than a schema error.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.config import SLAState
from src.tickets.domain import Ticket, Comment


# ========== Request DTOs ==========

class TicketCreateRequest(BaseModel):
    """Request model for ticket creation."""
    title: Optional[str] = Field(None, description="Short summary")
    description: Optional[str] = Field(None, description="Full problem description")
    category: Optional[str] = Field(None, description="Free-text classification")
    priority: Optional[str] = Field(None, description="High, Medium or Low")


class TicketStatusUpdateRequest(BaseModel):
    """Request model for a status transition."""
    status: Optional[str] = Field(None, description="Open, In Progress, Resolved or Closed")


class CommentCreateRequest(BaseModel):
    """Request model for adding a comment."""
    comment: Optional[str] = Field(None, description="Comment text")
    user_type: Optional[str] = Field(None, description="Author tag, e.g. user or admin")


# ========== Response DTOs ==========

class TicketRecord(BaseModel):
    """Ticket as stored."""
    id: int
    title: str
    description: str
    category: str
    priority: str
    status: str
    created_at: datetime
    updated_at: datetime
    sla_due_date: datetime

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketRecord":
        return cls(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            category=ticket.category,
            priority=ticket.priority,
            status=ticket.status,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            sla_due_date=ticket.sla_due_date
        )


class TicketResponse(TicketRecord):
    """Ticket with its SLA state derived at read time."""
    sla_status: SLAState = Field(..., description="ok, warning or breach")
    sla_status_text: str = Field(..., description="e.g. '5h remaining'")

    @classmethod
    def from_domain_at(cls, ticket: Ticket, now: datetime) -> "TicketResponse":
        sla = ticket.sla(now)
        return cls(
            **TicketRecord.from_domain(ticket).model_dump(),
            sla_status=sla.state,
            sla_status_text=sla.text
        )


class TicketCreatedResponse(BaseModel):
    """Response model for ticket creation."""
    id: int
    message: str = "Ticket created successfully"
    sla_due_date: datetime


class CommentResponse(BaseModel):
    """Comment as stored."""
    id: int
    ticket_id: int
    comment: str
    user_type: str
    created_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            ticket_id=comment.ticket_id,
            comment=comment.comment,
            user_type=comment.user_type,
            created_at=comment.created_at
        )


class CommentCreatedResponse(BaseModel):
    """Response model for comment creation."""
    id: int
    message: str = "Comment added successfully"


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    error: str
    correlation_id: Optional[str] = None
    details: Optional[List[dict]] = None
