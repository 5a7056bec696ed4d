"""
Ticket Application Layer
========================

Application layer for the ticket module.

Contains:
- Services: Orchestrate business logic and coordinate with repositories
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from src.tickets.application.dto import (
    TicketCreateRequest,
    TicketStatusUpdateRequest,
    CommentCreateRequest,
    TicketRecord,
    TicketResponse,
    TicketCreatedResponse,
    CommentResponse,
    CommentCreatedResponse,
    MessageResponse,
    ErrorResponse,
)
from src.tickets.application.services import (
    TicketService,
    CommentService,
    ITicketRepository,
    ICommentRepository,
    IUnitOfWork,
    TICKET_CREATED_TEXT,
    STATUS_CHANGED_TEXT,
)

__all__ = [
    # DTOs
    "TicketCreateRequest",
    "TicketStatusUpdateRequest",
    "CommentCreateRequest",
    "TicketRecord",
    "TicketResponse",
    "TicketCreatedResponse",
    "CommentResponse",
    "CommentCreatedResponse",
    "MessageResponse",
    "ErrorResponse",
    # Services
    "TicketService",
    "CommentService",
    "TICKET_CREATED_TEXT",
    "STATUS_CHANGED_TEXT",
    # Repository Interfaces
    "ITicketRepository",
    "ICommentRepository",
    "IUnitOfWork",
]
