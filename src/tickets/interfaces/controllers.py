"""
Ticket Controllers (API Routes)
===============================

FastAPI routes for tickets and their comments.

Controllers are thin - they delegate to application services. Errors
raised by the services are turned into responses by the handlers
registered in ``src.shared.api.middleware``.
"""

from typing import List

from fastapi import APIRouter, Depends, Path

from src.config import Settings
from src.core import Clock
from src.shared.api.dependencies import get_app_settings, get_clock, get_unit_of_work
from src.tickets.application import (
    TicketService, CommentService,
    TicketCreateRequest, TicketStatusUpdateRequest, CommentCreateRequest,
    TicketResponse, TicketCreatedResponse,
    CommentResponse, CommentCreatedResponse,
    MessageResponse, ErrorResponse
)
from src.tickets.infrastructure import SQLAlchemyUnitOfWork

router = APIRouter(prefix="/tickets", tags=["Tickets"])

# Largest value a 64-bit INTEGER column holds
MAX_TICKET_ID = 2**63 - 1


# ========== Example payloads for Swagger ==========

TICKET_RESPONSE_EXAMPLE = {
    "id": 1,
    "title": "VPN drops every hour",
    "description": "The VPN client disconnects roughly every 60 minutes.",
    "category": "Network",
    "priority": "High",
    "status": "Open",
    "created_at": "2024-01-15T10:00:00Z",
    "updated_at": "2024-01-15T10:00:00Z",
    "sla_due_date": "2024-01-15T14:00:00Z",
    "sla_status": "warning",
    "sla_status_text": "3h remaining"
}

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Ticket not found"}}
BAD_REQUEST_RESPONSE = {400: {"model": ErrorResponse, "description": "Missing or invalid fields"}}


# ========== Dependencies ==========

async def get_comment_service(
    uow: SQLAlchemyUnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock)
) -> CommentService:
    """Get comment service instance."""
    return CommentService(uow, clock)


async def get_ticket_service(
    uow: SQLAlchemyUnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    comment_service: CommentService = Depends(get_comment_service),
    settings: Settings = Depends(get_app_settings)
) -> TicketService:
    """Get ticket service instance."""
    return TicketService(
        uow, clock,
        comment_service=comment_service,
        enforce_enumerations=settings.enforce_enumerations
    )


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=List[TicketResponse],
    summary="List tickets",
    description="All tickets, most recently created first, with their current SLA state."
)
async def list_tickets(
    service: TicketService = Depends(get_ticket_service),
    clock: Clock = Depends(get_clock)
):
    tickets = await service.list_tickets()
    now = clock.now()
    return [TicketResponse.from_domain_at(ticket, now) for ticket in tickets]


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Get ticket",
    responses={
        200: {"content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}},
        **NOT_FOUND_RESPONSE
    }
)
async def get_ticket(
    ticket_id: int = Path(..., ge=1, le=MAX_TICKET_ID, description="Ticket ID"),
    service: TicketService = Depends(get_ticket_service),
    clock: Clock = Depends(get_clock)
):
    ticket = await service.get_ticket(ticket_id)
    return TicketResponse.from_domain_at(ticket, clock.now())


@router.post(
    "",
    response_model=TicketCreatedResponse,
    summary="Create ticket",
    description="""
    Create a ticket in the `Open` state.

    **Priority Levels**: `High` (4h SLA), `Medium` (12h SLA), `Low` (24h SLA)

    The SLA due date is fixed at creation and returned in the response.
    A `"Ticket created"` system comment is added to the ticket.
    """,
    responses=BAD_REQUEST_RESPONSE
)
async def create_ticket(
    request: TicketCreateRequest,
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.create_ticket(
        request.title, request.description, request.category, request.priority
    )
    return TicketCreatedResponse(id=ticket.id, sla_due_date=ticket.sla_due_date)


@router.put(
    "/{ticket_id}",
    response_model=MessageResponse,
    summary="Update ticket status",
    description="""
    Move a ticket to a new status and record a system comment.

    **Ticket Status**: `Open`, `In Progress`, `Resolved`, `Closed`
    """,
    responses={**BAD_REQUEST_RESPONSE, **NOT_FOUND_RESPONSE}
)
async def update_ticket_status(
    *,
    ticket_id: int = Path(..., ge=1, le=MAX_TICKET_ID, description="Ticket ID"),
    request: TicketStatusUpdateRequest,
    service: TicketService = Depends(get_ticket_service)
):
    await service.update_status(ticket_id, request.status)
    return MessageResponse(message="Ticket updated successfully")


@router.delete(
    "/{ticket_id}",
    response_model=MessageResponse,
    summary="Delete ticket",
    description="Delete a ticket together with all of its comments.",
    responses=NOT_FOUND_RESPONSE
)
async def delete_ticket(
    ticket_id: int = Path(..., ge=1, le=MAX_TICKET_ID, description="Ticket ID"),
    service: TicketService = Depends(get_ticket_service)
):
    await service.delete_ticket(ticket_id)
    return MessageResponse(message="Ticket deleted successfully")


@router.get(
    "/{ticket_id}/comments",
    response_model=List[CommentResponse],
    summary="List ticket comments",
    description="Comments oldest first. An unknown ticket returns an empty list."
)
async def list_comments(
    ticket_id: int = Path(..., ge=1, le=MAX_TICKET_ID, description="Ticket ID"),
    service: CommentService = Depends(get_comment_service)
):
    comments = await service.list_comments(ticket_id)
    return [CommentResponse.from_domain(comment) for comment in comments]


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentCreatedResponse,
    summary="Add comment",
    responses={**BAD_REQUEST_RESPONSE, **NOT_FOUND_RESPONSE}
)
async def add_comment(
    *,
    ticket_id: int = Path(..., ge=1, le=MAX_TICKET_ID, description="Ticket ID"),
    request: CommentCreateRequest,
    service: CommentService = Depends(get_comment_service)
):
    comment = await service.add_comment(ticket_id, request.comment, request.user_type)
    return CommentCreatedResponse(id=comment.id)


# Export router for inclusion in main app
tickets_router = router
