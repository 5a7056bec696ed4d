"""
Ticket Application Services
===========================

Application services orchestrate business logic and coordinate between
domain entities and repositories.

Every mutating operation runs inside one unit of work and commits once at
the end, so a ticket and its system comment are stored together or not at
all.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from src.config import (
    TicketStatus, UserType,
    VALID_PRIORITIES, VALID_STATUSES
)
from src.core import Clock, ValidationException, ResourceNotFoundException
from src.shared.infrastructure.logging import get_logger
from src.tickets.domain import Ticket, Comment

logger = get_logger(__name__)

TICKET_CREATED_TEXT = "Ticket created"
STATUS_CHANGED_TEXT = "Status changed to: {status}"


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        """Get ticket by ID."""

    @abstractmethod
    async def create(self, ticket: Ticket) -> Ticket:
        """Insert ticket and return it with its assigned ID."""

    @abstractmethod
    async def update_status(self, ticket_id: int, status: str, updated_at: datetime) -> int:
        """Set status and updated_at. Returns rows affected."""

    @abstractmethod
    async def touch(self, ticket_id: int, updated_at: datetime) -> int:
        """Refresh updated_at. Returns rows affected."""

    @abstractmethod
    async def delete(self, ticket_id: int) -> int:
        """Delete ticket. Returns rows affected."""

    @abstractmethod
    async def list(self, newest_first: bool = True) -> List[Ticket]:
        """List every ticket by creation time."""

    @abstractmethod
    async def count_by_status(self) -> Dict[str, int]:
        """Ticket count per status value, from a single query."""


class ICommentRepository(ABC):
    """Interface for comment data access."""

    @abstractmethod
    async def create(self, comment: Comment) -> Comment:
        """Insert comment and return it with its assigned ID."""

    @abstractmethod
    async def list_for_ticket(self, ticket_id: int) -> List[Comment]:
        """Comments for a ticket, oldest first."""

    @abstractmethod
    async def delete_for_ticket(self, ticket_id: int) -> int:
        """Delete every comment for a ticket. Returns rows affected."""

    @abstractmethod
    async def list(self) -> List[Comment]:
        """Every comment in ID order."""


class IUnitOfWork(ABC):
    """Repositories sharing one transaction."""

    tickets: ITicketRepository
    comments: ICommentRepository

    @abstractmethod
    async def commit(self) -> None:
        """Commit everything done through the repositories."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard everything done through the repositories."""


def _require(message: str, **fields: Optional[str]) -> None:
    """Raise ValidationException when any field is None or empty."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationException(message, details={"missing": missing})


# ========== Application Services ==========

class CommentService:
    """
    Service for comments attached to tickets.

    Owns the ticket ``updated_at`` refresh that follows a user comment.
    """

    def __init__(self, unit_of_work: IUnitOfWork, clock: Clock):
        self._uow = unit_of_work
        self._clock = clock

    async def list_comments(self, ticket_id: int) -> List[Comment]:
        """
        Comments for a ticket, oldest first.

        An unknown ticket yields an empty list rather than an error.
        """
        return await self._uow.comments.list_for_ticket(ticket_id)

    async def add_comment(
        self,
        ticket_id: int,
        comment: Optional[str],
        user_type: Optional[str]
    ) -> Comment:
        """
        Append a comment and refresh the ticket's updated_at (never backwards).

        Raises:
            ValidationException: comment or user_type missing
            ResourceNotFoundException: ticket does not exist
        """
        _require("Comment and user_type are required", comment=comment, user_type=user_type)

        ticket = await self._uow.tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)

        now = self._clock.now()
        created = await self._uow.comments.create(Comment(
            id=None,
            ticket_id=ticket_id,
            comment=comment,
            user_type=user_type,
            created_at=now
        ))
        await self._uow.tickets.touch(ticket_id, ticket.refreshed_at(now))
        await self._uow.commit()

        logger.info(
            "Comment added",
            extra={"ticket_id": ticket_id, "comment_id": created.id, "user_type": user_type}
        )
        return created

    async def record_system_comment(self, ticket_id: int, text: str) -> Comment:
        """Append an audit comment. Does not commit; the caller owns the transaction."""
        return await self._uow.comments.create(Comment(
            id=None,
            ticket_id=ticket_id,
            comment=text,
            user_type=UserType.SYSTEM.value,
            created_at=self._clock.now()
        ))

    async def delete_for_ticket(self, ticket_id: int) -> int:
        """Remove every comment of a ticket. Does not commit."""
        return await self._uow.comments.delete_for_ticket(ticket_id)


class TicketService:
    """
    Service for the ticket lifecycle.

    Create, read, status transitions and delete. Lifecycle events are
    written to the audit trail through CommentService.
    """

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        clock: Clock,
        comment_service: Optional[CommentService] = None,
        enforce_enumerations: bool = True
    ):
        self._uow = unit_of_work
        self._clock = clock
        self._comments = comment_service or CommentService(unit_of_work, clock)
        self._enforce_enumerations = enforce_enumerations

    async def create_ticket(
        self,
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        priority: Optional[str]
    ) -> Ticket:
        """
        Create a ticket in the Open state with its SLA due date fixed.

        Raises:
            ValidationException: a field is missing, or the priority is not a
                known tier while enumerations are enforced
        """
        _require(
            "Missing required fields",
            title=title, description=description, category=category, priority=priority
        )
        if self._enforce_enumerations and priority not in VALID_PRIORITIES:
            raise ValidationException(
                f"Invalid priority '{priority}'. Must be one of: {', '.join(VALID_PRIORITIES)}",
                details={"field": "priority", "allowed": VALID_PRIORITIES}
            )

        ticket = Ticket.open(title, description, category, priority, self._clock.now())
        ticket = await self._uow.tickets.create(ticket)
        await self._comments.record_system_comment(ticket.id, TICKET_CREATED_TEXT)
        await self._uow.commit()

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "priority": ticket.priority,
                "category": ticket.category,
                "sla_due_date": ticket.sla_due_date.isoformat()
            }
        )
        return ticket

    async def list_tickets(self) -> List[Ticket]:
        """All tickets, most recent first."""
        return await self._uow.tickets.list(newest_first=True)

    async def get_ticket(self, ticket_id: int) -> Ticket:
        """
        Get a ticket by ID.

        Raises:
            ResourceNotFoundException: no such ticket
        """
        ticket = await self._uow.tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        return ticket

    async def update_status(self, ticket_id: int, status: Optional[str]) -> None:
        """
        Move a ticket to a new status and log the change.

        Raises:
            ValidationException: status missing, or not a known status while
                enumerations are enforced
            ResourceNotFoundException: no such ticket (nothing is written)
        """
        _require("Status is required", status=status)
        if self._enforce_enumerations and status not in VALID_STATUSES:
            raise ValidationException(
                f"Invalid status '{status}'. Must be one of: {', '.join(VALID_STATUSES)}",
                details={"field": "status", "allowed": VALID_STATUSES}
            )

        ticket = await self._uow.tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)

        changed = await self._uow.tickets.update_status(
            ticket_id, status, ticket.refreshed_at(self._clock.now())
        )
        if changed == 0:
            # Deleted between the read and the update
            raise ResourceNotFoundException("Ticket", ticket_id)

        await self._comments.record_system_comment(
            ticket_id, STATUS_CHANGED_TEXT.format(status=status)
        )
        await self._uow.commit()

        logger.info("Ticket status changed", extra={"ticket_id": ticket_id, "status": status})

    async def delete_ticket(self, ticket_id: int) -> None:
        """
        Delete a ticket and, first, all of its comments.

        Raises:
            ResourceNotFoundException: no such ticket; the comment delete
                is rolled back with it
        """
        removed_comments = await self._comments.delete_for_ticket(ticket_id)
        removed = await self._uow.tickets.delete(ticket_id)
        if removed == 0:
            await self._uow.rollback()
            raise ResourceNotFoundException("Ticket", ticket_id)

        await self._uow.commit()

        logger.info(
            "Ticket deleted",
            extra={"ticket_id": ticket_id, "comments_deleted": removed_comments}
        )
