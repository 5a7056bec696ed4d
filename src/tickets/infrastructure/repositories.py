"""
Ticket Infrastructure Repositories
==================================

Concrete implementations of repository interfaces using SQLAlchemy.

The same code serves SQLite and PostgreSQL. Updates and deletes are single
statements whose row counts tell the services whether the ticket existed.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import storage_operation
from src.tickets.application import ICommentRepository, ITicketRepository, IUnitOfWork
from src.tickets.domain import Comment, Ticket
from src.tickets.infrastructure.models import CommentModel, TicketModel


def _ticket_to_domain(model: TicketModel) -> Ticket:
    return Ticket(
        id=model.id,
        title=model.title,
        description=model.description,
        category=model.category,
        priority=model.priority,
        status=model.status,
        created_at=model.created_at,
        updated_at=model.updated_at,
        sla_due_date=model.sla_due_date
    )


def _comment_to_domain(model: CommentModel) -> Comment:
    return Comment(
        id=model.id,
        ticket_id=model.ticket_id,
        comment=model.comment,
        user_type=model.user_type,
        created_at=model.created_at
    )


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Handles persistence of Ticket entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @storage_operation
    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        """Get ticket by ID."""
        stmt = select(TicketModel).where(TicketModel.id == ticket_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _ticket_to_domain(model) if model else None

    @storage_operation
    async def create(self, ticket: Ticket) -> Ticket:
        """Create new ticket."""
        model = TicketModel(
            title=ticket.title,
            description=ticket.description,
            category=ticket.category,
            priority=ticket.priority,
            status=ticket.status,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            sla_due_date=ticket.sla_due_date
        )

        self._session.add(model)
        await self._session.flush()

        ticket.id = model.id
        return ticket

    @storage_operation
    async def update_status(self, ticket_id: int, status: str, updated_at: datetime) -> int:
        """Set status and updated_at in one statement."""
        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_id)
            .values(status=status, updated_at=updated_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    @storage_operation
    async def touch(self, ticket_id: int, updated_at: datetime) -> int:
        """Refresh updated_at."""
        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_id)
            .values(updated_at=updated_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    @storage_operation
    async def delete(self, ticket_id: int) -> int:
        """Delete ticket."""
        stmt = (
            delete(TicketModel)
            .where(TicketModel.id == ticket_id)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    @storage_operation
    async def list(self, newest_first: bool = True) -> List[Ticket]:
        """
        List every ticket.

        newest_first orders by created_at descending (ties by ID descending),
        otherwise by ID ascending.
        """
        stmt = select(TicketModel)
        if newest_first:
            stmt = stmt.order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
        else:
            stmt = stmt.order_by(TicketModel.id.asc())

        result = await self._session.execute(stmt)
        return [_ticket_to_domain(model) for model in result.scalars().all()]

    @storage_operation
    async def count_by_status(self) -> Dict[str, int]:
        """Ticket count per status, one grouped query."""
        stmt = (
            select(TicketModel.status, func.count(TicketModel.id))
            .group_by(TicketModel.status)
        )
        result = await self._session.execute(stmt)
        return {status: count for status, count in result.all()}


class SQLAlchemyCommentRepository(ICommentRepository):
    """
    SQLAlchemy implementation of comment repository.

    Handles persistence of Comment entities.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @storage_operation
    async def create(self, comment: Comment) -> Comment:
        """Create new comment."""
        model = CommentModel(
            ticket_id=comment.ticket_id,
            comment=comment.comment,
            user_type=comment.user_type,
            created_at=comment.created_at
        )

        self._session.add(model)
        await self._session.flush()

        comment.id = model.id
        return comment

    @storage_operation
    async def list_for_ticket(self, ticket_id: int) -> List[Comment]:
        """Comments for a ticket, oldest first."""
        stmt = (
            select(CommentModel)
            .where(CommentModel.ticket_id == ticket_id)
            .order_by(CommentModel.created_at.asc(), CommentModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [_comment_to_domain(model) for model in result.scalars().all()]

    @storage_operation
    async def delete_for_ticket(self, ticket_id: int) -> int:
        """Delete every comment for a ticket."""
        stmt = (
            delete(CommentModel)
            .where(CommentModel.ticket_id == ticket_id)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    @storage_operation
    async def list(self) -> List[Comment]:
        """Every comment in ID order."""
        stmt = select(CommentModel).order_by(CommentModel.id.asc())
        result = await self._session.execute(stmt)
        return [_comment_to_domain(model) for model in result.scalars().all()]


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """Ticket and comment repositories bound to one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self.tickets = SQLAlchemyTicketRepository(session)
        self.comments = SQLAlchemyCommentRepository(session)

    @storage_operation
    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
