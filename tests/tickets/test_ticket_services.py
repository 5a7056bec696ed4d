"""Service-level tests for tickets and comments against a real SQLite store."""
from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from src.config import TicketStatus, UserType
from src.core import ResourceNotFoundException, StorageUnavailableException, ValidationException
from src.infrastructure.database import storage_operation
from src.tickets.application import TicketService
from src.tickets.domain import Comment, Ticket
from src.tickets.infrastructure import (
    SQLAlchemyCommentRepository,
    SQLAlchemyTicketRepository,
    SQLAlchemyUnitOfWork,
)

from conftest import T0


async def _create(service: TicketService, priority: str = "High", title: str = "VPN down") -> Ticket:
    return await service.create_ticket(title, "Cannot connect since 9am", "Network", priority)


async def test_create_ticket_sets_defaults(ticket_service):
    ticket = await _create(ticket_service)

    assert ticket.id is not None
    assert ticket.status == TicketStatus.OPEN.value
    assert ticket.created_at == T0
    assert ticket.updated_at == T0
    assert ticket.sla_due_date == T0 + timedelta(hours=4)


async def test_create_ticket_round_trips_due_date(ticket_service):
    created = await _create(ticket_service, priority="Medium")

    fetched = await ticket_service.get_ticket(created.id)
    assert fetched.sla_due_date == T0 + timedelta(hours=12)
    assert fetched.sla_due_date.tzinfo is not None
    assert fetched.created_at == T0


async def test_create_ticket_writes_one_system_comment(ticket_service, comment_service):
    ticket = await _create(ticket_service)

    comments = await comment_service.list_comments(ticket.id)
    assert len(comments) == 1
    assert comments[0].comment == "Ticket created"
    assert comments[0].user_type == UserType.SYSTEM.value
    assert comments[0].is_system


@pytest.mark.parametrize("missing", ["title", "description", "category", "priority"])
async def test_create_ticket_requires_every_field(ticket_service, missing):
    fields = {"title": "t", "description": "d", "category": "c", "priority": "Low"}
    fields[missing] = ""

    with pytest.raises(ValidationException):
        await ticket_service.create_ticket(**fields)


async def test_create_ticket_rejects_unknown_priority(ticket_service):
    with pytest.raises(ValidationException, match="Invalid priority"):
        await _create(ticket_service, priority="Urgent")


async def test_permissive_mode_accepts_unknown_priority_with_low_window(uow, clock):
    service = TicketService(uow, clock, enforce_enumerations=False)

    ticket = await _create(service, priority="Urgent")
    assert ticket.sla_due_date == T0 + timedelta(hours=24)


async def test_ids_increase(ticket_service):
    first = await _create(ticket_service)
    second = await _create(ticket_service)
    assert second.id > first.id


async def test_list_tickets_newest_first(ticket_service, clock):
    older = await _create(ticket_service, title="older")
    clock.advance(minutes=5)
    newer = await _create(ticket_service, title="newer")

    tickets = await ticket_service.list_tickets()
    assert [t.id for t in tickets] == [newer.id, older.id]


async def test_get_missing_ticket(ticket_service):
    with pytest.raises(ResourceNotFoundException):
        await ticket_service.get_ticket(999)


async def test_update_status_refreshes_updated_at_and_logs(ticket_service, comment_service, clock):
    ticket = await _create(ticket_service)
    later = clock.advance(hours=1)

    await ticket_service.update_status(ticket.id, "In Progress")

    fetched = await ticket_service.get_ticket(ticket.id)
    assert fetched.status == "In Progress"
    assert fetched.updated_at == later
    assert fetched.created_at == T0
    assert fetched.sla_due_date == T0 + timedelta(hours=4)

    comments = await comment_service.list_comments(ticket.id)
    assert [c.comment for c in comments] == ["Ticket created", "Status changed to: In Progress"]


async def test_update_status_requires_status(ticket_service):
    ticket = await _create(ticket_service)
    with pytest.raises(ValidationException, match="Status is required"):
        await ticket_service.update_status(ticket.id, "")


async def test_update_status_rejects_unknown_status(ticket_service):
    ticket = await _create(ticket_service)
    with pytest.raises(ValidationException, match="Invalid status"):
        await ticket_service.update_status(ticket.id, "Escalated")


async def test_permissive_mode_accepts_any_status(uow, clock):
    service = TicketService(uow, clock, enforce_enumerations=False)
    ticket = await _create(service)

    await service.update_status(ticket.id, "Escalated")
    assert (await service.get_ticket(ticket.id)).status == "Escalated"


async def test_update_status_missing_ticket_writes_nothing(ticket_service, comment_service):
    with pytest.raises(ResourceNotFoundException):
        await ticket_service.update_status(404, "Closed")

    assert await comment_service.list_comments(404) == []


async def test_delete_ticket_cascades_to_comments(ticket_service, comment_service):
    ticket = await _create(ticket_service)
    await comment_service.add_comment(ticket.id, "Any news?", "user")

    await ticket_service.delete_ticket(ticket.id)

    assert await ticket_service.list_tickets() == []
    assert await comment_service.list_comments(ticket.id) == []
    with pytest.raises(ResourceNotFoundException):
        await ticket_service.get_ticket(ticket.id)


async def test_delete_missing_ticket(ticket_service):
    with pytest.raises(ResourceNotFoundException):
        await ticket_service.delete_ticket(12345)


async def test_add_comment_refreshes_ticket(ticket_service, comment_service, clock):
    ticket = await _create(ticket_service)
    before = (await ticket_service.get_ticket(ticket.id)).updated_at
    clock.advance(minutes=30)

    comment = await comment_service.add_comment(ticket.id, "Rebooted, still broken", "user")

    assert comment.id is not None
    assert comment.created_at == clock.now()
    after = (await ticket_service.get_ticket(ticket.id)).updated_at
    assert after >= before
    assert after == clock.now()


async def test_comments_listed_oldest_first(ticket_service, comment_service, clock):
    ticket = await _create(ticket_service)
    clock.advance(minutes=1)
    await comment_service.add_comment(ticket.id, "first", "user")
    clock.advance(minutes=1)
    await comment_service.add_comment(ticket.id, "second", "admin")

    comments = await comment_service.list_comments(ticket.id)
    assert [c.comment for c in comments] == ["Ticket created", "first", "second"]


@pytest.mark.parametrize("comment, user_type", [("", "user"), ("text", ""), (None, "user")])
async def test_add_comment_requires_text_and_user_type(ticket_service, comment_service, comment, user_type):
    ticket = await _create(ticket_service)
    with pytest.raises(ValidationException):
        await comment_service.add_comment(ticket.id, comment, user_type)


async def test_add_comment_to_missing_ticket(comment_service):
    with pytest.raises(ResourceNotFoundException):
        await comment_service.add_comment(777, "hello", "user")


async def test_list_comments_for_unknown_ticket_is_empty(comment_service):
    assert await comment_service.list_comments(777) == []


async def test_timestamps_survive_a_fresh_session(ticket_service, database):
    created = await _create(ticket_service)

    async with database.session() as other:
        fetched = await SQLAlchemyTicketRepository(other).get_by_id(created.id)

    assert fetched.created_at == T0
    assert fetched.updated_at == T0
    assert fetched.sla_due_date == T0 + timedelta(hours=4)
    assert fetched.sla_due_date.utcoffset() == timedelta(0)


async def test_clock_stepping_back_never_rewinds_updated_at(ticket_service, comment_service, clock):
    ticket = await _create(ticket_service)
    clock.advance(seconds=-1)

    await comment_service.add_comment(ticket.id, "Still broken", "user")
    assert (await ticket_service.get_ticket(ticket.id)).updated_at == T0

    await ticket_service.update_status(ticket.id, "In Progress")
    fetched = await ticket_service.get_ticket(ticket.id)
    assert fetched.status == "In Progress"
    assert fetched.updated_at == T0
    assert [t.id for t in await ticket_service.list_tickets()] == [ticket.id]


class BrokenCommentRepository(SQLAlchemyCommentRepository):
    """Comment store whose inserts fail at the driver."""

    @storage_operation
    async def create(self, comment: Comment) -> Comment:
        raise OperationalError("INSERT INTO comments", {}, Exception("disk I/O error"))


async def test_failed_system_comment_discards_the_ticket(database, clock):
    with pytest.raises(StorageUnavailableException):
        async with database.session() as session:
            uow = SQLAlchemyUnitOfWork(session)
            uow.comments = BrokenCommentRepository(session)
            await _create(TicketService(uow, clock))

    async with database.session() as session:
        service = TicketService(SQLAlchemyUnitOfWork(session), clock)
        assert await service.list_tickets() == []
