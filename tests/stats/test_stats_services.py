"""Tests for the stats aggregator."""
from __future__ import annotations

from src.stats.application import StatsService, StatsResponse, TicketStats
from src.tickets.application import TicketService


async def test_empty_store_counts_are_zero(uow):
    stats = await StatsService(uow).compute()
    assert stats == TicketStats(total=0, open=0, in_progress=0, resolved=0, closed=0)


async def test_one_ticket_per_status(uow, ticket_service):
    for status in ["Open", "In Progress", "Resolved", "Closed"]:
        ticket = await ticket_service.create_ticket("t", "d", "c", "Low")
        if status != "Open":
            await ticket_service.update_status(ticket.id, status)

    stats = await StatsService(uow).compute()
    assert stats == TicketStats(total=4, open=1, in_progress=1, resolved=1, closed=1)


async def test_total_includes_custom_statuses(uow, clock):
    service = TicketService(uow, clock, enforce_enumerations=False)
    ticket = await service.create_ticket("t", "d", "c", "Low")
    await service.update_status(ticket.id, "Waiting on vendor")
    await service.create_ticket("t2", "d", "c", "Low")

    stats = await StatsService(uow).compute()
    assert stats.total == 2
    assert stats.open == 1


async def test_dump_returns_both_tables(uow, ticket_service, comment_service):
    first = await ticket_service.create_ticket("first", "d", "c", "High")
    second = await ticket_service.create_ticket("second", "d", "c", "Medium")
    await comment_service.add_comment(first.id, "hello", "user")

    dump = await StatsService(uow).dump()
    assert [t.id for t in dump.tickets] == [first.id, second.id]
    assert dump.total_tickets == 2
    assert dump.total_comments == 3
    assert [c.comment for c in dump.comments] == ["Ticket created", "Ticket created", "hello"]


def test_stats_response_uses_camel_case_for_in_progress():
    body = StatsResponse.from_stats(
        TicketStats(total=3, open=1, in_progress=2, resolved=0, closed=0)
    ).model_dump(by_alias=True)
    assert body == {"total": 3, "open": 1, "inProgress": 2, "resolved": 0, "closed": 0}
