"""Shared fixtures: frozen clock, temporary SQLite databases, API client."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.infrastructure.database import Database
from src.main import create_app
from src.tickets.application import CommentService, TicketService
from src.tickets.infrastructure import SQLAlchemyUnitOfWork

T0 = datetime(2024, 1, 15, 10, 0, 0, 123456, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


def make_settings(tmp_path, **overrides) -> Settings:
    values = {"database_url": f"sqlite+aiosqlite:///{tmp_path / 'helpdesk.db'}"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
async def database(settings):
    database = Database(settings)
    database.connect()
    await database.create_tables()
    yield database
    await database.close()


@pytest.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def uow(session) -> SQLAlchemyUnitOfWork:
    return SQLAlchemyUnitOfWork(session)


@pytest.fixture
def comment_service(uow, clock) -> CommentService:
    return CommentService(uow, clock)


@pytest.fixture
def ticket_service(uow, clock, comment_service) -> TicketService:
    return TicketService(uow, clock, comment_service=comment_service)


@pytest.fixture
def client(settings, clock):
    app = create_app(settings, clock=clock)
    with TestClient(app) as client:
        yield client
