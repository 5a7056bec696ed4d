"""
Shared API Dependencies
=======================

FastAPI dependencies reading per-app state set up by ``create_app``.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.core import Clock
from src.infrastructure.database import get_session
from src.tickets.infrastructure import SQLAlchemyUnitOfWork


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with."""
    return request.app.state.settings


def get_clock(request: Request) -> Clock:
    """Clock the app was built with."""
    return request.app.state.clock


async def get_unit_of_work(
    session: AsyncSession = Depends(get_session)
) -> SQLAlchemyUnitOfWork:
    """Repositories bound to the request's session."""
    return SQLAlchemyUnitOfWork(session)
