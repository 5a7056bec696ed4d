"""
Stats Controllers (API Routes)
==============================

FastAPI routes for dashboard counts and the debug table view.
"""

from fastapi import APIRouter, Depends

from src.shared.api.dependencies import get_unit_of_work
from src.stats.application import StatsService, StatsResponse, DebugTablesResponse
from src.tickets.infrastructure import SQLAlchemyUnitOfWork

router = APIRouter(tags=["Stats"])


STATS_RESPONSE_EXAMPLE = {
    "total": 4,
    "open": 1,
    "inProgress": 1,
    "resolved": 1,
    "closed": 1
}


async def get_stats_service(
    uow: SQLAlchemyUnitOfWork = Depends(get_unit_of_work)
) -> StatsService:
    """Get stats service instance."""
    return StatsService(uow)


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Ticket counts per status",
    responses={
        200: {"content": {"application/json": {"example": STATS_RESPONSE_EXAMPLE}}}
    }
)
async def get_stats(service: StatsService = Depends(get_stats_service)):
    return StatsResponse.from_stats(await service.compute())


@router.get(
    "/debug/tables",
    response_model=DebugTablesResponse,
    summary="Dump tickets and comments tables"
)
async def get_debug_tables(service: StatsService = Depends(get_stats_service)):
    return DebugTablesResponse.from_dump(await service.dump())


# Export router for inclusion in main app
stats_router = router
