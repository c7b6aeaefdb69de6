"""
Health check endpoints.

/health reports whether the background price scheduler is alive; /ready
additionally probes the price catalog database.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from decklimit.db.database import get_session
from decklimit.db.operations import count_prices

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    scheduler: str
    database: str | None = None
    card_count: int | None = None


def _scheduler_state(request: Request) -> str:
    scheduler = getattr(request.app.state, "price_scheduler", None)
    if scheduler is None or not scheduler.is_running:
        return "stopped"
    if scheduler.scrape_in_flight:
        return "scraping"
    return "running"


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health(request: Request) -> HealthResponse:
    """Liveness probe. Does not touch the database."""
    return HealthResponse(status="healthy", scheduler=_scheduler_state(request))


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    request: Request,
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 if the price catalog cannot be read. An empty catalog is
    still ready; cards simply resolve as not found until the first scrape.
    """
    scheduler = _scheduler_state(request)
    try:
        card_count = await count_prices(session)
    except SQLAlchemyError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", scheduler=scheduler, database="disconnected")
    return HealthResponse(
        status="ready", scheduler=scheduler, database="connected", card_count=card_count
    )
