"""
Price catalog endpoints.

Read-only views of the scraped catalog: scraper status and single card
price resolution (basic lands included).
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from decklimit.db.database import get_session
from decklimit.db.operations import count_prices, get_scraper_stats, load_price_catalog
from decklimit.models.failure import FailureDetail, FailureKind
from decklimit.services.normalizer import card_id
from decklimit.services.pricing import resolve_card_price

router = APIRouter(prefix="/prices", tags=["prices"])


class ScraperStatusResponse(BaseModel):
    """Outcome of the most recent scrape."""

    last_update: datetime | None = Field(default=None, description="Last scrape attempt")
    last_error: str | None = Field(default=None, description="Error from that attempt")
    card_count: int = Field(..., description="Cards in the price catalog")


class CardPriceResponse(BaseModel):
    """Resolved price for one card."""

    id: str
    name: str
    price: str = Field(..., description="Price rendered as currency, e.g. $1.25")


@router.get("/status", response_model=ScraperStatusResponse)
async def scraper_status(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ScraperStatusResponse:
    stats = await get_scraper_stats(session)
    card_count = await count_prices(session)
    if stats is None:
        return ScraperStatusResponse(card_count=card_count)
    return ScraperStatusResponse(
        last_update=stats.last_update,
        last_error=stats.last_error,
        card_count=card_count,
    )


@router.get(
    "/{card_name}",
    response_model=CardPriceResponse,
    responses={404: {"model": FailureDetail}},
)
async def card_price(
    card_name: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CardPriceResponse:
    """Resolve a card name to its canonical name and cheapest price."""
    catalog = await load_price_catalog(session, [card_name])
    name, price, found = resolve_card_price(card_name, catalog)
    if not found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=FailureDetail(
                kind=FailureKind.NOT_FOUND,
                message=f"No price known for '{card_name}'",
            ).model_dump(mode="json"),
        )
    return CardPriceResponse(id=card_id(name), name=name, price=str(price))
