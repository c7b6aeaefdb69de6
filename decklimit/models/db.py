"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class PriceEntryDB(Base):
    """
    Cheapest known price for one card.

    The whole table is replaced on every successful scrape.
    """

    __tablename__ = "price_entries"

    # Normalized card id: lowercase alphanumerics
    id: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    def __repr__(self) -> str:
        return f"<PriceEntryDB(id={self.id}, price={self.price})>"


class ScraperStatsDB(Base):
    """
    Outcome of the last scrape attempt.

    Holds at most one row, replaced on every attempt.
    """

    __tablename__ = "scraper_stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    last_update: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<ScraperStatsDB(last_update={self.last_update}, error={self.last_error})>"
