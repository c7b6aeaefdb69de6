"""
Failure classification for the pricing core.

Two families of failures exist:

- Scrape failures (FetchFailure, ParseFailure) abort a whole price scrape.
  They are recorded in the scraper stats and never escape the scheduler.
- Input failures (InvalidInputError) reject bad caller data locally.

A card that cannot be found in the price catalog is NOT a failure. It is
carried as data on the card entry (``not_found``) and makes the snapshot
illegal.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"

    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a serializable FailureDetail."""
        return FailureDetail(kind=self.kind, message=self.message, detail=self.detail)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class InvalidInputError(KnownError):
    """Raised when a caller hands the core malformed data."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.INVALID_INPUT, message=message, detail=detail)


class ScrapeError(KnownError):
    """Base class for failures that abort a price scrape run."""


class FetchFailure(ScrapeError):
    """An index or listing page could not be fetched."""

    def __init__(self, url: str, detail: str):
        self.url = url
        super().__init__(
            kind=FailureKind.FETCH_FAILED,
            message=f"Failed to fetch {url}",
            detail=detail,
            status_code=502,
        )


class ParseFailure(ScrapeError):
    """A listing row carried price text that is not a number."""

    def __init__(self, url: str, raw_price: str):
        self.url = url
        self.raw_price = raw_price
        super().__init__(
            kind=FailureKind.PARSE_FAILED,
            message=f"Malformed price on {url}",
            detail=repr(raw_price),
            status_code=502,
        )
