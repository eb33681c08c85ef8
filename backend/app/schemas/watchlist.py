"""Schemas for the Watchlist API."""

from pydantic import Field

from app.schemas.base import StrictBaseModel


class WatchlistResponse(StrictBaseModel):
    """The current watchlist in display order."""

    symbols: list[str]
    count: int = Field(description="Number of symbols in the watchlist")

    model_config = {
        "json_schema_extra": {
            "examples": [{"symbols": ["TCS", "INFY", "HDFCBANK"], "count": 3}]
        }
    }


class WatchlistAddRequest(StrictBaseModel):
    """Symbols to add, as a list and/or pasted free text."""

    symbols: list[str] = Field(default_factory=list, max_length=999)
    text: str = Field("", description="Free text, e.g. 'NSE:TCS, infy'")


class WatchlistReorderRequest(StrictBaseModel):
    symbols: list[str] = Field(
        ..., description="All current watchlist symbols in their new order"
    )


class WatchlistContainsResponse(StrictBaseModel):
    symbol: str
    in_watchlist: bool
