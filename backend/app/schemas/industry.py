"""Schemas for the industry index API."""

from pydantic import Field

from app.schemas.base import StrictBaseModel


class IndustryListResponse(StrictBaseModel):
    """All known industry names, sorted."""

    industries: list[str]
    count: int = Field(description="Number of industries")


class IndustrySymbolsResponse(StrictBaseModel):
    """Symbols belonging to one industry."""

    industry: str
    symbols: list[str]
    count: int = Field(description="Number of symbols in the industry")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "industry": "Private Sector Bank",
                    "symbols": ["HDFCBANK", "ICICIBANK"],
                    "count": 2,
                }
            ]
        }
    }


class IndustryStatsResponse(StrictBaseModel):
    """Index size and load state."""

    total_symbols: int
    mapped_industries: int = Field(description="Industries with at least one symbol")
    total_industries: int = Field(description="Industries listed in the catalog")
    ready: bool
    degraded: bool = Field(description="True when a placeholder index is served after a failed load")
    load_error: str | None = None


class TopIndustry(StrictBaseModel):
    industry: str
    count: int


class TopIndustriesResponse(StrictBaseModel):
    """Largest industries by symbol count."""

    items: list[TopIndustry]
