"""Schemas for symbol lookup, cleaning and bulk processing."""
from enum import Enum

from pydantic import Field

from app.schemas.base import StrictBaseModel


class SymbolListResponse(StrictBaseModel):
    symbols: list[str]
    count: int


class SymbolIndustryResponse(StrictBaseModel):
    symbol: str
    industry: str


class SymbolInput(StrictBaseModel):
    """Symbols given as a list, as pasted free text, or both.

    Free text may use commas, semicolons or newlines as separators and may
    carry ``NSE:`` prefixes.
    """

    symbols: list[str] = Field(default_factory=list, description="Symbols as a list")
    text: str = Field("", description="Symbols as pasted free text")

    def combined(self) -> list[str]:
        return [*self.symbols, self.text] if self.text else list(self.symbols)


class CleanSymbolsRequest(StrictBaseModel):
    text: str = Field(..., description="Free text to clean, e.g. 'nse:abc, DEF;ghi'")


class CleanSymbolsResponse(StrictBaseModel):
    symbols: list[str]
    count: int


class ProcessSymbolsRequest(SymbolInput):
    include_fundamentals: bool = Field(
        False, description="Attach latest-quarter fundamentals to each mapped symbol"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "symbols": [],
                    "text": "NSE:TCS, infy\nHDFCBANK;XYZ",
                    "include_fundamentals": True,
                }
            ]
        }
    }


class FundamentalsSchema(StrictBaseModel):
    rs_rating: str | None = None
    eps_latest_quarter: str | None = None
    qoq_eps_latest: str | None = None
    yoy_eps_latest: str | None = None
    sales_latest_quarter: str | None = None
    qoq_sales_latest: str | None = None
    yoy_sales_latest: str | None = None


class MappedSymbolSchema(StrictBaseModel):
    symbol: str
    industry: str
    fundamentals: FundamentalsSchema | None = None
    results_date: str | None = None


class IndustryShareSchema(StrictBaseModel):
    industry: str
    count: int
    percentage: float = Field(description="Share of mapped symbols, 0-100, one decimal")


class ProcessSymbolsResponse(StrictBaseModel):
    """Result of a bulk lookup with both TradingView exports."""

    mapped_symbols: list[MappedSymbolSchema]
    invalid_symbols: list[str]
    categorized_output: str = Field(description="###Industry(n),NSE:A,NSE:B blocks")
    flat_output: str = Field(description="NSE:A,NSE:B in alphabetical order")
    distribution: list[IndustryShareSchema]
    mapped_count: int
    invalid_count: int


class ExportFormat(str, Enum):
    MAPPING = "mapping"
    FUNDAMENTALS = "fundamentals"


class ExportCsvRequest(SymbolInput):
    format: ExportFormat = Field(
        ExportFormat.MAPPING,
        description="'mapping' for Symbol,Industry or 'fundamentals' for the full table",
    )
