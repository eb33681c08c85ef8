"""In-memory reference data records for NSE symbols.

These are plain dataclasses rather than ORM models: reference data is loaded
from CSV on startup and never persisted.
"""
from dataclasses import dataclass, field, fields
from typing import Any

UNKNOWN_INDUSTRY = "Unknown"


@dataclass(frozen=True)
class Fundamentals:
    """Latest-quarter fundamentals for a symbol, kept as display strings."""

    rs_rating: str | None = None
    eps_latest_quarter: str | None = None
    qoq_eps_latest: str | None = None
    yoy_eps_latest: str | None = None
    sales_latest_quarter: str | None = None
    qoq_sales_latest: str | None = None
    yoy_sales_latest: str | None = None

    def is_empty(self) -> bool:
        """True when no fundamentals column carried a value."""
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> dict[str, str | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class StockRecord:
    """One row of reference data per ticker symbol."""

    symbol: str
    industry: str = UNKNOWN_INDUSTRY
    name: str = ""
    price: float = 0.0
    relative_strength: float = 0.0
    volume: float = 0.0
    fundamentals: Fundamentals | None = None


@dataclass
class MappedSymbol:
    """A requested symbol resolved against the index."""

    symbol: str
    industry: str
    fundamentals: Fundamentals | None = None
    results_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "industry": self.industry,
            "fundamentals": self.fundamentals.to_dict() if self.fundamentals else None,
            "results_date": self.results_date,
        }


@dataclass
class IndustryMapperStats:
    """Counts describing the loaded index.

    ``mapped_industries`` counts industries that have at least one symbol;
    ``total_industries`` counts the catalog, which may list empty industries.
    """

    total_symbols: int = 0
    mapped_industries: int = 0
    total_industries: int = 0


@dataclass
class ProcessResult:
    """Everything produced by a bulk symbol lookup."""

    mapped_symbols: list[MappedSymbol] = field(default_factory=list)
    invalid_symbols: list[str] = field(default_factory=list)
    categorized_output: str = ""
    flat_output: str = ""


@dataclass
class IndustryShare:
    """Share of a set of mapped symbols belonging to one industry."""

    industry: str
    count: int
    percentage: float
