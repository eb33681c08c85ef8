"""Symbol/industry reference index.

Loads the Basic RS Setup, Industry Analytics and Results Calendar datasets
once at startup and answers lookups from memory:

- records: symbol -> StockRecord (authoritative)
- industry index: industry -> sorted symbols, derived from records
- catalog: industry names listed by the industry analytics dataset
- results dates: symbol -> quarterly results date
- hot cache: LRU of industry -> symbols, preloaded with the largest industries

Queries never raise. Before the index is ready, or if a query fails, they log
a warning and return a fixed fallback value.
"""
import asyncio
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from cachetools import LRUCache

from app.core.exceptions import InitializationTimeoutError
from app.models.stock import (
    IndustryMapperStats,
    MappedSymbol,
    ProcessResult,
    StockRecord,
)
from app.providers.base import CSVDataset, DataSourceInterface
from app.services.csv_loader import (
    parse_industry_catalog,
    parse_results_dates,
    parse_stock_records,
)
from app.services.export_service import format_categorized_output, format_flat_output
from app.utils import validation
from app.utils.structured_logging import get_logger, reference_data_context

logger = get_logger(__name__, component="industry_mapper")

PLACEHOLDER_SYMBOL = "EXAMPLE"
PLACEHOLDER_INDUSTRY = "Example Industry"
PLACEHOLDER_NAME = "Example Stock"

# Returned by queries before the index is ready
FALLBACK_INDUSTRY = "Sample Industry"
FALLBACK_SYMBOL = "SAMPLE"

DEFAULT_INIT_TIMEOUT = 10.0
DEFAULT_HOT_CACHE_INDUSTRIES = 10
DEFAULT_MAX_SYMBOLS = 999


@dataclass
class IndustryIndex:
    """An immutable-by-convention snapshot of the loaded reference data."""

    records: dict[str, StockRecord] = field(default_factory=dict)
    industry_index: dict[str, list[str]] = field(default_factory=dict)
    catalog: set[str] = field(default_factory=set)
    results_dates: dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        records: Iterable[StockRecord],
        catalog: Iterable[str] = (),
        results_dates: dict[str, str] | None = None,
    ) -> "IndustryIndex":
        """Build records and the derived industry index together.

        A symbol appearing twice keeps its last row, so every symbol lands in
        exactly one industry list.
        """
        by_symbol: dict[str, StockRecord] = {}
        for record in records:
            by_symbol[record.symbol] = record

        grouped: dict[str, list[str]] = {}
        for symbol, record in by_symbol.items():
            grouped.setdefault(record.industry, []).append(symbol)

        return cls(
            records=by_symbol,
            industry_index={industry: sorted(symbols) for industry, symbols in grouped.items()},
            catalog=set(catalog),
            results_dates=dict(results_dates or {}),
        )

    @classmethod
    def placeholder(cls) -> "IndustryIndex":
        """One example stock in one catalogued industry."""
        record = StockRecord(
            symbol=PLACEHOLDER_SYMBOL, industry=PLACEHOLDER_INDUSTRY, name=PLACEHOLDER_NAME
        )
        return cls.build([record], catalog=[PLACEHOLDER_INDUSTRY])

    def industries_by_count(self) -> list[str]:
        """Industries by descending symbol count; ties keep first-seen order."""
        counts = Counter(record.industry for record in self.records.values())
        return [industry for industry, _ in counts.most_common()]


class IndustryMapper:
    """
    In-memory symbol/industry index built from the CSV reference datasets.

    Lifecycle:
    1. Construct with a data source (no I/O)
    2. ``await initialize()`` fetches, parses and swaps in a complete index
    3. Synchronous queries are served from memory

    A failed or timed-out load swaps in a one-symbol placeholder index
    (``EXAMPLE -> Example Industry``) and marks the mapper degraded. With
    ``fallback_on_failure=False`` the index stays empty and the mapper is
    not ready.
    """

    def __init__(
        self,
        data_source: DataSourceInterface,
        *,
        init_timeout: float = DEFAULT_INIT_TIMEOUT,
        hot_cache_industries: int = DEFAULT_HOT_CACHE_INDUSTRIES,
        hot_cache_max_entries: int = 64,
        max_symbols: int = DEFAULT_MAX_SYMBOLS,
        fallback_on_failure: bool = True,
    ):
        self.data_source = data_source
        self.init_timeout = init_timeout
        self.hot_cache_industries = hot_cache_industries
        self.max_symbols = max_symbols
        self.fallback_on_failure = fallback_on_failure

        self._hot_cache_size = max(1, hot_cache_max_entries, hot_cache_industries)
        self._index = IndustryIndex()
        self._hot_cache: LRUCache = LRUCache(maxsize=self._hot_cache_size)
        self._ready = False
        self._degraded = False
        self._load_error: str | None = None
        self._init_lock = asyncio.Lock()

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def degraded(self) -> bool:
        """True when the placeholder index is being served after a failed load."""
        return self._degraded

    @property
    def load_error(self) -> str | None:
        return self._load_error

    @property
    def hot_cache(self) -> LRUCache:
        return self._hot_cache

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def initialize(self, timeout: float | None = None) -> None:
        """Load all datasets and swap in a fresh index.

        The load races ``timeout`` seconds (default ``init_timeout``); on
        timeout the load task is cancelled. Never raises.
        """
        timeout = self.init_timeout if timeout is None else timeout

        async with self._init_lock:
            with reference_data_context(self.data_source.source_name):
                logger.info("Loading reference data", timeout=timeout)
                try:
                    index = await asyncio.wait_for(self._load_index(), timeout=timeout)
                except asyncio.TimeoutError:
                    self._apply_failure(
                        InitializationTimeoutError(f"Reference data load exceeded {timeout}s")
                    )
                    return
                except Exception as e:
                    self._apply_failure(e)
                    return

                self._swap(index, degraded=False, load_error=None)
                stats = self.stats()
                logger.info(
                    "Reference data loaded",
                    symbols=stats.total_symbols,
                    industries=stats.mapped_industries,
                    catalog_industries=stats.total_industries,
                    results_dates=len(index.results_dates),
                )

    async def _load_index(self) -> IndustryIndex:
        basic_rs, industry_analytics, results_calendar = await asyncio.gather(
            self.data_source.fetch_text(CSVDataset.BASIC_RS),
            self.data_source.fetch_text(CSVDataset.INDUSTRY_ANALYTICS),
            self.data_source.fetch_text(CSVDataset.RESULTS_CALENDAR),
        )
        return IndustryIndex.build(
            parse_stock_records(basic_rs),
            parse_industry_catalog(industry_analytics),
            parse_results_dates(results_calendar),
        )

    def _apply_failure(self, error: Exception) -> None:
        reason = f"{type(error).__name__}: {error}"
        if self.fallback_on_failure:
            logger.warning("Reference data load failed, serving placeholder index", error=reason)
            self._swap(IndustryIndex.placeholder(), degraded=True, load_error=reason)
        else:
            logger.error("Reference data load failed", error=reason)
            self._index = IndustryIndex()
            self._hot_cache = LRUCache(maxsize=self._hot_cache_size)
            self._ready = False
            self._degraded = False
            self._load_error = reason

    def _swap(self, index: IndustryIndex, *, degraded: bool, load_error: str | None) -> None:
        hot_cache: LRUCache = LRUCache(maxsize=self._hot_cache_size)
        for industry in index.industries_by_count()[: self.hot_cache_industries]:
            hot_cache[industry] = tuple(index.industry_index[industry])

        self._index = index
        self._hot_cache = hot_cache
        self._degraded = degraded
        self._load_error = load_error
        self._ready = True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_industries(self) -> list[str]:
        """Sorted industry names; the catalog is used when no symbol is loaded."""
        if not self._ready:
            return [FALLBACK_INDUSTRY]
        try:
            if self._index.industry_index:
                return sorted(self._index.industry_index)
            if self._index.catalog:
                return sorted(self._index.catalog)
            return [FALLBACK_INDUSTRY]
        except Exception as e:
            logger.warning("list_industries failed", error=str(e))
            return [FALLBACK_INDUSTRY]

    def list_symbols(self) -> list[str]:
        if not self._ready:
            return [FALLBACK_SYMBOL]
        try:
            return sorted(self._index.records)
        except Exception as e:
            logger.warning("list_symbols failed", error=str(e))
            return [FALLBACK_SYMBOL]

    def symbols_for_industry(self, industry: str) -> list[str]:
        """Sorted symbols of an industry, read through the hot cache.

        Lookup order is hot cache, industry index, then a scan of the records
        when no industry index exists. Unknown industries yield ``[]``.
        """
        if not self._ready or not industry:
            return []
        try:
            cached = self._hot_cache.get(industry)
            if cached is not None:
                return list(cached)

            index = self._index
            if index.industry_index:
                symbols = index.industry_index.get(industry)
                if symbols is None:
                    return []
                self._hot_cache[industry] = tuple(symbols)
                return list(symbols)

            symbols = sorted(
                symbol for symbol, record in index.records.items() if record.industry == industry
            )
            if symbols:
                self._hot_cache[industry] = tuple(symbols)
            return symbols
        except Exception as e:
            logger.warning("symbols_for_industry failed", industry=industry, error=str(e))
            return []

    def industry_for_symbol(self, symbol: str) -> str | None:
        if not self._ready or not symbol:
            return None
        try:
            record = self._index.records.get(validation.normalize_symbol(symbol))
            return record.industry if record else None
        except Exception as e:
            logger.warning("industry_for_symbol failed", symbol=symbol, error=str(e))
            return None

    def results_date_for_symbol(self, symbol: str) -> str | None:
        if not self._ready or not symbol:
            return None
        return self._index.results_dates.get(validation.normalize_symbol(symbol))

    def stats(self) -> IndustryMapperStats:
        if not self._ready:
            return IndustryMapperStats()
        try:
            index = self._index
            return IndustryMapperStats(
                total_symbols=len(index.records),
                mapped_industries=len(index.industry_index),
                total_industries=len(index.catalog),
            )
        except Exception as e:
            logger.warning("stats failed", error=str(e))
            return IndustryMapperStats()

    def top_industries(self, count: int = DEFAULT_HOT_CACHE_INDUSTRIES) -> list[tuple[str, int]]:
        """The ``count`` largest industries as ``(industry, symbol count)`` pairs."""
        if not self._ready or count <= 0:
            return []
        try:
            index = self._index
            return [
                (industry, len(index.industry_index[industry]))
                for industry in index.industries_by_count()[:count]
            ]
        except Exception as e:
            logger.warning("top_industries failed", error=str(e))
            return []

    # ------------------------------------------------------------------
    # Symbol processing
    # ------------------------------------------------------------------

    def clean_symbols(self, input_text: str) -> list[str]:
        return validation.clean_symbols(input_text)

    def _limit(self, symbols: list[str]) -> list[str]:
        if len(symbols) > self.max_symbols:
            logger.warning(
                "Too many symbols provided, truncating",
                provided=len(symbols),
                limit=self.max_symbols,
            )
            return symbols[: self.max_symbols]
        return symbols

    def map_symbols(self, input_text: str) -> tuple[dict[str, str], list[str]]:
        """Resolve pasted symbols to industries.

        Returns ``(mapped, invalid)``: known symbols with their industry in
        input order, and unknown symbols in first-seen order.
        """
        mapped: dict[str, str] = {}
        invalid: list[str] = []
        if not self._ready:
            return mapped, invalid
        try:
            records = self._index.records
            for symbol in self._limit(self.clean_symbols(input_text)):
                record = records.get(symbol)
                if record is None:
                    invalid.append(symbol)
                else:
                    mapped[symbol] = record.industry
            return mapped, invalid
        except Exception as e:
            logger.warning("map_symbols failed", error=str(e))
            return {}, []

    async def process_symbols(
        self,
        symbols: Iterable[str],
        include_fundamentals: bool = False,
    ) -> ProcessResult:
        """Map a batch of symbols and build both TradingView exports.

        Input is joined, cleaned and deduplicated, then truncated to
        ``max_symbols``. Fundamentals are attached only when requested;
        results dates whenever known.
        """
        if not self._ready:
            return ProcessResult()
        try:
            mapped, invalid = self.map_symbols(",".join(symbols))
            index = self._index

            mapped_symbols = []
            for symbol, industry in mapped.items():
                record = index.records[symbol]
                mapped_symbols.append(
                    MappedSymbol(
                        symbol=symbol,
                        industry=industry,
                        fundamentals=record.fundamentals if include_fundamentals else None,
                        results_date=index.results_dates.get(symbol) or None,
                    )
                )

            return ProcessResult(
                mapped_symbols=mapped_symbols,
                invalid_symbols=invalid,
                categorized_output=format_categorized_output(mapped),
                flat_output=format_flat_output(mapped),
            )
        except Exception as e:
            logger.warning("process_symbols failed", error=str(e))
            return ProcessResult()
