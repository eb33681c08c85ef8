"""Unit tests for IndustryMapper initialization and queries."""
import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from app.models.stock import IndustryMapperStats, StockRecord
from app.providers.base import CSVDataset
from app.providers.mock import SAMPLE_DATASETS, MockDataSource
from app.services.industry_mapper import (
    FALLBACK_INDUSTRY,
    FALLBACK_SYMBOL,
    PLACEHOLDER_INDUSTRY,
    PLACEHOLDER_NAME,
    PLACEHOLDER_SYMBOL,
    IndustryIndex,
    IndustryMapper,
)

SOFTWARE = "Computers - Software & Consulting"
PRIVATE_BANK = "Private Sector Bank"


class HangingDataSource(MockDataSource):
    """Data source whose fetches never finish; counts cancellations."""

    def __init__(self):
        super().__init__()
        self.cancelled = 0

    async def fetch_text(self, dataset: CSVDataset) -> str:
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return ""


def _datasets(**overrides: str) -> dict[CSVDataset, str]:
    datasets = dict(SAMPLE_DATASETS)
    for name, text in overrides.items():
        datasets[CSVDataset(name)] = text
    return datasets


class TestBeforeInitialization:
    """Queries on a mapper that has not loaded yet."""

    def test_fallback_values(self) -> None:
        mapper = IndustryMapper(MockDataSource())

        assert mapper.ready is False
        assert mapper.list_industries() == [FALLBACK_INDUSTRY]
        assert mapper.list_symbols() == [FALLBACK_SYMBOL]
        assert mapper.symbols_for_industry(SOFTWARE) == []
        assert mapper.industry_for_symbol("TCS") is None
        assert mapper.top_industries(5) == []

        stats = mapper.stats()
        assert (stats.total_symbols, stats.mapped_industries, stats.total_industries) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_process_symbols_returns_empty_result(self) -> None:
        mapper = IndustryMapper(MockDataSource())

        result = await mapper.process_symbols(["TCS"])

        assert result.mapped_symbols == []
        assert result.invalid_symbols == []
        assert result.flat_output == ""
        assert result.categorized_output == ""


class TestInitialization:
    """Tests for a successful load."""

    @pytest.mark.asyncio
    async def test_loads_all_datasets(self, mock_data_source: MockDataSource) -> None:
        mapper = IndustryMapper(mock_data_source)

        await mapper.initialize()

        assert mapper.ready is True
        assert mapper.degraded is False
        assert mapper.load_error is None
        assert mock_data_source.fetch_count == 3

    @pytest.mark.asyncio
    async def test_stats(self, industry_mapper: IndustryMapper) -> None:
        stats = industry_mapper.stats()

        assert stats.total_symbols == 8
        assert stats.mapped_industries == 5
        # The catalog also lists an industry without symbols
        assert stats.total_industries == 6

    @pytest.mark.asyncio
    async def test_every_symbol_in_exactly_one_sorted_industry_list(
        self, industry_mapper: IndustryMapper
    ) -> None:
        seen: list[str] = []
        for industry in industry_mapper.list_industries():
            symbols = industry_mapper.symbols_for_industry(industry)
            assert symbols == sorted(symbols)
            for symbol in symbols:
                assert industry_mapper.industry_for_symbol(symbol) == industry
            seen.extend(symbols)

        assert sorted(seen) == industry_mapper.list_symbols()
        assert len(seen) == len(set(seen))

    @pytest.mark.asyncio
    async def test_duplicate_symbol_last_row_wins(self) -> None:
        basic_rs = "Stock Name,Basic Industry\nAAA,Tech\nBBB,Tech\nAAA,Finance\n"
        mapper = IndustryMapper(MockDataSource(datasets=_datasets(basic_rs=basic_rs)))

        await mapper.initialize()

        assert mapper.industry_for_symbol("AAA") == "Finance"
        assert mapper.symbols_for_industry("Tech") == ["BBB"]
        assert mapper.symbols_for_industry("Finance") == ["AAA"]

    @pytest.mark.asyncio
    async def test_reinitialize_replaces_placeholder(self) -> None:
        source = MockDataSource(fail=True)
        mapper = IndustryMapper(source)
        await mapper.initialize()
        assert mapper.degraded is True

        source.failing = set()
        await mapper.initialize()

        assert mapper.degraded is False
        assert mapper.load_error is None
        assert mapper.industry_for_symbol(PLACEHOLDER_SYMBOL) is None
        assert mapper.stats().total_symbols == 8


class TestLoadFailure:
    """Tests for fetch failures, parse failures and timeouts."""

    @pytest.mark.asyncio
    async def test_all_fetches_failing_serves_placeholder(self) -> None:
        mapper = IndustryMapper(MockDataSource(fail=True))

        await mapper.initialize()

        assert mapper.ready is True
        assert mapper.degraded is True
        assert "DataSourceError" in mapper.load_error
        assert mapper.stats() == IndustryMapperStats(
            total_symbols=1, mapped_industries=1, total_industries=1
        )
        assert mapper.list_symbols() == [PLACEHOLDER_SYMBOL]
        assert mapper.list_industries() == [PLACEHOLDER_INDUSTRY]
        assert mapper.industry_for_symbol("example") == PLACEHOLDER_INDUSTRY

    def test_placeholder_stock_is_named_and_catalogued(self) -> None:
        index = IndustryIndex.placeholder()

        assert index.records[PLACEHOLDER_SYMBOL].name == PLACEHOLDER_NAME
        assert index.catalog == {PLACEHOLDER_INDUSTRY}
        assert index.industry_index == {PLACEHOLDER_INDUSTRY: [PLACEHOLDER_SYMBOL]}

    @pytest.mark.asyncio
    async def test_single_dataset_failing_fails_whole_load(self) -> None:
        mapper = IndustryMapper(MockDataSource(fail=[CSVDataset.RESULTS_CALENDAR]))

        await mapper.initialize()

        assert mapper.degraded is True
        assert mapper.industry_for_symbol("TCS") is None

    @pytest.mark.asyncio
    async def test_timeout_cancels_load(self) -> None:
        source = HangingDataSource()
        mapper = IndustryMapper(source, init_timeout=0.05)

        await mapper.initialize()

        assert mapper.degraded is True
        assert "InitializationTimeoutError" in mapper.load_error
        assert source.cancelled == 3
        assert mapper.list_symbols() == [PLACEHOLDER_SYMBOL]

    @pytest.mark.asyncio
    async def test_timeout_argument_overrides_default(self) -> None:
        mapper = IndustryMapper(MockDataSource(delay=0.5), init_timeout=30)

        await mapper.initialize(timeout=0.01)

        assert mapper.degraded is True

    @pytest.mark.asyncio
    async def test_strict_mode_stays_unready(self) -> None:
        mapper = IndustryMapper(MockDataSource(fail=True), fallback_on_failure=False)

        await mapper.initialize()

        assert mapper.ready is False
        assert mapper.degraded is False
        assert mapper.load_error is not None
        assert mapper.list_symbols() == [FALLBACK_SYMBOL]
        assert mapper.stats().total_symbols == 0

    @pytest.mark.asyncio
    async def test_failed_reload_never_leaves_partial_index(
        self, industry_mapper: IndustryMapper
    ) -> None:
        industry_mapper.data_source.failing = {CSVDataset.INDUSTRY_ANALYTICS}

        await industry_mapper.initialize()

        assert industry_mapper.list_symbols() == [PLACEHOLDER_SYMBOL]
        assert industry_mapper.stats().total_industries == 0


class TestListIndustries:
    """Tests for list_industries source selection."""

    @pytest.mark.asyncio
    async def test_sorted(self, industry_mapper: IndustryMapper) -> None:
        industries = industry_mapper.list_industries()

        assert industries == sorted(industries)
        assert SOFTWARE in industries
        # Catalog-only industries are not listed while symbols are loaded
        assert "Cement & Cement Products" not in industries

    @pytest.mark.asyncio
    async def test_falls_back_to_catalog(self) -> None:
        source = MockDataSource(datasets=_datasets(basic_rs="Stock Name,Basic Industry\n"))
        mapper = IndustryMapper(source)

        await mapper.initialize()

        assert mapper.list_industries() == sorted(
            [
                SOFTWARE,
                PRIVATE_BANK,
                "Public Sector Bank",
                "Refineries & Marketing",
                "Pharmaceuticals",
                "Cement & Cement Products",
            ]
        )

    @pytest.mark.asyncio
    async def test_falls_back_to_sample_industry(self) -> None:
        source = MockDataSource(
            datasets=_datasets(basic_rs="", industry_analytics="", results_calendar="")
        )
        mapper = IndustryMapper(source)

        await mapper.initialize()

        assert mapper.ready is True
        assert mapper.list_industries() == [FALLBACK_INDUSTRY]


class TestSymbolsForIndustry:
    """Tests for the hot cache read-through path."""

    @pytest.mark.asyncio
    async def test_top_industries_preloaded(self, industry_mapper: IndustryMapper) -> None:
        assert set(industry_mapper.hot_cache) == {
            SOFTWARE,
            PRIVATE_BANK,
            "Public Sector Bank",
            "Refineries & Marketing",
            "Pharmaceuticals",
        }

    @pytest.mark.asyncio
    async def test_cache_miss_populates_cache(self, mock_data_source: MockDataSource) -> None:
        mapper = IndustryMapper(mock_data_source, hot_cache_industries=1)
        await mapper.initialize()
        assert list(mapper.hot_cache) == [SOFTWARE]

        symbols = mapper.symbols_for_industry(PRIVATE_BANK)

        assert symbols == ["HDFCBANK", "ICICIBANK"]
        assert PRIVATE_BANK in mapper.hot_cache

    @pytest.mark.asyncio
    async def test_unknown_industry(self, industry_mapper: IndustryMapper) -> None:
        assert industry_mapper.symbols_for_industry("Shipbuilding") == []
        assert "Shipbuilding" not in industry_mapper.hot_cache

    @pytest.mark.asyncio
    async def test_cache_index_and_scan_agree(self, industry_mapper: IndustryMapper) -> None:
        from_cache = industry_mapper.symbols_for_industry(SOFTWARE)

        industry_mapper.hot_cache.clear()
        from_index = industry_mapper.symbols_for_industry(SOFTWARE)

        industry_mapper.hot_cache.clear()
        industry_mapper._index = IndustryIndex(records=industry_mapper._index.records)
        from_scan = industry_mapper.symbols_for_industry(SOFTWARE)

        assert from_cache == from_index == from_scan == ["INFY", "TCS", "WIPRO"]
        assert SOFTWARE in industry_mapper.hot_cache

    @pytest.mark.asyncio
    async def test_returned_list_does_not_alias_cache(
        self, industry_mapper: IndustryMapper
    ) -> None:
        symbols = industry_mapper.symbols_for_industry(SOFTWARE)
        symbols.append("HACK")

        assert industry_mapper.symbols_for_industry(SOFTWARE) == ["INFY", "TCS", "WIPRO"]


class TestLookups:
    """Tests for single-symbol lookups and rankings."""

    @pytest.mark.asyncio
    async def test_industry_for_symbol_normalizes(self, industry_mapper: IndustryMapper) -> None:
        assert industry_mapper.industry_for_symbol("nse:tcs ") == SOFTWARE
        assert industry_mapper.industry_for_symbol("UNKNOWN") is None
        assert industry_mapper.industry_for_symbol("") is None

    @pytest.mark.asyncio
    async def test_results_date_for_symbol(self, industry_mapper: IndustryMapper) -> None:
        assert industry_mapper.results_date_for_symbol("TCS") == "10 Apr 2025"
        assert industry_mapper.results_date_for_symbol("SUNPHARMA") is None

    @pytest.mark.asyncio
    async def test_top_industries_ties_keep_encounter_order(
        self, industry_mapper: IndustryMapper
    ) -> None:
        assert industry_mapper.top_industries(4) == [
            (SOFTWARE, 3),
            (PRIVATE_BANK, 2),
            ("Public Sector Bank", 1),
            ("Refineries & Marketing", 1),
        ]

    @pytest.mark.asyncio
    async def test_queries_never_raise(self, industry_mapper: IndustryMapper) -> None:
        industry_mapper._index = None

        assert industry_mapper.list_symbols() == [FALLBACK_SYMBOL]
        assert industry_mapper.list_industries() == [FALLBACK_INDUSTRY]
        assert industry_mapper.industry_for_symbol("TCS") is None
        assert industry_mapper.stats().total_symbols == 0
        assert industry_mapper.top_industries(3) == []
        assert industry_mapper.symbols_for_industry("Not Cached") == []


class TestIndexProperties:
    """Property-based tests for IndustryIndex.build."""

    @given(
        st.lists(
            st.tuples(
                st.sampled_from(["AAA", "BBB", "CCC", "DDD", "EEE", "FFF"]),
                st.sampled_from(["Tech", "Finance", "Energy", "Pharma"]),
            ),
            max_size=30,
        )
    )
    @settings(max_examples=50, deadline=2000)
    def test_every_symbol_in_exactly_one_sorted_list(self, rows):
        """Records and the derived industry index always agree; last row wins."""
        index = IndustryIndex.build(StockRecord(symbol=s, industry=i) for s, i in rows)

        expected = dict(rows)
        assert {s: r.industry for s, r in index.records.items()} == expected

        listed = [s for symbols in index.industry_index.values() for s in symbols]
        assert sorted(listed) == sorted(expected)
        for industry, symbols in index.industry_index.items():
            assert symbols == sorted(symbols)
            assert all(expected[s] == industry for s in symbols)
