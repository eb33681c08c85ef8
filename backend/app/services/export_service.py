"""Text and CSV exports for mapped symbols.

Two TradingView watchlist formats are produced:

- flat:        ``NSE:AAA,NSE:BBB`` (alphabetical)
- categorized: ``###Tech(2),NSE:AAA,NSE:BBB,###Finance(1),NSE:CCC``
               (industries by descending symbol count, ties in first-seen order)
"""
from collections.abc import Iterable, Mapping, Sequence

import pandas as pd

from app.models.stock import IndustryShare, MappedSymbol
from app.utils.validation import EXCHANGE_PREFIX

MAPPING_CSV_COLUMNS = ["Symbol", "Industry"]

FUNDAMENTALS_CSV_COLUMNS = [
    "Symbol",
    "Industry",
    "RS Rating",
    "EPS Latest Quarter",
    "QoQ % EPS",
    "YoY % EPS",
    "Sales Latest Quarter",
    "QoQ % Sales",
    "YoY % Sales",
    "Results Date",
]


def format_symbol(symbol: str) -> str:
    return f"{EXCHANGE_PREFIX}{symbol}"


def group_by_industry(mapping: Mapping[str, str]) -> dict[str, list[str]]:
    """Group ``symbol -> industry`` pairs, keeping first-seen industry order."""
    groups: dict[str, list[str]] = {}
    for symbol, industry in mapping.items():
        groups.setdefault(industry, []).append(symbol)
    return groups


def format_flat_output(symbols: Iterable[str]) -> str:
    """All symbols, alphabetically sorted, prefixed and comma-joined."""
    return ",".join(format_symbol(symbol) for symbol in sorted(symbols))


def format_categorized_output(mapping: Mapping[str, str]) -> str:
    """Industry blocks ordered by descending symbol count.

    ``sorted`` is stable, so industries with equal counts keep the order in
    which they were first encountered in ``mapping``.
    """
    groups = group_by_industry(mapping)
    ordered = sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)

    blocks = []
    for industry, symbols in ordered:
        header = f"###{industry}({len(symbols)})"
        blocks.append(",".join([header, *(format_symbol(s) for s in sorted(symbols))]))
    return ",".join(blocks)


def industry_distribution(mapped: Sequence[MappedSymbol]) -> list[IndustryShare]:
    """Count mapped symbols per industry, largest first."""
    total = len(mapped)
    if not total:
        return []

    groups = group_by_industry({item.symbol: item.industry for item in mapped})
    shares = [
        IndustryShare(
            industry=industry,
            count=len(symbols),
            percentage=round(len(symbols) / total * 100, 1),
        )
        for industry, symbols in groups.items()
    ]
    return sorted(shares, key=lambda share: share.count, reverse=True)


def _to_csv(rows: list[list[str]], columns: list[str]) -> str:
    return pd.DataFrame(rows, columns=columns).to_csv(index=False, lineterminator="\n")


def build_mapping_csv(mapped: Sequence[MappedSymbol]) -> str:
    """Symbol/industry CSV in the order the symbols were requested."""
    return _to_csv([[item.symbol, item.industry] for item in mapped], MAPPING_CSV_COLUMNS)


def build_fundamentals_csv(mapped: Sequence[MappedSymbol]) -> str:
    """Symbol/industry CSV with fundamentals and results date; gaps are empty cells."""
    rows = []
    for item in mapped:
        f = item.fundamentals
        rows.append(
            [
                item.symbol,
                item.industry,
                (f.rs_rating if f else None) or "",
                (f.eps_latest_quarter if f else None) or "",
                (f.qoq_eps_latest if f else None) or "",
                (f.yoy_eps_latest if f else None) or "",
                (f.sales_latest_quarter if f else None) or "",
                (f.qoq_sales_latest if f else None) or "",
                (f.yoy_sales_latest if f else None) or "",
                item.results_date or "",
            ]
        )
    return _to_csv(rows, FUNDAMENTALS_CSV_COLUMNS)
