"""CSV parsing for the reference datasets.

Turns raw CSV text into field-keyed records with pandas, then into the
domain records the industry index is built from. Values are kept as strings;
numeric columns are converted with an "invalid means 0" rule.
"""
import io
import logging
import math
import warnings

import pandas as pd

from app.core.exceptions import DataParseError
from app.models.stock import UNKNOWN_INDUSTRY, Fundamentals, StockRecord

logger = logging.getLogger(__name__)

# Basic RS Setup columns
COL_STOCK_NAME = "Stock Name"
COL_NAME = "Name"
COL_INDUSTRY = "Basic Industry"
COL_PRICE = "Price"
COL_RS_RATING = "RS Rating"
COL_VOLUME = "Volume"

# Fundamentals field -> source column
FUNDAMENTALS_COLUMNS: dict[str, str] = {
    "rs_rating": "RS Rating",
    "eps_latest_quarter": "EPS Latest Quarter",
    "qoq_eps_latest": "QoQ % EPS Latest",
    "yoy_eps_latest": "YoY% EPS Latest",
    "sales_latest_quarter": "Sales Latest Quarter",
    "qoq_sales_latest": "QoQ % Sales Latest",
    "yoy_sales_latest": "YoY % Sales Latest",
}

# Results calendar columns
COL_RESULTS_DATE = "Quarterly Results Date"


def _read_frame(text: str, header: bool) -> pd.DataFrame:
    """Parse CSV text into an all-string DataFrame.

    Blank lines are skipped, missing cells become "", and rows with more
    fields than the header are truncated rather than rejected.
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        return pd.DataFrame()

    try:
        with warnings.catch_warnings():
            # Truncating long rows emits a ParserWarning per row
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            frame = pd.read_csv(
                io.StringIO(text),
                header=0 if header else None,
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=lambda fields: fields,
            )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, ValueError) as e:
        raise DataParseError(f"Malformed CSV: {e}") from e

    if header:
        frame.columns = [str(column).strip() for column in frame.columns]
    return frame.fillna("")


def read_csv_records(text: str) -> list[dict[str, str]]:
    """Parse CSV text with a header row into a list of field-keyed records."""
    frame = _read_frame(text, header=True)
    if frame.empty:
        return []
    return frame.to_dict(orient="records")


def read_csv_rows(text: str) -> list[list[str]]:
    """Parse headerless CSV text into a list of rows."""
    frame = _read_frame(text, header=False)
    if frame.empty:
        return []
    return frame.values.tolist()


def parse_number(value: str | None) -> float:
    """Convert a display value to float; anything unparseable is 0."""
    if value is None:
        return 0.0
    try:
        number = float(str(value).replace(",", "").strip())
    except ValueError:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_fundamentals(row: dict[str, str]) -> Fundamentals | None:
    """Extract fundamentals from a row, or None if every column is empty."""
    fundamentals = Fundamentals(
        **{field: _optional(row.get(column)) for field, column in FUNDAMENTALS_COLUMNS.items()}
    )
    return None if fundamentals.is_empty() else fundamentals


def parse_stock_records(text: str) -> list[StockRecord]:
    """Parse the Basic RS Setup dataset.

    Rows without a stock name are skipped. An empty industry becomes
    ``"Unknown"`` and the display name defaults to the symbol.
    """
    records: list[StockRecord] = []
    skipped = 0

    for row in read_csv_records(text):
        symbol = str(row.get(COL_STOCK_NAME, "")).strip().upper()
        if not symbol:
            skipped += 1
            continue

        industry = str(row.get(COL_INDUSTRY, "")).strip() or UNKNOWN_INDUSTRY
        records.append(
            StockRecord(
                symbol=symbol,
                industry=industry,
                name=str(row.get(COL_NAME, "")).strip() or symbol,
                price=parse_number(row.get(COL_PRICE)),
                relative_strength=parse_number(row.get(COL_RS_RATING)),
                volume=parse_number(row.get(COL_VOLUME)),
                fundamentals=parse_fundamentals(row),
            )
        )

    if skipped:
        logger.debug(f"Skipped {skipped} stock rows without a stock name")
    return records


def parse_industry_catalog(text: str) -> list[str]:
    """Parse the headerless industry catalog; only the first column is used."""
    industries: list[str] = []
    for row in read_csv_rows(text):
        if not row:
            continue
        name = str(row[0]).strip()
        if name:
            industries.append(name)
    return industries


def parse_results_dates(text: str) -> dict[str, str]:
    """Parse the results calendar into ``symbol -> results date``.

    Rows with an empty date are kept out; a later row for the same symbol
    replaces an earlier one.
    """
    dates: dict[str, str] = {}
    for row in read_csv_records(text):
        symbol = str(row.get(COL_STOCK_NAME, "")).strip().upper()
        if not symbol:
            continue
        results_date = str(row.get(COL_RESULTS_DATE, "")).strip()
        if results_date:
            dates[symbol] = results_date
    return dates
