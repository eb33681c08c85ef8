"""Quarterly results calendar grouped by date for TradingView export.

Calendar rows carry a symbol and a results date such as ``16 Apr 2025``.
Dates are normalized to ``16-APR-2025``; each date becomes one watchlist
section::

    ### 16-APR-2025,NSE:WIPRO, ### 17-APR-2025,NSE:INFY
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from app.core.exceptions import DataValidationError
from app.providers.base import CSVDataset, DataSourceInterface
from app.services.csv_loader import COL_RESULTS_DATE, COL_STOCK_NAME, read_csv_records
from app.utils.validation import EXCHANGE_PREFIX

logger = logging.getLogger(__name__)

MONTHS = ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]

# Export-style calendar columns, with the screener-style names as fallback
COL_SECURITY_NAME = "Security Name"
COL_RESULT_DATE = "Result Date"


class DateFilter(str, Enum):
    ALL = "all"
    RANGE = "range"
    SELECT = "select"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ResultDateOption:
    """One selectable results date with the symbols reporting on it."""

    value: str
    label: str
    date: date
    symbols: list[str] = field(default_factory=list)


def format_result_date(raw: str | None) -> str | None:
    """Convert ``D MMM YYYY`` to ``DD-MMM-YYYY``.

    Month names of any length are cut to three letters and uppercased
    (``"5 April 2025"`` -> ``"05-APR-2025"``). Anything that does not
    describe a real calendar day returns None.
    """
    if not raw:
        return None
    parts = raw.split()
    if len(parts) != 3:
        return None

    day, month, year = parts
    month = month[:3].upper()
    if not day.isdigit() or not year.isdigit() or month not in MONTHS:
        return None
    try:
        date(int(year), MONTHS.index(month) + 1, int(day))
    except ValueError:
        return None
    return f"{int(day):02d}-{month}-{year}"


def parse_formatted_date(value: str | None) -> date | None:
    """Parse ``DD-MMM-YYYY`` back into a date; invalid input returns None."""
    if not value:
        return None
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None

    day, month, year = parts
    month = month.upper()
    if not day.isdigit() or not year.isdigit() or month not in MONTHS:
        return None
    try:
        return date(int(year), MONTHS.index(month) + 1, int(day))
    except ValueError:
        return None


def group_by_date(records: Iterable[dict[str, str]]) -> dict[str, list[str]]:
    """Group calendar rows into ``formatted date -> symbols``, dates chronological.

    Symbols keep their first-seen order within a date. Rows missing a symbol
    or carrying an unparseable date are skipped.
    """
    grouped: dict[str, list[str]] = {}
    skipped = 0

    for row in records:
        symbol = str(row.get(COL_SECURITY_NAME) or row.get(COL_STOCK_NAME) or "").strip().upper()
        raw_date = str(row.get(COL_RESULT_DATE) or row.get(COL_RESULTS_DATE) or "").strip()
        formatted = format_result_date(raw_date)
        if not symbol or formatted is None:
            skipped += 1
            continue

        symbols = grouped.setdefault(formatted, [])
        if symbol not in symbols:
            symbols.append(symbol)

    if skipped:
        logger.debug(f"Skipped {skipped} calendar rows without a symbol or valid date")

    return {key: grouped[key] for key in sorted(grouped, key=parse_formatted_date)}


def format_section(result_date: str, symbols: Iterable[str]) -> str:
    return ",".join([f"### {result_date}", *(f"{EXCHANGE_PREFIX}{s}" for s in symbols)])


class ResultsCalendarService:
    """
    Results calendar loaded from the configured data source.

    ``load()`` never raises; a failed load leaves an empty calendar and
    records the error in ``load_error``.
    """

    def __init__(self, data_source: DataSourceInterface):
        self.data_source = data_source
        self._by_date: dict[str, list[str]] = {}
        self.loaded = False
        self.load_error: str | None = None

    async def load(self) -> None:
        try:
            text = await self.data_source.fetch_text(CSVDataset.RESULTS_CALENDAR)
            by_date = group_by_date(read_csv_records(text))
        except Exception as e:
            logger.warning(f"Failed to load results calendar: {e}")
            self._by_date = {}
            self.loaded = False
            self.load_error = f"{type(e).__name__}: {e}"
            return

        self._by_date = by_date
        self.loaded = True
        self.load_error = None
        logger.info(f"Loaded results calendar with {len(by_date)} dates")

    def dates(self) -> list[str]:
        """All formatted dates in chronological order."""
        return list(self._by_date)

    def symbols_for_date(self, result_date: str) -> list[str]:
        """Symbols reporting on a ``DD-MMM-YYYY`` date, matched case-insensitively."""
        return list(self._by_date.get(result_date.strip().upper(), []))

    def date_options(self) -> list[ResultDateOption]:
        return [
            ResultDateOption(
                value=result_date,
                label=f"{result_date} ({len(symbols)} symbols)",
                date=parse_formatted_date(result_date),
                symbols=list(symbols),
            )
            for result_date, symbols in self._by_date.items()
        ]

    def suggested_range_start(self, today: date | None = None) -> str | None:
        """Today if it has results, else the next date with results, else the last date."""
        if not self._by_date:
            return None
        today = today or date.today()
        for result_date in self._by_date:
            if parse_formatted_date(result_date) >= today:
                return result_date
        return self.dates()[-1]

    def _select_dates(
        self,
        date_filter: DateFilter,
        start_date: str | None,
        end_date: str | None,
        selected_dates: Iterable[str] | None,
    ) -> list[str]:
        if date_filter == DateFilter.ALL:
            return self.dates()

        if date_filter == DateFilter.RANGE:
            start = _parse_bound(start_date, "start_date")
            end = _parse_bound(end_date, "end_date")
            return [
                result_date
                for result_date in self._by_date
                if (start is None or parse_formatted_date(result_date) >= start)
                and (end is None or parse_formatted_date(result_date) <= end)
            ]

        wanted = {value.strip().upper() for value in selected_dates or []}
        return [result_date for result_date in self._by_date if result_date in wanted]

    def export(
        self,
        date_filter: DateFilter | str = DateFilter.ALL,
        start_date: str | None = None,
        end_date: str | None = None,
        selected_dates: Iterable[str] | None = None,
        sort_order: SortOrder | str = SortOrder.ASC,
        symbol_filter: str | None = None,
    ) -> str:
        """Render the calendar as TradingView sections joined by ``", "``.

        Raises:
            DataValidationError: unknown filter/sort value or malformed range bound
        """
        try:
            date_filter = DateFilter(date_filter)
            sort_order = SortOrder(sort_order)
        except ValueError as e:
            raise DataValidationError(str(e)) from e

        dates = self._select_dates(date_filter, start_date, end_date, selected_dates)
        if sort_order == SortOrder.DESC:
            dates = dates[::-1]

        needle = (symbol_filter or "").strip().lower()
        sections = []
        for result_date in dates:
            symbols = self._by_date[result_date]
            if needle:
                symbols = [s for s in symbols if needle in s.lower()]
            if symbols:
                sections.append(format_section(result_date, symbols))
        return ", ".join(sections)


def _parse_bound(value: str | None, name: str) -> date | None:
    if not value:
        return None
    parsed = parse_formatted_date(value)
    if parsed is None:
        raise DataValidationError(f"Invalid {name} '{value}', expected DD-MMM-YYYY")
    return parsed
