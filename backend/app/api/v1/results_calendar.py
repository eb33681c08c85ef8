"""API endpoints for the quarterly results calendar export."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.deps import get_results_calendar_service
from app.core.exceptions import DataValidationError
from app.schemas.results_calendar import (
    ResultDateOptionSchema,
    ResultDateSymbolsResponse,
    ResultDatesResponse,
    ResultsCalendarExportResponse,
)
from app.services.results_calendar_service import (
    MONTHS,
    DateFilter,
    ResultsCalendarService,
    SortOrder,
    parse_formatted_date,
)

router = APIRouter()


@router.get(
    "/dates",
    response_model=ResultDatesResponse,
    summary="Results Dates",
    description="All results dates in chronological order with the symbols reporting on each.",
    operation_id="get_results_dates",
)
async def get_results_dates(
    service: ResultsCalendarService = Depends(get_results_calendar_service),
) -> ResultDatesResponse:
    options = service.date_options()
    return ResultDatesResponse(
        dates=[
            ResultDateOptionSchema(
                value=option.value,
                label=option.label,
                date=option.date,
                symbols=option.symbols,
            )
            for option in options
        ],
        count=len(options),
        suggested_range_start=service.suggested_range_start(),
        loaded=service.loaded,
    )


@router.get(
    "/dates/{result_date}",
    response_model=ResultDateSymbolsResponse,
    summary="Symbols On Date",
    description="Symbols reporting results on one DD-MMM-YYYY date.",
    operation_id="get_result_date_symbols",
    responses={
        400: {"description": "Malformed date"},
        404: {"description": "No results on this date"},
    },
)
async def get_result_date_symbols(
    result_date: str,
    service: ResultsCalendarService = Depends(get_results_calendar_service),
) -> ResultDateSymbolsResponse:
    parsed = parse_formatted_date(result_date)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date '{result_date}', expected DD-MMM-YYYY",
        )

    value = f"{parsed.day:02d}-{MONTHS[parsed.month - 1]}-{parsed.year}"
    symbols = service.symbols_for_date(value)
    if not symbols:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No results on {value}",
        )
    return ResultDateSymbolsResponse(value=value, symbols=symbols, count=len(symbols))


@router.get(
    "/export",
    response_model=ResultsCalendarExportResponse,
    summary="Export Results Calendar",
    description="TradingView sections ('### DD-MMM-YYYY,NSE:A,NSE:B') for all dates, "
    "a date range or selected dates, optionally filtered by symbol substring.",
    operation_id="export_results_calendar",
    responses={400: {"description": "Malformed date bound"}},
)
async def export_results_calendar(
    date_filter: DateFilter = Query(DateFilter.ALL, description="all, range or select"),
    start_date: str | None = Query(None, description="Range start, DD-MMM-YYYY"),
    end_date: str | None = Query(None, description="Range end, DD-MMM-YYYY"),
    dates: list[str] | None = Query(None, description="Dates for the select filter"),
    sort_order: SortOrder = Query(SortOrder.ASC),
    symbol: str | None = Query(None, description="Case-insensitive symbol substring"),
    service: ResultsCalendarService = Depends(get_results_calendar_service),
) -> ResultsCalendarExportResponse:
    try:
        text = service.export(
            date_filter=date_filter,
            start_date=start_date,
            end_date=end_date,
            selected_dates=dates,
            sort_order=sort_order,
            symbol_filter=symbol,
        )
    except DataValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ResultsCalendarExportResponse(
        text=text,
        section_count=text.count("### "),
    )
