"""Pydantic schemas for API request/response validation.

This module exports all Pydantic schemas used throughout the application.
"""

from app.schemas.base import StrictBaseModel
from app.schemas.industry import (
    IndustryListResponse,
    IndustryStatsResponse,
    IndustrySymbolsResponse,
    TopIndustriesResponse,
    TopIndustry,
)
from app.schemas.results_calendar import (
    ResultDateOptionSchema,
    ResultDateSymbolsResponse,
    ResultDatesResponse,
    ResultsCalendarExportResponse,
)
from app.schemas.symbols import (
    CleanSymbolsRequest,
    CleanSymbolsResponse,
    ExportCsvRequest,
    ExportFormat,
    FundamentalsSchema,
    IndustryShareSchema,
    MappedSymbolSchema,
    ProcessSymbolsRequest,
    ProcessSymbolsResponse,
    SymbolIndustryResponse,
    SymbolListResponse,
)
from app.schemas.watchlist import (
    WatchlistAddRequest,
    WatchlistContainsResponse,
    WatchlistReorderRequest,
    WatchlistResponse,
)

__all__ = [
    "StrictBaseModel",
    "IndustryListResponse",
    "IndustryStatsResponse",
    "IndustrySymbolsResponse",
    "TopIndustriesResponse",
    "TopIndustry",
    "ResultDateOptionSchema",
    "ResultDateSymbolsResponse",
    "ResultDatesResponse",
    "ResultsCalendarExportResponse",
    "CleanSymbolsRequest",
    "CleanSymbolsResponse",
    "ExportCsvRequest",
    "ExportFormat",
    "FundamentalsSchema",
    "IndustryShareSchema",
    "MappedSymbolSchema",
    "ProcessSymbolsRequest",
    "ProcessSymbolsResponse",
    "SymbolIndustryResponse",
    "SymbolListResponse",
    "WatchlistAddRequest",
    "WatchlistContainsResponse",
    "WatchlistReorderRequest",
    "WatchlistResponse",
]
