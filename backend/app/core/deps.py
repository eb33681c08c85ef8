"""Dependency injection for FastAPI endpoints.

This module provides dependency functions for shared resources: the reference
data source, the industry index and results calendar singletons, database
sessions and the watchlist service.
"""
import asyncio
import logging
from typing import Annotated

from fastapi import Depends
from fastapi import HTTPException
from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import get_db_session
from app.providers.base import DataSourceInterface, dataset_filenames
from app.providers.file_source import FileDataSource, find_data_dir
from app.providers.http_source import HttpDataSource
from app.providers.mock import MockDataSource
from app.repositories.watchlist_repository import WatchlistRepository
from app.services.industry_mapper import IndustryMapper
from app.services.results_calendar_service import ResultsCalendarService
from app.services.watchlist_service import WatchlistService
from app.utils.validation import is_valid_symbol, normalize_symbol

logger = logging.getLogger(__name__)

# Type aliases for cleaner dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]


async def get_current_user_id() -> int:
    """Get current user ID dependency.

    Returns a default user ID since authentication is intentionally omitted
    for this local-first deployment model. All users share one watchlist.

    Returns:
        int: User ID (always returns 1)
    """
    return 1


async def get_validated_symbol(symbol: str) -> str:
    """Validate and normalize a symbol taken from the URL path.

    Args:
        symbol: Raw symbol, e.g. "nse:infy"

    Returns:
        Normalized symbol (uppercase, trimmed, no exchange prefix)

    Raises:
        HTTPException: 400 if symbol format is invalid
    """
    symbol = normalize_symbol(symbol)
    if not is_valid_symbol(symbol):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid symbol format: {symbol}",
        )
    return symbol


def create_data_source(settings: Settings) -> DataSourceInterface:
    """Build the reference data source selected by DATA_SOURCE.

    - "file": CSV files in DATA_DIR (default)
    - "http": CSV files under DATA_BASE_URL
    - "mock": built-in sample data

    Raises:
        ValueError: If the source type is unknown
    """
    filenames = dataset_filenames(settings)

    if settings.data_source == "file":
        data_dir = find_data_dir(settings.data_dir)
        logger.info(f"Using FileDataSource at {data_dir}")
        return FileDataSource(data_dir, filenames)

    elif settings.data_source == "http":
        logger.info(f"Using HttpDataSource at {settings.data_base_url}")
        return HttpDataSource(
            settings.data_base_url,
            filenames,
            timeout=settings.http_timeout,
            max_retries=settings.http_max_retries,
            retry_delay=settings.http_retry_delay,
        )

    elif settings.data_source == "mock":
        logger.info("Using MockDataSource with sample data")
        return MockDataSource()

    else:
        raise ValueError(
            f"Unknown data source: {settings.data_source}. "
            "Valid options: 'file', 'http', 'mock'"
        )


# Process-wide singletons, created lazily under a lock
_data_source: DataSourceInterface | None = None
_industry_mapper: IndustryMapper | None = None
_results_calendar: ResultsCalendarService | None = None
_singleton_lock = asyncio.Lock()


async def get_data_source() -> DataSourceInterface:
    """Get the shared reference data source."""
    global _data_source
    if _data_source is None:
        async with _singleton_lock:
            if _data_source is None:
                _data_source = create_data_source(get_settings())
    return _data_source


async def get_industry_mapper() -> IndustryMapper:
    """Get the shared industry index.

    The instance is created here but loaded by the application lifespan;
    until then its queries return their not-ready fallbacks.
    """
    global _industry_mapper
    if _industry_mapper is None:
        data_source = await get_data_source()
        settings = get_settings()
        async with _singleton_lock:
            if _industry_mapper is None:
                _industry_mapper = IndustryMapper(
                    data_source,
                    init_timeout=settings.mapper_init_timeout,
                    hot_cache_industries=settings.mapper_hot_cache_industries,
                    hot_cache_max_entries=settings.mapper_hot_cache_max_entries,
                    max_symbols=settings.mapper_max_symbols,
                    fallback_on_failure=settings.mapper_fallback_on_failure,
                )
    return _industry_mapper


async def get_results_calendar_service() -> ResultsCalendarService:
    """Get the shared results calendar, loaded by the application lifespan."""
    global _results_calendar
    if _results_calendar is None:
        data_source = await get_data_source()
        async with _singleton_lock:
            if _results_calendar is None:
                _results_calendar = ResultsCalendarService(data_source)
    return _results_calendar


async def get_watchlist_service(
    db: AsyncSession = Depends(get_db_session),
    user_id: int = Depends(get_current_user_id),
) -> WatchlistService:
    """Get a WatchlistService bound to the request's session and user."""
    return WatchlistService(WatchlistRepository(db), user_id=user_id)


async def cleanup_data_source() -> None:
    """Release the data source and forget all singletons.

    Called by the FastAPI lifespan manager during shutdown.
    """
    global _data_source, _industry_mapper, _results_calendar
    if _data_source is not None:
        try:
            await _data_source.close()
        except Exception as e:
            logger.warning(f"Error closing data source: {e}")
    _data_source = None
    _industry_mapper = None
    _results_calendar = None
