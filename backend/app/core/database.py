"""Async database configuration and session management.
"""
import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import Settings
from app.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Engine keyword arguments for the configured backend.

    SQLite connections are single-file and need no pool tuning; other backends
    get pre-ping so stale connections are replaced transparently.
    """
    options: dict[str, Any] = {"echo": settings.database_echo}
    if not settings.database_url.startswith("sqlite"):
        options["pool_pre_ping"] = True
    return options


# Create async engine
engine = create_async_engine(settings.database_url, **_engine_options(settings))

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)

# Import Base class and all models to register them with metadata
from app.models import Base


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get async database session with proper error handling.

    Yields:
        AsyncSession: Database session

    Example:
        ```python
        @router.get("/")
        async def get_data(session: AsyncSession = Depends(get_db_session)):
            result = await session.execute(select(Model))
            return result.scalars().all()
        ```
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error: {e}")
        raise
    except Exception as e:
        await session.rollback()
        logger.error(f"Unexpected error: {e}")
        raise
    finally:
        await session.close()


async def init_db() -> None:
    """Create tables that do not exist yet.

    The schema is a single watchlist table, so it is created on startup
    instead of through migrations.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def check_db_health() -> dict[str, str]:
    """Check database connection health.

    Returns:
        dict: Health check result with status and details
    """
    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1 as health_check"))
            health_value = result.scalar()

            if health_value == 1:
                return {"status": "healthy", "message": "Database connection successful"}
            return {
                "status": "unhealthy",
                "message": "Database query returned unexpected result",
            }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "message": f"Database connection failed: {str(e)}"}


async def close_db() -> None:
    """Close database connections gracefully.

    Call this during application shutdown.
    """
    try:
        await engine.dispose()
        logger.info("Database connections closed successfully")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")
        raise
