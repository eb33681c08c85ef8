"""Main FastAPI application with async support and middleware.
"""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1 import health
from app.api.v1 import industries
from app.api.v1 import results_calendar
from app.api.v1 import symbols
from app.api.v1 import watchlist
from app.core.config import get_settings
from app.core.database import close_db
from app.core.database import init_db
from app.core.deps import cleanup_data_source
from app.core.deps import get_industry_mapper
from app.core.deps import get_results_calendar_service
from app.core.docs import API_CONTACT
from app.core.docs import API_DESCRIPTION
from app.core.docs import API_TITLE
from app.core.docs import API_VERSION
from app.core.docs import OPENAPI_TAGS
from app.core.docs import custom_openapi_schema
from app.core.docs import get_swagger_ui_html_config
from app.core.rate_limit import limiter
from app.utils.structured_logging import configure_structured_logging
from app.utils.structured_logging import get_logger

configure_structured_logging(
    log_level=get_settings().log_level, environment=get_settings().environment
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup creates the watchlist table and loads the reference data; the
    industry index never fails startup (it falls back to a placeholder).
    """
    settings = get_settings()

    # Startup
    logger.info(
        "Starting Industry Mapper API",
        environment=settings.environment,
        data_source=settings.data_source,
    )

    try:
        await init_db()

        mapper = await get_industry_mapper()
        await mapper.initialize()

        calendar = await get_results_calendar_service()
        await calendar.load()

        logger.info(
            "Application initialized successfully",
            ready=mapper.ready,
            degraded=mapper.degraded,
            results_dates=len(calendar.dates()),
        )

        yield

    finally:
        # Shutdown
        logger.info("Shutting down Industry Mapper API")
        await cleanup_data_source()
        await close_db()
        logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        contact=API_CONTACT,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        debug=settings.debug,
        lifespan=lifespan,
        swagger_ui_parameters=get_swagger_ui_html_config()["swagger_ui_parameters"]
        if settings.is_development
        else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Add rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler for unhandled exceptions.

        Args:
            request: The incoming request
            exc: The exception that occurred

        Returns:
            JSONResponse: Error response
        """
        logger.error(
            "Unhandled exception occurred",
            exc_info=exc,
            path=str(request.url),
            method=request.method,
        )

        if settings.is_development:
            # In development, include more error details
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal Server Error",
                    "detail": str(exc),
                    "type": type(exc).__name__,
                },
            )
        else:
            # In production, return generic error message
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "Internal Server Error",
                    "detail": "An unexpected error occurred",
                },
            )

    # Include routers
    app.include_router(health.router, prefix=settings.api_v1_prefix, tags=["health"])

    app.include_router(
        industries.router,
        prefix=f"{settings.api_v1_prefix}/industries",
        tags=["industries"],
    )

    app.include_router(
        symbols.router, prefix=f"{settings.api_v1_prefix}/symbols", tags=["symbols"]
    )

    app.include_router(
        watchlist.router, prefix=f"{settings.api_v1_prefix}/watchlist", tags=["watchlist"]
    )

    app.include_router(
        results_calendar.router,
        prefix=f"{settings.api_v1_prefix}/results-calendar",
        tags=["results-calendar"],
    )

    # Set custom OpenAPI schema with enhanced documentation
    if settings.is_development:
        app.openapi = lambda: custom_openapi_schema(app)

    return app


# Create application instance
app = create_app()


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        dict: Welcome message with links
    """
    settings = get_settings()
    return {
        "message": "Industry Mapper API",
        "version": API_VERSION,
        "docs": "/docs" if settings.is_development else "disabled",
        "health": f"{settings.api_v1_prefix}/health",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
