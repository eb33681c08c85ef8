"""FastAPI documentation configuration and metadata.

Provides OpenAPI metadata, tag descriptions and shared error examples for
the Industry Mapper API.
"""
from typing import Any

from fastapi.openapi.utils import get_openapi

# API Metadata
API_TITLE = "Industry Mapper API"
API_DESCRIPTION = """
## Industry Mapper API

Maps NSE ticker symbols to their industries and builds TradingView watchlist
imports from them.

### Key Features

- **Industry lookup** - Symbol to industry and industry to symbols, served from memory
- **Bulk processing** - Paste up to 999 symbols, get them grouped by industry
- **TradingView exports** - Flat (`NSE:A,NSE:B`) and categorized (`###Industry(n),NSE:A`) formats
- **CSV downloads** - Symbol/industry mapping and latest-quarter fundamentals
- **Results calendar** - Quarterly results dates grouped into importable sections
- **Watchlist** - A persisted, reorderable symbol list

### Reference Data

Loaded once at startup from three CSV datasets (stocks with fundamentals,
industry catalog, results calendar). If loading fails the API keeps serving a
one-symbol placeholder index and reports itself as degraded on `/health`.

### Authentication

This is a local-first application; no authentication is required.

### API Versioning

Current version: **v1** - All endpoints are prefixed with `/api/v1`

### Error Handling

- **4xx**: Client errors (invalid input, unknown symbol, etc.)
- **5xx**: Server errors
"""

API_VERSION = "1.0.0"
API_CONTACT = {
    "name": "Industry Mapper",
}
API_LICENSE = {
    "name": "MIT",
    "url": "https://opensource.org/licenses/MIT",
}

# OpenAPI Tags
OPENAPI_TAGS: list[dict[str, Any]] = [
    {
        "name": "health",
        "description": "**System Health & Monitoring**\n\n"
        "Application, database and reference data status. The reference data check "
        "reports whether the industry index is loaded or degraded.",
    },
    {
        "name": "industries",
        "description": "**Industries**\n\n"
        "List industries, their symbols and index statistics.",
    },
    {
        "name": "symbols",
        "description": "**Symbols**\n\n"
        "Look up, clean and bulk-process symbols; download CSV exports.",
    },
    {
        "name": "watchlist",
        "description": "**Watchlist**\n\n"
        "A persisted, ordered list of symbols.",
    },
    {
        "name": "results-calendar",
        "description": "**Results Calendar**\n\n"
        "Quarterly results dates and TradingView export of the symbols reporting on them.",
    },
]

# Response Examples
COMMON_RESPONSES = {
    400: {
        "description": "Bad Request - Invalid input parameters",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_symbol": {
                        "summary": "Invalid Symbol Format",
                        "value": {"detail": "Invalid symbol format: ABC$"},
                    },
                    "invalid_reorder": {
                        "summary": "Reorder Is Not A Permutation",
                        "value": {
                            "detail": "New order must contain exactly the current watchlist "
                            "symbols (missing: ['INFY'], unknown: [])"
                        },
                    },
                }
            }
        },
    },
    404: {
        "description": "Not Found - Resource not found",
        "content": {
            "application/json": {
                "examples": {
                    "symbol_not_found": {
                        "summary": "Symbol Not Found",
                        "value": {"detail": "Symbol 'XYZ' not found"},
                    }
                }
            }
        },
    },
    500: {
        "description": "Internal Server Error - Server encountered an error",
        "content": {
            "application/json": {
                "examples": {
                    "generic_error": {
                        "summary": "Generic Internal Error",
                        "value": {
                            "error": "Internal Server Error",
                            "detail": "An unexpected error occurred",
                        },
                    }
                }
            }
        },
    },
}


def custom_openapi_schema(app) -> dict[str, Any]:
    """Generate custom OpenAPI schema with enhanced documentation.

    Args:
        app: FastAPI application instance

    Returns:
        Dict[str, Any]: Custom OpenAPI schema
    """
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=API_TITLE,
        version=API_VERSION,
        description=API_DESCRIPTION,
        routes=app.routes,
        tags=OPENAPI_TAGS,
        contact=API_CONTACT,
        license_info=API_LICENSE,
    )

    openapi_schema["servers"] = [
        {"url": "http://localhost:8000", "description": "Local Development Server"},
    ]

    openapi_schema["info"]["x-api-features"] = [
        "Symbol to Industry Mapping",
        "TradingView Watchlist Export",
        "Results Calendar Export",
        "Local-First Architecture",
    ]

    openapi_schema["components"] = openapi_schema.get("components", {})
    openapi_schema["components"]["responses"] = COMMON_RESPONSES

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def get_swagger_ui_html_config() -> dict[str, Any]:
    """Get Swagger UI HTML configuration.

    Returns:
        Dict[str, Any]: Swagger UI configuration
    """
    return {
        "swagger_ui_parameters": {
            "deepLinking": True,
            "displayRequestDuration": True,
            "defaultModelsExpandDepth": 2,
            "docExpansion": "list",
            "filter": True,
            "tryItOutEnabled": True,
        },
    }
