"""Models for the Industry Mapper application.

Database models (SQLAlchemy) and the in-memory reference data records are both
exported here. Import models from this module to ensure proper dependency
resolution.
"""

# Import base classes
from app.models.base import Base

# Import all models
from app.models.stock import (
    Fundamentals,
    IndustryMapperStats,
    IndustryShare,
    MappedSymbol,
    ProcessResult,
    StockRecord,
)
from app.models.watchlist import Watchlist

# Export all models for easy importing
__all__ = [
    "Base",
    "Watchlist",
    "Fundamentals",
    "IndustryMapperStats",
    "IndustryShare",
    "MappedSymbol",
    "ProcessResult",
    "StockRecord",
]
