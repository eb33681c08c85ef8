"""Data access repositories with base repository pattern.

This module provides the base repository class and common exceptions
for all repository implementations in the Industry Mapper application.
"""

from .base import BaseRepository
from .base import DatabaseError
from .base import DuplicateError
from .base import RepositoryError
from .watchlist_repository import WatchlistRepository

__all__ = [
    "BaseRepository",
    "WatchlistRepository",
    "RepositoryError",
    "DuplicateError",
    "DatabaseError",
]
