"""Watchlist operations on top of WatchlistRepository.

Every mutation loads the stored list, applies the change and saves the
whole list back, so the repository is the only load/save boundary.
"""
import logging
from collections.abc import Iterable

from app.core.exceptions import DataValidationError
from app.repositories.watchlist_repository import WatchlistRepository
from app.utils.validation import clean_symbols, normalize_symbol

logger = logging.getLogger(__name__)


def _clean(symbols: str | Iterable[str]) -> list[str]:
    if isinstance(symbols, str):
        return clean_symbols(symbols)
    return clean_symbols(",".join(symbols))


class WatchlistService:
    """Ordered, duplicate-free symbol list for a single user."""

    def __init__(self, repository: WatchlistRepository, user_id: int = 1):
        self.repository = repository
        self.user_id = user_id

    async def get_symbols(self) -> list[str]:
        return await self.repository.load(self.user_id)

    async def add(self, symbols: str | Iterable[str]) -> list[str]:
        """Append cleaned symbols not already present; existing order is kept."""
        current = await self.get_symbols()
        additions = [symbol for symbol in _clean(symbols) if symbol not in current]
        if not additions:
            return current

        logger.info(f"Adding {len(additions)} symbols to watchlist of user {self.user_id}")
        return await self.repository.save(self.user_id, current + additions)

    async def remove(self, symbol: str) -> list[str]:
        current = await self.get_symbols()
        target = normalize_symbol(symbol)
        if target not in current:
            return current
        return await self.repository.save(self.user_id, [s for s in current if s != target])

    async def clear(self) -> list[str]:
        return await self.repository.save(self.user_id, [])

    async def contains(self, symbol: str) -> bool:
        return normalize_symbol(symbol) in await self.get_symbols()

    async def reorder(self, new_order: Iterable[str]) -> list[str]:
        """Store the watchlist in a new order.

        Raises:
            DataValidationError: If ``new_order`` is not a permutation of the
                current symbols
        """
        current = await self.get_symbols()
        ordered = [normalize_symbol(symbol) for symbol in new_order]

        if len(ordered) != len(current) or sorted(ordered) != sorted(current):
            missing = sorted(set(current) - set(ordered))
            unknown = sorted(set(ordered) - set(current))
            raise DataValidationError(
                "New order must contain exactly the current watchlist symbols "
                f"(missing: {missing}, unknown: {unknown})"
            )

        return await self.repository.save(self.user_id, ordered)
