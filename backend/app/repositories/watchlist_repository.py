"""Repository for Watchlist persistence.

This is the only place that knows how watchlists are stored; the service
layer loads and saves whole symbol lists through it.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.watchlist import Watchlist
from app.repositories.base import BaseRepository


class WatchlistRepository(BaseRepository[Watchlist]):
    """Repository for Watchlist database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Watchlist, session)

    async def load(self, user_id: int) -> list[str]:
        """Load a user's symbols, creating an empty watchlist on first access."""
        watchlist, _ = await self.get_or_create(defaults={"symbols": []}, user_id=user_id)
        return list(watchlist.symbols or [])

    async def save(self, user_id: int, symbols: list[str]) -> list[str]:
        """Replace a user's symbols with ``symbols`` (order preserved)."""
        watchlist, _ = await self.get_or_create(defaults={"symbols": []}, user_id=user_id)
        # Assign a fresh list so the JSON column is flagged dirty
        watchlist = await self.update_entity(watchlist, symbols=list(symbols))
        self.logger.debug(f"Saved {len(symbols)} symbols for user {user_id}")
        return list(watchlist.symbols)
