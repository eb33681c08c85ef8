"""Watchlist model for a user's saved symbols."""

from sqlalchemy import JSON, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Watchlist(Base):
    """User's saved watchlist.

    Stores an ordered collection of NSE symbols. Order is significant: the
    dashboard lets users rearrange the list.
    """

    __tablename__ = "watchlists"

    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        unique=True,
        index=True,
        doc="User who owns this watchlist"
    )

    symbols: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Ordered list of stock ticker symbols"
    )
