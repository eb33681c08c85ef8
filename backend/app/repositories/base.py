"""Base repository class providing generic CRUD operations with async support.

This module implements a generic repository pattern that provides common database
operations for all models, with error handling and logging.
"""
import logging
from typing import Any
from typing import Generic
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository operations."""

    pass


class DuplicateError(RepositoryError):
    """Raised when attempting to create a duplicate entity."""

    pass


class DatabaseError(RepositoryError):
    """Raised when a database operation fails."""

    pass


class BaseRepository(Generic[ModelType]):
    """Generic base repository providing common CRUD operations.

    Example:
        ```python
        class WatchlistRepository(BaseRepository[Watchlist]):
            def __init__(self, session: AsyncSession):
                super().__init__(Watchlist, session)

        # Usage
        repo = WatchlistRepository(session)
        watchlist, created = await repo.get_or_create(defaults={"symbols": []}, user_id=1)
        ```
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        """Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}Repository")

    async def find_one(self, **kwargs) -> ModelType | None:
        """Retrieve the single entity matching field equality criteria.

        Args:
            **kwargs: Field criteria, e.g. ``user_id=1``

        Returns:
            Model instance or None if not found
        """
        query = select(self.model)
        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> ModelType:
        """Create a new entity.

        Args:
            **kwargs: Field values for the new entity

        Returns:
            Created model instance

        Raises:
            DuplicateError: If entity already exists (unique constraint violation)
            DatabaseError: If database operation fails
        """
        try:
            entity = self.model(**kwargs)
            self.session.add(entity)
            await self.session.flush()  # Get the ID without committing
            await self.session.refresh(entity)  # Refresh to get generated fields

            self.logger.info(f"Created {self.model.__name__} with id={entity.id}")
            return entity

        except IntegrityError as e:
            await self.session.rollback()
            self.logger.warning(f"Integrity error creating {self.model.__name__}: {e}")
            raise DuplicateError(f"Entity already exists: {str(e)}")
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise DatabaseError(f"Database error creating {self.model.__name__}: {str(e)}")

    async def update_entity(self, entity: ModelType, **kwargs) -> ModelType:
        """Apply field values to an already loaded entity and flush.

        Args:
            entity: Persistent model instance
            **kwargs: Field values to update

        Returns:
            The refreshed entity

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            for key, value in kwargs.items():
                if hasattr(entity, key) and key not in ("id", "created_at"):
                    setattr(entity, key, value)

            await self.session.flush()
            await self.session.refresh(entity)
            return entity

        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(f"Failed to update {self.model.__name__} id={entity.id}: {e}")
            raise DatabaseError(f"Database error updating {self.model.__name__}: {str(e)}")

    async def get_or_create(
        self, defaults: dict[str, Any] | None = None, **kwargs
    ) -> tuple[ModelType, bool]:
        """Get an existing entity or create a new one.

        A concurrent request may insert the same entity between the lookup
        and the insert; the resulting DuplicateError is resolved by reading
        the row the other request created.

        Args:
            defaults: Default values to use when creating a new entity
            **kwargs: Field criteria to search for existing entity

        Returns:
            Tuple of (entity, created) where created is True if entity was created

        Raises:
            DuplicateError: If the insert conflicts and no matching row exists
            DatabaseError: If database operation fails
        """
        try:
            entity = await self.find_one(**kwargs)

            if entity:
                self.logger.debug(f"Found existing {self.model.__name__}")
                return entity, False

            create_data = kwargs.copy()
            if defaults:
                create_data.update(defaults)

            try:
                entity = await self.create(**create_data)
            except DuplicateError:
                entity = await self.find_one(**kwargs)
                if entity is None:
                    raise
                self.logger.info(f"{self.model.__name__} was created concurrently, reusing it")
                return entity, False

            return entity, True

        except SQLAlchemyError as e:
            self.logger.error(f"Failed get_or_create for {self.model.__name__}: {e}")
            raise DatabaseError(
                f"Database error in get_or_create for {self.model.__name__}: {str(e)}"
            )
