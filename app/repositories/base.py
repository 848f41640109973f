"""
Base repository.

Generic CRUD operations for all repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base
from app.utils.exceptions import DuplicateRecord

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic CRUD operations.

    Provides async database operations for any SQLAlchemy model.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class AccountRepository(BaseRepository[Account]):
            def __init__(self, session: AsyncSession):
                super().__init__(Account, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(
        self, id: Any, refresh: bool = False
    ) -> ModelType | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID
            refresh: Reload from the database even if already in the session

        Returns:
            Entity or None if not found
        """
        return await self.session.get(
            self.model, id, populate_existing=refresh
        )

    async def get_by(
        self, **filters: Any
    ) -> ModelType | None:
        """
        Get single entity by filters.

        Args:
            **filters: Column filters

        Returns:
            First matching entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        limit: int | None = None,
        offset: int | None = None,
        order_by: str | None = None,
        **filters: Any,
    ) -> list[ModelType]:
        """
        Find all entities matching filters.

        Args:
            limit: Max number of results
            offset: Number of results to skip
            order_by: Column name to sort ascending by
            **filters: Column filters

        Returns:
            List of matching entities
        """
        stmt = select(self.model).filter_by(**filters)

        if order_by:
            stmt = stmt.order_by(getattr(self.model, order_by).asc())
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by(
        self, order_by: str | None = None, **filters: Any
    ) -> list[ModelType]:
        """
        Find entities by filters.

        Args:
            order_by: Column name to sort ascending by (usually a timestamp)
            **filters: Column filters

        Returns:
            List of matching entities
        """
        return await self.find_all(order_by=order_by, **filters)

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity.

        On DuplicateRecord the session must be rolled back by the caller.

        Args:
            **data: Entity data

        Returns:
            Created entity

        Raises:
            DuplicateRecord: If the id or a unique key already exists
        """
        entity = self.model(**data)
        self.session.add(entity)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateRecord(
                f"{self.model.__name__} already exists"
            ) from e
        await self.session.refresh(entity)
        return entity

    async def update(
        self, id: Any, **data: Any
    ) -> ModelType | None:
        """
        Update entity by ID (per-field overwrite).

        Args:
            id: Entity ID
            **data: Updated data

        Returns:
            Updated entity or None if not found
        """
        entity = await self.get_by_id(id)

        if not entity:
            return None

        for key, value in data.items():
            setattr(entity, key, value)

        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def increment(
        self, id: Any, **deltas: Any
    ) -> ModelType | None:
        """
        Atomically add deltas to numeric columns.

        Runs a single UPDATE ... SET col = col + delta, so concurrent
        writers cannot lose each other's increments.

        Args:
            id: Entity ID
            **deltas: Column name to delta mapping

        Returns:
            Fresh entity or None if not found
        """
        values = {
            key: getattr(self.model, key) + delta
            for key, delta in deltas.items()
        }
        return await self._conditional_update(
            self.model.id == id, id, values
        )

    async def _conditional_update(
        self, where: Any, id: Any, values: dict[str, Any]
    ) -> ModelType | None:
        """
        Run UPDATE ... WHERE <where> and reload the row.

        Returns:
            Fresh entity, or None if no row matched
        """
        stmt = (
            update(self.model)
            .where(where)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_id(id, refresh=True)

    async def count(self, **filters: Any) -> int:
        """
        Count entities matching filters.

        Args:
            **filters: Column filters

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(self.model)

        if filters:
            stmt = stmt.filter_by(**filters)

        result = await self.session.execute(stmt)
        return result.scalar() or 0
