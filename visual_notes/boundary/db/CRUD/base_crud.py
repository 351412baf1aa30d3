"""
Generic CRUD shared by the model-specific repositories.

Methods flush but never commit: the calling service owns the transaction,
which lets a quota reservation and its row lock live in one unit of work.

Dependencies: sqlalchemy
System role: Foundation for the CRUD singletons
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """Insert a row and flush so database-side defaults are visible.

        Args:
            session: Session whose transaction will hold the insert
            **values: Column values for the new row

        Returns:
            The persisted instance
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        return await session.scalar(select(self.model).where(self.model.id == id))

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Delete by primary key; False when no row matched."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return bool(result.rowcount)
