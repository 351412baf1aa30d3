"""
Usage record CRUD operations.

Dependencies: sqlalchemy, visual_notes.boundary.db.models
System role: Free-tier usage ledger queries
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes.boundary.db.CRUD.base_crud import BaseCRUD
from visual_notes.boundary.db.models.usage_record_model import UsageRecordModel


class UsageCRUD(BaseCRUD[UsageRecordModel]):
    """CRUD operations for UsageRecordModel (insert and count only)."""

    def __init__(self) -> None:
        """Initialize UsageCRUD with UsageRecordModel."""
        super().__init__(UsageRecordModel)

    async def count_since(
        self,
        session: AsyncSession,
        user_id: UUID,
        since: datetime,
    ) -> int:
        """
        Count a caller's usage records at or after a moment.

        Args:
            session: Async database session
            user_id: Caller
            since: Inclusive lower bound (start of the UTC day)

        Returns:
            int: Number of records
        """
        stmt = (
            select(func.count())
            .select_from(UsageRecordModel)
            .where(
                UsageRecordModel.user_id == user_id,
                UsageRecordModel.used_at >= since,
            )
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def record(
        self,
        session: AsyncSession,
        user_id: UUID,
        used_at: datetime,
    ) -> UsageRecordModel:
        """Insert one usage record."""
        return await self.create(session, user_id=user_id, used_at=used_at)


usage_crud = UsageCRUD()
