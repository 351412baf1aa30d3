"""
Quota reservation CRUD operations.

Dependencies: sqlalchemy, visual_notes.boundary.db.models
System role: In-flight quota hold queries
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes.boundary.db.CRUD.base_crud import BaseCRUD
from visual_notes.boundary.db.models.quota_reservation_model import QuotaReservationModel


class ReservationCRUD(BaseCRUD[QuotaReservationModel]):
    """CRUD operations for QuotaReservationModel."""

    def __init__(self) -> None:
        """Initialize ReservationCRUD with QuotaReservationModel."""
        super().__init__(QuotaReservationModel)

    async def count_live(
        self,
        session: AsyncSession,
        user_id: UUID,
        not_before: datetime,
    ) -> int:
        """
        Count a caller's reservations taken at or after `not_before`.

        Older reservations belong to runs that never finished and no
        longer hold allowance.
        """
        stmt = (
            select(func.count())
            .select_from(QuotaReservationModel)
            .where(
                QuotaReservationModel.user_id == user_id,
                QuotaReservationModel.reserved_at >= not_before,
            )
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def purge_stale(
        self,
        session: AsyncSession,
        user_id: UUID,
        before: datetime,
    ) -> int:
        """Delete a caller's reservations older than `before`; returns rows removed."""
        stmt = delete(QuotaReservationModel).where(
            QuotaReservationModel.user_id == user_id,
            QuotaReservationModel.reserved_at < before,
        )
        result = await session.execute(stmt)
        return result.rowcount or 0


reservation_crud = ReservationCRUD()
