"""
Quota reservation ORM model.

Holds one unit of a caller's daily allowance while a generation is in
flight. Converted into a usage record on success, deleted on failure.

Dependencies: sqlalchemy, visual_notes.boundary.db.base
System role: In-flight quota hold
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from visual_notes.boundary.db.base import Base, UtcDateTime, UUIDMixin, utc_now


class QuotaReservationModel(Base, UUIDMixin):
    """
    Attributes:
        user_id: Owning account
        reserved_at: When the hold was taken (UTC); stale after the TTL
    """

    __tablename__ = "quota_reservations"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    reserved_at: Mapped[datetime] = mapped_column(
        UtcDateTime,
        default=utc_now,
        nullable=False,
    )
