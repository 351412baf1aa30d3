"""
Usage record ORM model.

One row per successful generation by a non-privileged caller. Rows are
only ever inserted; the daily count is derived from them.

Dependencies: sqlalchemy, visual_notes.boundary.db.base
System role: Free-tier usage ledger
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from visual_notes.boundary.db.base import Base, UtcDateTime, UUIDMixin, utc_now


class UsageRecordModel(Base, UUIDMixin):
    """
    Attributes:
        user_id: Owning account
        used_at: Moment the generation succeeded (UTC)
    """

    __tablename__ = "usage_records"
    __table_args__ = (Index("ix_usage_records_user_used_at", "user_id", "used_at"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    used_at: Mapped[datetime] = mapped_column(
        UtcDateTime,
        default=utc_now,
        nullable=False,
    )

    user = relationship("UserModel", back_populates="usage_records")
