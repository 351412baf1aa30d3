"""
User ORM model.

Read-only view of the account table owned by the auth and billing
services. This service only resolves identity and privilege from it.

Dependencies: sqlalchemy, visual_notes.boundary.db.base
System role: Caller identity boundary
"""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from visual_notes.boundary.db.base import Base, TimestampMixin, UtcDateTime, UUIDMixin


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    Account row.

    Attributes:
        email: Login email (unique)
        name: Display name
        subscription_status: Billing state, e.g. "active" or "canceled"
        subscription_end_date: End of the paid period for canceled subscriptions
        api_token_hash: SHA-256 hex digest of the caller's bearer token
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    subscription_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    subscription_end_date: Mapped[datetime | None] = mapped_column(
        UtcDateTime,
        nullable=True,
    )
    api_token_hash: Mapped[str | None] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=True,
    )

    usage_records = relationship(
        "UsageRecordModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
