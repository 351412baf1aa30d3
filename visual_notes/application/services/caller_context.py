"""
Caller identity and privilege.

Dependencies: visual_notes.boundary.db.models
System role: Translates an account row into the request's caller context
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from visual_notes.boundary.db.models.user_model import UserModel

ACTIVE_STATUS = "active"
CANCELED_STATUS = "canceled"


@dataclass(frozen=True)
class CallerContext:
    """Authenticated caller of a request."""

    user_id: UUID
    email: str
    is_privileged: bool


def _as_utc(moment: datetime) -> datetime:
    # SQLite returns naive datetimes; every stored moment is UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def is_privileged_user(user: UserModel, admin_emails: list[str], now: datetime) -> bool:
    """
    Decide whether an account is exempt from the daily quota.

    Privileged when the email is on the admin list, the subscription is
    active, or a canceled subscription has not yet reached its end date.
    """
    admins = {email.strip().lower() for email in admin_emails}
    if user.email.lower() in admins:
        return True
    if user.subscription_status == ACTIVE_STATUS:
        return True
    if user.subscription_status == CANCELED_STATUS and user.subscription_end_date:
        return _as_utc(user.subscription_end_date) > now
    return False


def caller_from_user(user: UserModel, admin_emails: list[str], now: datetime) -> CallerContext:
    return CallerContext(
        user_id=user.id,
        email=user.email,
        is_privileged=is_privileged_user(user, admin_emails, now),
    )
