"""
Daily quota gate for non-privileged callers.

Reserve, commit and release are each one transaction. Reserving locks the
caller's user row so concurrent requests from one caller cannot both pass
the check for the last unit of allowance.

Dependencies: sqlalchemy, visual_notes.boundary.db.CRUD, visual_notes.configs
System role: Free-tier usage enforcement
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from visual_notes.application.services.caller_context import CallerContext
from visual_notes.boundary.db.base import utc_now
from visual_notes.boundary.db.CRUD import reservation_crud, usage_crud, user_crud
from visual_notes.configs.quota import QuotaSettings
from visual_notes.core.exceptions import QuotaExceededError, UnauthenticatedError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def start_of_utc_day(moment: datetime) -> datetime:
    """Midnight UTC of the day containing `moment`."""
    moment = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class QuotaStatus:
    """Remaining allowance for a caller; remaining_uses is None when unlimited."""

    remaining_uses: int | None
    daily_limit: int
    is_privileged: bool


@dataclass(frozen=True)
class QuotaTicket:
    """
    Handle for one in-flight request.

    Attributes:
        reservation_id: Held reservation, None for privileged callers
        remaining_after: Allowance left once this request succeeds (None if unlimited)
    """

    reservation_id: UUID | None
    remaining_after: int | None
    user_id: UUID | None = None


class QuotaService:
    """Reserve / commit / release daily allowance."""

    def __init__(
        self,
        db: AsyncSession,
        settings: QuotaSettings,
        clock: Clock = utc_now,
    ) -> None:
        """
        Args:
            db: AsyncSession for database operations
            settings: Daily limit and reservation TTL
            clock: Returns the current aware UTC time
        """
        self.db = db
        self._settings = settings
        self._clock = clock

    @property
    def daily_limit(self) -> int:
        return self._settings.free_daily_limit

    async def status(self, caller: CallerContext) -> QuotaStatus:
        """
        Compute remaining uses from persisted usage records.

        Never cached; each call re-counts.
        """
        if caller.is_privileged:
            return QuotaStatus(None, self.daily_limit, True)

        used = await usage_crud.count_since(
            self.db, caller.user_id, start_of_utc_day(self._clock())
        )
        return QuotaStatus(max(0, self.daily_limit - used), self.daily_limit, False)

    async def reserve(self, caller: CallerContext) -> QuotaTicket:
        """
        Hold one unit of allowance for a request.

        Raises:
            QuotaExceededError: If used plus in-flight requests reach the limit
            UnauthenticatedError: If the caller's account row no longer exists
        """
        if caller.is_privileged:
            return QuotaTicket(reservation_id=None, remaining_after=None)

        now = self._clock()
        live_since = now - timedelta(seconds=self._settings.reservation_ttl_seconds)
        try:
            user = await user_crud.lock_for_update(self.db, caller.user_id)
            if user is None:
                raise UnauthenticatedError("Unauthorized")

            used = await usage_crud.count_since(self.db, caller.user_id, start_of_utc_day(now))
            await reservation_crud.purge_stale(self.db, caller.user_id, live_since)
            pending = await reservation_crud.count_live(self.db, caller.user_id, live_since)

            if used + pending >= self.daily_limit:
                logger.info(
                    f"{__name__}:reserve - Limit reached user={caller.user_id} "
                    f"used={used} pending={pending} limit={self.daily_limit}"
                )
                raise QuotaExceededError(self.daily_limit, str(caller.user_id))

            reservation = await reservation_crud.create(
                self.db, user_id=caller.user_id, reserved_at=now
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        remaining_after = max(0, self.daily_limit - used - pending - 1)
        logger.debug(
            f"{__name__}:reserve - Reserved {reservation.id} user={caller.user_id} "
            f"remaining_after={remaining_after}"
        )
        return QuotaTicket(reservation.id, remaining_after, caller.user_id)

    async def commit(self, ticket: QuotaTicket) -> None:
        """Convert a reservation into exactly one usage record."""
        if ticket.reservation_id is None:
            return
        try:
            await usage_crud.record(self.db, ticket.user_id, self._clock())
            await reservation_crud.delete_by_id(self.db, ticket.reservation_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.debug(f"{__name__}:commit - Recorded usage for user={ticket.user_id}")

    async def release(self, ticket: QuotaTicket) -> None:
        """Drop a reservation without recording usage."""
        if ticket.reservation_id is None:
            return
        try:
            await reservation_crud.delete_by_id(self.db, ticket.reservation_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.debug(f"{__name__}:release - Released reservation for user={ticket.user_id}")
