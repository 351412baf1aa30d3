"""
Tests for the daily quota gate against an in-memory database.

System role: Verification of reserve / commit / release accounting
"""

from datetime import datetime, timedelta, timezone

import pytest

from visual_notes.application.services import CallerContext, QuotaService
from visual_notes.boundary.db.CRUD import usage_crud
from visual_notes.core.exceptions import QuotaExceededError


@pytest.fixture
async def caller(make_user):
    user = await make_user()
    return CallerContext(user_id=user.id, email=user.email, is_privileged=False)


@pytest.fixture
def quota_service(test_async_db, quota_settings, fake_clock):
    return QuotaService(test_async_db, quota_settings, clock=fake_clock)


async def _use_once(quota_service: QuotaService, caller: CallerContext) -> None:
    ticket = await quota_service.reserve(caller)
    await quota_service.commit(ticket)


class TestStatus:
    @pytest.mark.asyncio
    async def test_fresh_caller_has_full_allowance(self, quota_service, caller):
        status = await quota_service.status(caller)

        assert status.remaining_uses == 3
        assert status.daily_limit == 3
        assert status.is_privileged is False

    @pytest.mark.asyncio
    async def test_privileged_caller_is_unlimited(self, quota_service, caller):
        privileged = CallerContext(caller.user_id, caller.email, is_privileged=True)

        status = await quota_service.status(privileged)

        assert status.remaining_uses is None
        assert status.is_privileged is True


class TestReserveCommit:
    @pytest.mark.asyncio
    async def test_success_records_exactly_one_usage(
        self, quota_service, caller, test_async_db, fake_clock
    ):
        ticket = await quota_service.reserve(caller)
        await quota_service.commit(ticket)

        used = await usage_crud.count_since(
            test_async_db, caller.user_id, fake_clock.now - timedelta(hours=1)
        )
        assert used == 1
        assert ticket.remaining_after == 2
        assert (await quota_service.status(caller)).remaining_uses == 2

    @pytest.mark.asyncio
    async def test_limit_is_enforced(self, quota_service, caller):
        for _ in range(3):
            await _use_once(quota_service, caller)

        with pytest.raises(QuotaExceededError) as exc_info:
            await quota_service.reserve(caller)

        assert exc_info.value.remaining_uses == 0
        assert exc_info.value.daily_limit == 3

    @pytest.mark.asyncio
    async def test_in_flight_reservations_hold_allowance(self, quota_service, caller):
        tickets = [await quota_service.reserve(caller) for _ in range(3)]

        with pytest.raises(QuotaExceededError):
            await quota_service.reserve(caller)
        assert [t.remaining_after for t in tickets] == [2, 1, 0]

    @pytest.mark.asyncio
    async def test_release_records_no_usage(self, quota_service, caller):
        ticket = await quota_service.reserve(caller)
        await quota_service.release(ticket)

        assert (await quota_service.status(caller)).remaining_uses == 3
        # the released unit is available again
        for _ in range(3):
            await _use_once(quota_service, caller)

    @pytest.mark.asyncio
    async def test_stale_reservations_expire(self, quota_service, caller, fake_clock):
        for _ in range(3):
            await quota_service.reserve(caller)

        fake_clock.now += timedelta(seconds=601)

        ticket = await quota_service.reserve(caller)
        assert ticket.reservation_id is not None

    @pytest.mark.asyncio
    async def test_privileged_reserve_touches_nothing(self, quota_service, caller):
        privileged = CallerContext(caller.user_id, caller.email, is_privileged=True)

        ticket = await quota_service.reserve(privileged)
        await quota_service.commit(ticket)

        assert ticket.reservation_id is None
        assert ticket.remaining_after is None
        assert (await quota_service.status(caller)).remaining_uses == 3


class TestDayBoundary:
    @pytest.mark.asyncio
    async def test_usage_resets_at_utc_midnight(self, quota_service, caller, fake_clock):
        fake_clock.now = datetime(2026, 3, 14, 23, 59, 59, tzinfo=timezone.utc)
        for _ in range(3):
            await _use_once(quota_service, caller)
        assert (await quota_service.status(caller)).remaining_uses == 0

        fake_clock.now = datetime(2026, 3, 15, 0, 0, 1, tzinfo=timezone.utc)

        assert (await quota_service.status(caller)).remaining_uses == 3

        await _use_once(quota_service, caller)

        assert (await quota_service.status(caller)).remaining_uses == 2

    @pytest.mark.asyncio
    async def test_use_at_exact_midnight_counts_toward_new_day(
        self, quota_service, caller, fake_clock, test_async_db
    ):
        midnight = datetime(2026, 3, 15, 0, 0, 0, tzinfo=timezone.utc)
        fake_clock.now = midnight
        await _use_once(quota_service, caller)

        assert await usage_crud.count_since(test_async_db, caller.user_id, midnight) == 1
        fake_clock.now = midnight + timedelta(hours=12)
        assert (await quota_service.status(caller)).remaining_uses == 2
