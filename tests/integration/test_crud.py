"""
Test suite for the CRUD layer against an in-memory database.

System role: Verification of identity, usage and reservation queries
"""

import hashlib
from datetime import datetime, timedelta, timezone

import pytest

from visual_notes.boundary.db.CRUD import reservation_crud, usage_crud, user_crud

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


class TestUserCRUD:
    @pytest.mark.asyncio
    async def test_get_by_token_hash(self, test_async_db, make_user):
        user = await make_user(token="secret-token")

        found = await user_crud.get_by_token_hash(
            test_async_db, hashlib.sha256(b"secret-token").hexdigest()
        )

        assert found is not None
        assert found.id == user.id

    @pytest.mark.asyncio
    async def test_unknown_token_hash(self, test_async_db, make_user):
        await make_user(token="secret-token")

        assert await user_crud.get_by_token_hash(test_async_db, "0" * 64) is None

    @pytest.mark.asyncio
    async def test_lock_for_update_returns_row(self, test_async_db, make_user):
        user = await make_user()

        locked = await user_crud.lock_for_update(test_async_db, user.id)

        assert locked.email == user.email


class TestUsageCRUD:
    @pytest.mark.asyncio
    async def test_count_since_is_inclusive_and_per_user(self, test_async_db, make_user):
        alice = await make_user(email="alice@example.com")
        bob = await make_user(email="bob@example.com")
        await usage_crud.record(test_async_db, alice.id, NOW - timedelta(days=1))
        await usage_crud.record(test_async_db, alice.id, NOW)
        await usage_crud.record(test_async_db, alice.id, NOW + timedelta(minutes=5))
        await usage_crud.record(test_async_db, bob.id, NOW)

        assert await usage_crud.count_since(test_async_db, alice.id, NOW) == 2
        assert await usage_crud.count_since(test_async_db, bob.id, NOW) == 1


class TestReservationCRUD:
    @pytest.mark.asyncio
    async def test_count_live_and_purge(self, test_async_db, make_user):
        user = await make_user()
        stale = await reservation_crud.create(
            test_async_db, user_id=user.id, reserved_at=NOW - timedelta(minutes=20)
        )
        live = await reservation_crud.create(test_async_db, user_id=user.id, reserved_at=NOW)
        cutoff = NOW - timedelta(minutes=10)

        assert await reservation_crud.count_live(test_async_db, user.id, cutoff) == 1
        assert await reservation_crud.purge_stale(test_async_db, user.id, cutoff) == 1
        assert await reservation_crud.get_by_id(test_async_db, stale.id) is None
        assert await reservation_crud.get_by_id(test_async_db, live.id) is not None

    @pytest.mark.asyncio
    async def test_delete_by_id(self, test_async_db, make_user):
        user = await make_user()
        reservation = await reservation_crud.create(test_async_db, user_id=user.id, reserved_at=NOW)

        assert await reservation_crud.delete_by_id(test_async_db, reservation.id) is True
        assert await reservation_crud.delete_by_id(test_async_db, reservation.id) is False


class TestUtcDateTime:
    @pytest.mark.asyncio
    async def test_timestamps_come_back_aware(self, test_async_db, make_user):
        user = await make_user()
        record = await usage_crud.record(test_async_db, user.id, NOW)
        await test_async_db.commit()
        test_async_db.expunge(record)

        reloaded = await usage_crud.get_by_id(test_async_db, record.id)

        assert reloaded.used_at == NOW
        assert reloaded.used_at.tzinfo is not None

    def test_rejects_naive_values(self):
        from visual_notes.boundary.db.base import UtcDateTime

        with pytest.raises(ValueError, match="naive datetime"):
            UtcDateTime().process_bind_param(datetime(2026, 3, 14, 12, 0), None)
