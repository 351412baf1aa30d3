"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory database, settings, a controllable clock, a scripted
model client, and element builders.
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest


class FakeClock:
    """Callable clock whose time tests can move."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def rect(x: float = 100, y: float = 100, **extra) -> dict:
    return {"type": "rectangle", "x": x, "y": y, "width": 160, "height": 80, **extra}


def text(label: str, x: float = 120, y: float = 125, **extra) -> dict:
    return {"type": "text", "x": x, "y": y, "width": 120, "height": 30, "text": label, **extra}


def arrow(x: float = 260, y: float = 140, **extra) -> dict:
    return {
        "type": "arrow",
        "x": x,
        "y": y,
        "width": 100,
        "height": 0,
        "points": [{"x": 0, "y": 0}, {"x": 100, "y": 0}],
        **extra,
    }


def labeled_boxes(count: int) -> list[dict]:
    """`count` elements alternating rectangle / label, laid out left to right."""
    elements = []
    for index in range(count):
        x = 100 + (index // 2) * 260
        if index % 2 == 0:
            elements.append(rect(x=x))
        else:
            elements.append(text(f"Concept {index // 2}", x=x + 20))
    return elements


def as_reply(value) -> str:
    return json.dumps(value)


@pytest.fixture
def generation_settings():
    from visual_notes.configs.generation import GenerationSettings

    return GenerationSettings()


@pytest.fixture
def quota_settings():
    from visual_notes.configs.quota import QuotaSettings

    return QuotaSettings(free_daily_limit=3, reservation_ttl_seconds=600, admin_emails=[])


@pytest.fixture
def scripted_client():
    """Model client whose replies are set per test via `complete.side_effect`."""
    from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
        ChatModelClient,
    )

    client = AsyncMock(spec=ChatModelClient)
    client.complete = AsyncMock()
    return client


@pytest.fixture
def text_context():
    from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
        GenerationContext,
        SourceKind,
    )

    return GenerationContext(
        source_kind=SourceKind.TEXT,
        content="Photosynthesis\n- light reactions\n- Calvin cycle",
    )


@pytest.fixture
def fake_clock():
    return FakeClock(datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from visual_notes.boundary.db.base import Base
    from visual_notes.boundary.db import models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def make_user(test_async_db):
    """Factory inserting a committed user row."""
    from visual_notes.boundary.db.CRUD import user_crud

    async def _make_user(
        email: str = "student@example.com",
        token: str | None = None,
        subscription_status: str | None = None,
        subscription_end_date: datetime | None = None,
    ):
        user = await user_crud.create(
            test_async_db,
            email=email,
            name="Student",
            subscription_status=subscription_status,
            subscription_end_date=subscription_end_date,
            api_token_hash=hashlib.sha256(token.encode()).hexdigest() if token else None,
        )
        await test_async_db.commit()
        return user

    return _make_user


@pytest.fixture
def build():
    """Element builders and a JSON reply encoder."""
    return SimpleNamespace(
        rect=rect,
        text=text,
        arrow=arrow,
        labeled_boxes=labeled_boxes,
        reply=as_reply,
    )
