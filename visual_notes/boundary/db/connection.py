"""
Async engine and session plumbing.

One engine per process, created lazily from DatabaseSettings. Request
handlers get a session through `get_async_db`; services commit explicitly.

Dependencies: sqlalchemy, visual_notes.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from visual_notes.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    db = get_settings().database
    options = {"echo": db.echo_sql}

    # SQLite has no server-side pool to size
    if not db.is_sqlite:
        options.update(
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_pre_ping=True,
        )
    return create_async_engine(db.url, **options)


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the process engine.

    expire_on_commit is off so a caller row loaded during authentication stays
    readable after the quota service commits.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session.

    Anything left uncommitted when the request ends is rolled back.
    """
    async with get_async_session_factory()() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()
