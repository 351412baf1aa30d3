"""
Schema bootstrap for development databases.

Usage:
    python -m visual_notes.boundary.db.create_tables           # create missing tables
    python -m visual_notes.boundary.db.create_tables --reset   # drop everything first

Production schemas are expected to be managed by migrations; this script only
mirrors the ORM metadata.

Dependencies: sqlalchemy, visual_notes.configs
System role: Database schema initialization
"""

import argparse
import asyncio
import logging

from visual_notes.boundary.db.base import Base
from visual_notes.boundary.db.connection import get_async_engine

# Registers the tables on Base.metadata
from visual_notes.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """Create any table that does not exist yet. Existing tables are untouched."""
    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_all_tables() -> None:
    """Drop users, usage records and reservations along with their data."""
    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _main(reset: bool) -> None:
    if reset:
        await drop_all_tables()
        logger.warning("Dropped all visual notes tables")
    await create_all_tables()
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
    await get_async_engine().dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the visual notes database tables")
    parser.add_argument("--reset", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main(args.reset))
