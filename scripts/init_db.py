"""Initialise the database schema.

Run once to create the contract registry and contribution tables:
    python -m scripts.init_db
"""

import asyncio

import structlog

from src.db.models import Base
from src.db.session import DATABASE_URL, engine

logger = structlog.get_logger()


async def init() -> None:
    logger.info("init_db", url=DATABASE_URL.split("@")[-1])  # log host only

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()
    logger.info("init_db.done", tables=sorted(Base.metadata.tables))


if __name__ == "__main__":
    asyncio.run(init())
