"""Database-backed contribution store used by the chat graph."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.models import Contribution
from src.utils.logging import log, get_logger

MODULE = "db"
logger = get_logger()


class DatabaseContributionStore:
    """Writes each contribution as one row keyed by its timestamp-derived id."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, key: str, record: dict[str, Any]) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                session.add(Contribution(id=key, payload=record))
        log.debug(logger, MODULE, "contribution_saved", "Contribution row written",
                  key=key)
