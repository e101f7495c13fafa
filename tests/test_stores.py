"""Tests for the database contribution store."""

import pytest
from sqlalchemy import select

from src.db.models import Contribution
from src.db.stores import DatabaseContributionStore


@pytest.mark.asyncio
async def test_save_writes_row(session_factory):
    store = DatabaseContributionStore(session_factory)
    await store.save("contribution_2026-10-17T03-08-09+00-00", {"type": "error_report", "priority": "low"})

    async with session_factory() as session:
        rows = (await session.execute(select(Contribution))).scalars().all()

    assert len(rows) == 1
    assert rows[0].id == "contribution_2026-10-17T03-08-09+00-00"
    assert rows[0].payload["priority"] == "low"
    assert rows[0].created_at is not None
