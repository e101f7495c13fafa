"""Shared fixtures: scripted collaborators and an in-memory database."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.db.models import Base  # noqa: E402
from src.prompts.conversation import (  # noqa: E402
    CLASSIFY_SYSTEM,
    CONTRIBUTE_SYSTEM,
    CONVERSATIONAL_SYSTEM,
    ESCROW_SYSTEM,
)
from src.schemas.verification import VerificationResult  # noqa: E402


class ScriptedGenerator:
    """Answers each instruction set with a fixed reply (or raises it)."""

    def __init__(self, classify="unknown", conversational="Happy to help!",
                 contribute="{}", escrow=""):
        self.replies = {
            CLASSIFY_SYSTEM: classify,
            CONVERSATIONAL_SYSTEM: conversational,
            CONTRIBUTE_SYSTEM: contribute,
            ESCROW_SYSTEM: escrow,
        }
        self.calls = []

    async def generate(self, system_prompt, history, user_input):
        self.calls.append((system_prompt, list(history), user_input))
        reply = self.replies[system_prompt]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def prompts_called(self):
        return [call[0] for call in self.calls]


class FakeVerifier:
    def __init__(self, result=None, error=None):
        self.result = result or VerificationResult(
            verified=True,
            commit_sha="abc1234def",
            deployed_url="https://app.vercel.app",
            file_match=True,
            message="✅ Deployment matches repo code at commit abc1234",
        )
        self.error = error
        self.calls = []

    async def verify(self, params):
        self.calls.append(params)
        if self.error:
            raise self.error
        return self.result


class MemoryStore:
    def __init__(self, error=None):
        self.saved = {}
        self.error = error

    async def save(self, key, record):
        if self.error:
            raise self.error
        self.saved[key] = record


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
