"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from openai.types import CompletionUsage
from openai.types.chat import ChatCompletion, ChatCompletionMessage
from openai.types.chat.chat_completion import Choice
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings
from models.base import Base
from models.user import User


@pytest.fixture
async def async_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine on a throwaway SQLite file with the schema in place."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession]:
    """Create an async session for a test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(email="tags@example.com")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create another test user for isolation tests."""
    user = User(email="other-tags@example.com")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
def openai_settings() -> Settings:
    """Settings with OpenAI tag inference enabled."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite://",
        OPENAI_API_KEY="sk-test",
        OPENAI_ENABLED="true",
    )


@pytest.fixture
async def extension_client() -> AsyncGenerator[AsyncClient]:
    """Create a test client for the extension shell."""
    from extension.main import create_app

    async with AsyncClient(
        transport=ASGITransport(app=create_app()),
        base_url="http://test",
    ) as test_client:
        yield test_client


def build_chat_completion(content: str | None, total_tokens: int = 42) -> ChatCompletion:
    """Build a chat-completion response with a single assistant message."""
    return ChatCompletion(
        id="chatcmpl-test",
        object="chat.completion",
        created=0,
        model="gpt-3.5-turbo-0125",
        choices=[
            Choice(
                index=0,
                finish_reason="stop",
                message=ChatCompletionMessage(role="assistant", content=content),
            ),
        ],
        usage=CompletionUsage(
            prompt_tokens=total_tokens - 2,
            completion_tokens=2,
            total_tokens=total_tokens,
        ),
    )


@pytest.fixture
def make_openai_client() -> Callable[..., MagicMock]:
    """
    Factory for a mocked AsyncOpenAI client.

    The client's ``chat.completions.create`` is an AsyncMock returning a
    completion whose message content is the given string.
    """

    def _make(content: str | None) -> MagicMock:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            return_value=build_chat_completion(content),
        )
        return client

    return _make
