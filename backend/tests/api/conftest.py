"""API test fixtures — async DB + FastAPI test client with scripted AI fakes.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Generator, embedder and grader overridden with scripted fakes; tests set
      ai.generator / ai.embedder / ai.grader before making requests

Design Decisions:
    - Override lambdas read the ai holder at request time, so a test can swap
      a fake after the client fixture has been built
"""

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import daily_trivia.infrastructure.database as db_module
from daily_trivia.api.dependencies import get_embedder, get_generator, get_grader
from daily_trivia.db.base import Base
from daily_trivia.infrastructure.database import DatabaseSessionManager, get_db
from daily_trivia.infrastructure.question_store import SqlAlchemyQuestionStore
from daily_trivia.main import app
from tests.fakes import FakeEmbedder, FakeGenerator, FakeGrader

CRON_HEADERS = {"X-CRON-KEY": "test-cron-key"}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
def ai():
    return SimpleNamespace(
        generator=FakeGenerator([]),
        embedder=FakeEmbedder([]),
        grader=FakeGrader([]),
    )


@pytest.fixture
async def client(test_engine, test_session_factory, ai):
    """FastAPI test client with DB and AI dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generator] = lambda: ai.generator
    app.dependency_overrides[get_embedder] = lambda: ai.embedder
    app.dependency_overrides[get_grader] = lambda: ai.grader

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_question(test_session_factory):
    """Store one question with choices ["Tokyo", "Edo"] and return it."""
    async with test_session_factory() as session:
        return await SqlAlchemyQuestionStore(session).insert_question({
            "title": "Japanese capital",
            "text": "Which city has been the capital of Japan since 1868?",
            "topic": "geography",
            "sha256": "f" * 64,
            "choices": ["Tokyo", "Edo"],
            "choices_normalized": ["edo", "tokyo"],
            "choices_signature": None,
            "embedding": [0.0, 1.0],
        })
