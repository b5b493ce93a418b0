"""Service test fixtures — async usage DB, fake collaborators, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with usage_records created
    - The route's service dependency is overridden with a service built from fakes
      and the real SqlUsageStore (quota semantics exercised end to end)
    - Overrides are cleared after every test

Design Decisions:
    - SQLite in-memory + StaticPool: one shared connection, so every short-lived
      ledger session sees the same database
    - Lifespan is not run by ASGITransport: the app under test never touches
      Anthropic, Gemini, or SMTP
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from concept_studio.api.routes.generate_concepts import get_generation_service
from concept_studio.db.base import Base
from concept_studio.infrastructure.database import DatabaseSessionManager
from concept_studio.infrastructure.usage_store import SqlUsageStore
from concept_studio.main import app
import concept_studio.models  # noqa: F401

from tests.services.fake_collaborators import (
    FakeChannel, FakeImageGenerator, FakeTextClient, build_service,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def usage_store(test_db_manager):
    return SqlUsageStore(test_db_manager)


@pytest.fixture
def text_client():
    return FakeTextClient()


@pytest.fixture
def image_generator():
    return FakeImageGenerator()


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def generation_service(usage_store, text_client, image_generator, channel):
    return build_service(usage_store, text_client, image_generator, channel)


@pytest.fixture
async def client(generation_service):
    """FastAPI test client with the generation service overridden."""
    app.dependency_overrides[get_generation_service] = lambda: generation_service
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
