import os

os.environ.setdefault("DB_DSN", "sqlite+aiosqlite:///./eventlink.db")

from contextlib import asynccontextmanager  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.config.database import engine  # noqa: E402
from src.events.dependencies import get_event_cache, get_event_repository  # noqa: E402
from src.events.repository import EventRepository, OwnerEventCache, SqlEventStore  # noqa: E402
from src.events.repository.tests.inmemory_store import InMemoryEventStore  # noqa: E402
from src.main import app  # noqa: E402
from src.models.base import BaseModel  # noqa: E402


@pytest.fixture
def memory_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def repository(memory_store: InMemoryEventStore) -> EventRepository:
    return EventRepository(memory_store)


@pytest.fixture
def event_cache(repository: EventRepository) -> OwnerEventCache:
    return OwnerEventCache(repository)


@pytest.fixture
async def sql_store():
    """Event store backed by a freshly created test database."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield SqlEventStore()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def client_factory(repository: EventRepository, event_cache: OwnerEventCache):
    """Build a test client. Repository and cache default to the in-memory store."""

    @asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides[get_event_repository] = lambda: repository
        app.dependency_overrides[get_event_cache] = lambda: event_cache
        app.dependency_overrides.update(overrides or {})

        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _client_factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac
