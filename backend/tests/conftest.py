"""
Shared pytest fixtures.

Uses an in-memory SQLite database (aiosqlite) and an in-memory blob store so
no Postgres or object storage is required for tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_MODE", "static")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["RATE_LIMIT_ENABLED"] = "false"

import hashlib
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app
from app.models import memory  # noqa: F401
from app.services.identity import StaticIdentityResolver, get_identity_resolver
from app.services.storage import StoredObject, get_blob_store

TEST_USER = "tester@example.com"


class InMemoryBlobStore:
    def __init__(self):
        self.objects: dict[str, dict] = {}
        self.closed: list[str] = []

    def put(self, key, data, content_type, cache_control=None):
        self.objects[key] = {
            "data": data,
            "content_type": content_type,
            "cache_control": cache_control,
            "etag": f'"{hashlib.md5(data).hexdigest()}"',
        }

    def get(self, key):
        stored = self.objects.get(key)
        if stored is None:
            return None
        return StoredObject(
            body=iter([stored["data"]]),
            content_type=stored["content_type"],
            cache_control=stored["cache_control"],
            etag=stored["etag"],
            content_length=len(stored["data"]),
            close=lambda: self.closed.append(key),
        )


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest_asyncio.fixture
async def client(session_factory, blob_store) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_identity_resolver] = lambda: StaticIdentityResolver(TEST_USER)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
