"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Environment defaults are set before portfolio_api is imported (get_settings is cached)
    - Every test gets a fresh in-memory SQLite database with all tables created
    - Blob storage is always in-memory; tests never reach S3
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from portfolio_api.db.base import Base  # noqa: E402
import portfolio_api.models  # noqa: E402,F401
from portfolio_api.infrastructure.blob_storage import InMemoryBlobStore  # noqa: E402
from portfolio_api.infrastructure.resource_store import SqlResourceStore  # noqa: E402
from portfolio_api.services.image_lifecycle import ImageLifecycleManager  # noqa: E402


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
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return SqlResourceStore(test_db)


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def images(blob_store):
    return ImageLifecycleManager(
        blob_store,
        ["image/jpeg", "image/png", "image/gif", "image/webp"],
        10 * 1024 * 1024,
    )
