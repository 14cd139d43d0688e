import os

# Settings are read at import time, so the environment must be set first.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GCS_BUCKET_NAME", "test-bucket")
os.environ.setdefault("FRONTEND_URL", "http://localhost:5173")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel

import app.models  # noqa: F401
from app.core.rate_limit import limiter
from app.core.security import create_access_token
from app.db.database import get_db
from app.main import app
from app.utils.file_handling import get_blob_storage
from tests.fakes import (
    FakeBlobStorage,
    FakeConnectionStore,
    FakeListingStore,
    FakeProfileStore,
)


@pytest_asyncio.fixture(scope="function")
async def async_test_engine():
    """A fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(async_test_engine):
    return sessionmaker(
        bind=async_test_engine,
        class_=AsyncSessionSQLModel,
        expire_on_commit=False,
        autoflush=False
    )


@pytest_asyncio.fixture(scope="function")
async def async_test_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def blob_storage():
    return FakeBlobStorage()


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, blob_storage):
    """HTTP client over the app; each request gets its own session on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage
    # Limits are kept in process memory and every test client shares one address.
    limiter.reset()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers


@pytest.fixture
def profiles():
    return FakeProfileStore()


@pytest.fixture
def connections():
    return FakeConnectionStore()


@pytest.fixture
def listings():
    return FakeListingStore()
