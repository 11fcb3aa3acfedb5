"""
Test configuration and shared fixtures.
Each test gets a fresh in-memory SQLite database and an in-memory object store.
"""
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_PUBLIC_URL", "https://cdn.example.test/")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.dependencies import get_object_store  # noqa: E402
from app.core.exceptions import UpstreamStorageException  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class InMemoryObjectStore:
    """ObjectStore fake with failure injection."""

    def __init__(self, public_base_url: str, bucket: str = "test-bucket") -> None:
        self.bucket = bucket
        self.public_base_url = public_base_url
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.put_calls: list[str] = []
        self.delete_calls: list[str] = []
        # Number of puts that succeed before every further put fails.
        self.fail_puts_after: int | None = None
        # Deletes fail for keys containing any of these fragments.
        self.fail_deletes_matching: set[str] = set()

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self.put_calls.append(key)
        if self.fail_puts_after is not None and len(self.put_calls) > self.fail_puts_after:
            raise UpstreamStorageException("put", key, "injected failure")
        self.objects[key] = (data, content_type)

    async def delete(self, key: str) -> None:
        self.delete_calls.append(key)
        if any(fragment in key for fragment in self.fail_deletes_matching):
            raise UpstreamStorageException("delete", key, "injected failure")
        self.objects.pop(key, None)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session bound to the per-test database. Services commit through it."""
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore(settings.STORAGE_PUBLIC_URL)


@pytest_asyncio.fixture
async def client(
    db: AsyncSession, object_store: InMemoryObjectStore
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client with the test DB and object store injected."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: object_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Helper fixtures ───────────────────────────────────────────────────────────

@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory producing PNG-looking payloads of an exact byte size."""

    def _make(size: int = 1024) -> bytes:
        header = b"\x89PNG\r\n\x1a\n"
        return header + b"\0" * max(size - len(header), 0)

    return _make
