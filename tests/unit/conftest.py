"""Pytest configuration for unit tests."""

from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from padgroups.core.config import Settings
from padgroups.domain.exceptions import StoreError
from padgroups.infrastructure.persistence.database import Base
from padgroups.infrastructure.persistence.kv_store import MemoryKeyValueStore, SqlKeyValueStore
from padgroups.infrastructure.persistence.models import KeyValueModel  # noqa: F401
from padgroups.infrastructure.persistence.repositories import GroupRepository

SEED_RECORDS: dict[str, Any] = {
    "u1": {"login": "alice", "groups": []},
    "u2": {"login": "bob", "groups": []},
    "u3": {"login": "carol", "groups": []},
    "p1": {"name": "pad one"},
    "p2": {"name": "pad two"},
}


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop logger configuration bound to streams of earlier tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Settings for tests, independent of the environment."""
    return Settings(
        environment="testing",
        store_backend="memory",
        database_url="sqlite+aiosqlite:///:memory:",
        operation_timeout_seconds=5.0,
        index_concurrency=4,
        existence_check_concurrency=4,
        compensate_on_failure=False,
        _env_file=None,
    )


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """In-memory store seeded with three users and two pads."""
    return MemoryKeyValueStore(SEED_RECORDS)


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlKeyValueStore, None]:
    """SQL store over an in-memory SQLite database, seeded like memory_store."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    store = SqlKeyValueStore(session_factory)
    for key, value in SEED_RECORDS.items():
        await store.set(key, value)

    yield store

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def group_repo(memory_store: MemoryKeyValueStore, settings: Settings) -> GroupRepository:
    """GroupRepository over the seeded in-memory store."""
    return GroupRepository(memory_store, settings)


class FlakyStore(MemoryKeyValueStore):
    """Memory store whose operations fail for chosen keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        super().__init__(data)
        self.fail_get: set[str] = set()
        self.fail_set: set[str] = set()
        self.fail_delete: set[str] = set()
        self.writes: list[str] = []

    async def get(self, key: str) -> Any | None:
        if key in self.fail_get:
            raise StoreError("get", key)
        return await super().get(key)

    async def set(self, key: str, value: Any) -> None:
        if key in self.fail_set:
            raise StoreError("set", key)
        self.writes.append(key)
        await super().set(key, value)

    async def delete(self, key: str) -> None:
        if key in self.fail_delete:
            raise StoreError("delete", key)
        self.writes.append(key)
        await super().delete(key)


@pytest.fixture
def flaky_store() -> FlakyStore:
    """Seeded store with per-key failure injection and a write log."""
    return FlakyStore(SEED_RECORDS)
