"""Key-value store contract and adapters.

The store offers single-key get/set/delete only. Each call is atomic on
its own; nothing spans two keys, so callers that touch several records
must handle partial failure themselves.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from padgroups.core.logging import get_logger
from padgroups.domain.exceptions import StoreError
from padgroups.infrastructure.persistence.models import KeyValueModel

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Abstract base class for key-value stores."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None when the key is absent.

        Raises:
            StoreError: If the lookup itself failed.
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        ...


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored records without a ``set``.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}

    async def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """List stored keys (for inspection in tools and tests)."""
        return list(self._data)


class SqlKeyValueStore(KeyValueStore):
    """Store backed by a single SQL table through SQLAlchemy async.

    Every call runs in its own session and commits before returning.
    Driver errors are wrapped in StoreError with the original exception
    chained as ``__cause__``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> Any | None:
        try:
            async with self.session_factory() as session:
                row = await session.get(KeyValueModel, key)
                return None if row is None else row.value
        except SQLAlchemyError as e:
            logger.error("Store read failed", key=key, error=str(e))
            raise StoreError("get", key) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            async with self.session_factory() as session:
                await session.merge(KeyValueModel(key=key, value=value))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Store write failed", key=key, error=str(e))
            raise StoreError("set", key) from e

    async def delete(self, key: str) -> None:
        try:
            async with self.session_factory() as session:
                await session.execute(delete(KeyValueModel).where(KeyValueModel.key == key))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Store delete failed", key=key, error=str(e))
            raise StoreError("delete", key) from e
