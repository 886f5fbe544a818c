"""Foreign-key existence checks against the key-value store."""

import asyncio
from collections.abc import Iterable
from typing import Any

from padgroups.core.logging import get_logger
from padgroups.infrastructure.persistence.kv_store import KeyValueStore

logger = get_logger(__name__)


class EntityExistenceChecker:
    """Confirms that referenced records exist before a group is committed.

    One lookup is issued per distinct id, concurrently, with at most
    ``concurrency`` lookups in flight. A failing lookup propagates its
    error: a store outage must never be reported as a missing reference.
    """

    def __init__(self, store: KeyValueStore, concurrency: int = 32) -> None:
        self.store = store
        self.concurrency = concurrency

    async def check_existence(self, key: str) -> bool:
        """Return True if a record is stored under key."""
        return await self.store.get(key) is not None

    async def missing(self, ids: Iterable[Any]) -> list[Any]:
        """Return the ids that do not resolve to a stored record.

        Non-string ids can never be store keys and are reported as
        missing without a lookup.

        Raises:
            StoreError: If any lookup fails.
        """
        ids = list(ids)
        unique = list(dict.fromkeys(i for i in ids if isinstance(i, str)))
        invalid = [i for i in ids if not isinstance(i, str)]
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _exists(key: str) -> bool:
            async with semaphore:
                return await self.check_existence(key)

        results = await asyncio.gather(*(_exists(key) for key in unique))
        missing = [*invalid, *(key for key, found in zip(unique, results) if not found)]
        if missing:
            logger.debug("Unresolved references", missing=[str(m) for m in missing])
        return missing

    async def check_all(self, ids: Iterable[Any]) -> bool:
        """Return True only if every id resolves to an existing record."""
        return not await self.missing(ids)
