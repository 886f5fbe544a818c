"""Public group operations.

``add_group``, ``get_group``, ``set_group`` and ``delete_group`` run
against a process-wide GroupRepository built from settings. Callers that
manage their own store should use GroupRepository directly.
"""

from collections.abc import Mapping
from typing import Any

from padgroups.core.config import Settings, get_settings
from padgroups.domain.entities.group import Group
from padgroups.domain.schemas import GroupInput
from padgroups.infrastructure.persistence.database import get_db_manager
from padgroups.infrastructure.persistence.kv_store import (
    KeyValueStore,
    MemoryKeyValueStore,
    SqlKeyValueStore,
)
from padgroups.infrastructure.persistence.repositories import GroupRepository

_repository: GroupRepository | None = None


def build_store(settings: Settings | None = None) -> KeyValueStore:
    """Create the store selected by ``store_backend``."""
    settings = settings or get_settings()
    if settings.store_backend == "memory":
        return MemoryKeyValueStore()
    return SqlKeyValueStore(get_db_manager().session_factory)


def get_repository() -> GroupRepository:
    """Get the global group repository."""
    global _repository
    if _repository is None:
        settings = get_settings()
        _repository = GroupRepository(build_store(settings), settings)
    return _repository


def set_repository(repository: GroupRepository | None) -> None:
    """Replace the global repository (None resets it)."""
    global _repository
    _repository = repository


async def add_group(params: Mapping[str, Any] | GroupInput) -> Group:
    """Create a group, or fully replace it when params carry an ``_id``."""
    return await get_repository().create(params)


async def get_group(group_id: str) -> Group:
    """Read a group by id."""
    return await get_repository().get(group_id)


async def set_group(params: Mapping[str, Any] | GroupInput) -> Group:
    """Alias of add_group."""
    return await add_group(params)


async def delete_group(group_id: str) -> Group:
    """Delete a group and detach it from its users."""
    return await get_repository().delete(group_id)
