"""Repositories for PadGroups persistence."""

from padgroups.infrastructure.persistence.repositories.group_repository import (
    GroupRepository,
    UpsertMode,
)

__all__ = ["GroupRepository", "UpsertMode"]
