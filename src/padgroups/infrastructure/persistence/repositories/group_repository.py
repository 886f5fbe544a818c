"""Repository for group operations over the key-value store.

Create and update run one path: normalize, confirm the group exists when
editing, check every referenced admin/user/pad, write the group record,
then attach the group to its users. Delete reads the record, detaches it
from its users and only then removes the record.

Nothing here is atomic across keys. A failure after the group record is
written surfaces as IndexPropagationError and the record stays in place;
no rollback of the group record is attempted.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from enum import Enum
from typing import Any, TypeVar

from padgroups.core.config import Settings, get_settings
from padgroups.core.logging import LoggingContext, get_logger
from padgroups.domain.entities.group import Group
from padgroups.domain.exceptions import (
    GroupReferenceError,
    IndexPropagationError,
    NotFoundError,
    OperationTimeoutError,
    ValidationError,
)
from padgroups.domain.schemas import GroupInput
from padgroups.domain.services.existence_checker import EntityExistenceChecker
from padgroups.domain.services.group_id_generator import GroupIdGenerator
from padgroups.domain.services.group_normalizer import GroupNormalizer
from padgroups.domain.services.index_maintainer import (
    IndexDirection,
    SecondaryIndexMaintainer,
)
from padgroups.infrastructure.persistence.kv_store import KeyValueStore

logger = get_logger(__name__)

T = TypeVar("T")


class UpsertMode(str, Enum):
    """CREATE mints a new id; UPDATE requires the id to exist already."""

    CREATE = "create"
    UPDATE = "update"


class GroupRepository:
    """Repository for group records and their user back-references."""

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings | None = None,
        id_generator: type[GroupIdGenerator] = GroupIdGenerator,
    ) -> None:
        """Initialize the repository.

        Args:
            store: Key-value store holding group, user and pad records.
            settings: Optional settings; loaded from the environment if omitted.
            id_generator: Source of fresh group ids.
        """
        self.store = store
        self.settings = settings or get_settings()
        self.id_generator = id_generator
        self.prefix = self.settings.group_prefix
        self.checker = EntityExistenceChecker(
            store, concurrency=self.settings.existence_check_concurrency
        )
        self.indexer = SecondaryIndexMaintainer(
            store, concurrency=self.settings.index_concurrency
        )

    def key(self, group_id: str) -> str:
        """Store key of a group record."""
        return self.prefix + group_id

    @staticmethod
    def params_id(params: Mapping[str, Any]) -> Any:
        """Group id carried by params, ``_id`` first, then ``id``; None if unset."""
        group_id = params.get("_id")
        if group_id is None:
            group_id = params.get("id")
        return group_id

    async def create(
        self,
        params: Mapping[str, Any] | GroupInput,
        group_id: str | None = None,
    ) -> Group:
        """Create a group, or rewrite an existing one when an id is given.

        Args:
            params: Raw group parameters. An ``_id`` (or ``id``) entry
                selects edit mode when group_id is omitted.
            group_id: Id of an existing group to replace (edit mode).

        Returns:
            The persisted group.

        Raises:
            ValidationError: If name or admin is invalid.
            NotFoundError: If group_id is given but no such group exists.
            GroupReferenceError: If referenced admins, users or pads are missing.
            StoreError: If the store fails.
            IndexPropagationError: If user back-references could not all be written.
        """
        if isinstance(params, GroupInput):
            params = params.to_params()
        if group_id is None and isinstance(params, Mapping):
            group_id = self.params_id(params)
        if group_id is None:
            mode = UpsertMode.CREATE
            group_id = self.id_generator.generate()
        elif isinstance(group_id, str) and group_id:
            mode = UpsertMode.UPDATE
        else:
            raise ValidationError("group id must be a non-empty string")
        return await self._bounded("create", group_id, self._upsert(params, group_id, mode))

    async def update(self, params: Mapping[str, Any] | GroupInput) -> Group:
        """Replace an existing group with params (full replace, no merge).

        The id is read from ``_id`` (or ``id``) in params.
        """
        if isinstance(params, GroupInput):
            params = params.to_params()
        group_id = self.params_id(params)
        if not (isinstance(group_id, str) and group_id):
            raise ValidationError("an existing group id is required to update a group")
        return await self._bounded(
            "update", group_id, self._upsert(params, group_id, UpsertMode.UPDATE)
        )

    async def get(self, group_id: str) -> Group:
        """Read a group.

        Raises:
            ValidationError: If group_id is not a string.
            NotFoundError: If no such group exists.
        """
        if not isinstance(group_id, str):
            raise ValidationError("key must be a string")
        record = await self.store.get(self.key(group_id))
        if record is None:
            raise NotFoundError(self.key(group_id))
        return Group.from_dict(record)

    async def delete(self, group_id: str) -> Group:
        """Delete a group after detaching it from its users.

        If detaching fails the group record is left in place.

        Returns:
            The deleted group.
        """
        return await self._bounded("delete", group_id, self._delete(group_id))

    # Aliases matching the public operation names
    add = create
    set = update
    read = get

    async def _upsert(
        self,
        params: Mapping[str, Any] | GroupInput,
        group_id: str,
        mode: UpsertMode,
    ) -> Group:
        group = GroupNormalizer.normalize(params, group_id)

        previous: Group | None = None
        if mode is UpsertMode.UPDATE:
            try:
                previous = await self.get(group_id)
            except NotFoundError:
                raise NotFoundError(self.key(group_id), "group does not exist") from None

        missing = await self.checker.missing(group.references)
        if missing:
            raise GroupReferenceError([str(m) for m in missing])

        await self.store.set(self.key(group.id), group.to_dict())
        logger.info("Group record written", mode=mode.value, name=group.name)

        try:
            await self.indexer.propagate(IndexDirection.ATTACH, group)
        except IndexPropagationError as e:
            if previous is None and self.settings.compensate_on_failure:
                await self._compensate(group, e)
            raise

        if previous is not None:
            removed = [u for u in previous.members if u not in group.members]
            if removed:
                await self.indexer.propagate(IndexDirection.DETACH, group, removed)

        return group

    async def _delete(self, group_id: str) -> Group:
        group = await self.get(group_id)
        await self.indexer.propagate(IndexDirection.DETACH, group)
        await self.store.delete(self.key(group_id))
        logger.info("Group deleted", name=group.name)
        return group

    async def _compensate(self, group: Group, error: IndexPropagationError) -> None:
        """Best-effort detach of users attached before the failure."""
        if not error.succeeded:
            error.compensated = True
            return
        try:
            await self.indexer.propagate(IndexDirection.DETACH, group, error.succeeded)
        except IndexPropagationError as undo_error:
            logger.error(
                "Compensation failed",
                still_attached=list(undo_error.failed),
            )
            return
        error.compensated = True
        logger.warning("Attach rolled back", users=error.succeeded)

    async def _bounded(self, operation: str, group_id: str, coro: Awaitable[T]) -> T:
        """Run one operation with logging context and the configured timeout."""
        timeout = self.settings.operation_timeout_seconds
        with LoggingContext(operation=operation, group_id=group_id):
            if timeout is None:
                return await coro
            try:
                return await asyncio.wait_for(coro, timeout)
            except asyncio.TimeoutError:
                logger.error("Group operation timed out", timeout=timeout)
                raise OperationTimeoutError(operation, group_id, timeout) from None
