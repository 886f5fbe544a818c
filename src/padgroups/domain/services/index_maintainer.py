"""Secondary index maintenance for user group memberships.

Each user referenced by a group (as admin or invited user) carries the
group id in the ``groups`` list of its own record. The store has no
multi-key transactions, so attaching or detaching a group is a fan-out of
independent read-modify-write cycles, one per user. This module runs that
fan-out and reports its outcome exactly once per call.

Pads are not indexed: pad records do not carry a back-reference yet.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from padgroups.core.logging import get_logger
from padgroups.domain.entities.group import Group
from padgroups.domain.exceptions import IndexPropagationError, NotFoundError, StoreError
from padgroups.infrastructure.persistence.kv_store import KeyValueStore

logger = get_logger(__name__)


class IndexDirection(str, Enum):
    """Whether a group id is added to or removed from user records."""

    ATTACH = "attach"
    DETACH = "detach"


@dataclass
class PropagationReport:
    """Outcome of a fully successful propagation."""

    direction: IndexDirection
    group_id: str
    succeeded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class SecondaryIndexMaintainer:
    """Keeps ``user.groups`` in sync with group membership.

    Per-user updates run concurrently, at most ``concurrency`` at a time.
    All of them are awaited before the result is reported, so a call
    either returns one PropagationReport or raises one
    IndexPropagationError listing which users were updated and which
    were not.
    """

    def __init__(self, store: KeyValueStore, concurrency: int = 16) -> None:
        self.store = store
        self.concurrency = concurrency

    @staticmethod
    def apply(direction: IndexDirection, groups: Any, group_id: str) -> list[str]:
        """Return the updated back-reference list for one user.

        A missing or malformed ``groups`` value counts as empty. Attach
        never duplicates the id; detach removes every occurrence.
        """
        current = list(groups) if isinstance(groups, list) else []
        if direction is IndexDirection.ATTACH:
            if group_id not in current:
                current.append(group_id)
            return current
        return [g for g in current if g != group_id]

    async def update_user(self, direction: IndexDirection, user_id: str, group_id: str) -> bool:
        """Read, update and write back a single user record.

        A user record that is gone has no back-reference left to remove, so
        detaching from it is skipped and reported by returning False.

        Returns:
            True if the record was written, False if the detach was skipped.

        Raises:
            NotFoundError: If the user record is gone while attaching.
            StoreError: If the record cannot be read or written.
        """
        record = await self.store.get(user_id)
        if record is None:
            if direction is IndexDirection.DETACH:
                return False
            raise NotFoundError(user_id, f"User '{user_id}' is not found")
        if not isinstance(record, dict):
            raise StoreError("get", user_id, f"Record '{user_id}' is not a user document")
        record["groups"] = self.apply(direction, record.get("groups"), group_id)
        await self.store.set(user_id, record)
        return True

    async def propagate(
        self,
        direction: IndexDirection,
        group: Group,
        user_ids: Iterable[str] | None = None,
    ) -> PropagationReport:
        """Attach or detach group to/from every affected user.

        Args:
            direction: Attach or detach.
            group: The group being indexed.
            user_ids: Restrict the fan-out to these users. Defaults to the
                group's admins and invited users.

        Returns:
            PropagationReport listing every updated user.

        Raises:
            IndexPropagationError: If at least one user update failed.
        """
        direction = IndexDirection(direction)
        affected = list(dict.fromkeys(group.members if user_ids is None else user_ids))
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _update(user_id: str) -> bool:
            async with semaphore:
                return await self.update_user(direction, user_id, group.id)

        results = await asyncio.gather(
            *(_update(user_id) for user_id in affected),
            return_exceptions=True,
        )

        succeeded: list[str] = []
        skipped: list[str] = []
        failed: dict[str, BaseException] = {}
        for user_id, result in zip(affected, results):
            if isinstance(result, Exception):
                failed[user_id] = result
            elif isinstance(result, BaseException):
                raise result
            elif result:
                succeeded.append(user_id)
            else:
                skipped.append(user_id)

        if skipped:
            logger.warning(
                "Skipped users without a record",
                direction=direction.value,
                group_id=group.id,
                skipped=skipped,
            )

        if failed:
            logger.error(
                "Index propagation failed",
                direction=direction.value,
                group_id=group.id,
                succeeded=succeeded,
                failed={user_id: str(err) for user_id, err in failed.items()},
            )
            raise IndexPropagationError(direction.value, group.id, succeeded, failed)

        logger.debug(
            "Index propagated",
            direction=direction.value,
            group_id=group.id,
            users=len(succeeded),
        )
        return PropagationReport(
            direction=direction, group_id=group.id, succeeded=succeeded, skipped=skipped
        )
