"""Exceptions raised by group operations.

Every error is scoped to a single operation. Only IndexPropagationError
(and its timeout subclass) means the store may hold a group record and
user back-references that disagree with each other.
"""

from __future__ import annotations


class PadGroupsError(Exception):
    """Base class for all PadGroups errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(PadGroupsError):
    """Raised when mandatory group input is missing or malformed.

    Detected before any I/O, so no state is ever left behind.
    """


class GroupReferenceError(PadGroupsError):
    """Raised when referenced admins, users or pads do not exist."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Some users, admins or pads have not been found: " + ", ".join(self.missing)
        )


class NotFoundError(PadGroupsError):
    """Raised when an operation targets a group that does not exist."""

    def __init__(self, key: str, message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"Key '{key}' is not found")


class StoreError(PadGroupsError):
    """Raised when the key-value store fails a read, write or delete."""

    def __init__(self, operation: str, key: str, message: str | None = None) -> None:
        self.operation = operation
        self.key = key
        super().__init__(message or f"Store {operation} failed for key '{key}'")


class IndexPropagationError(PadGroupsError):
    """Raised when user back-references could not all be updated.

    Attributes:
        direction: "attach" or "detach".
        group_id: The group whose membership was being propagated.
        succeeded: User ids whose back-reference list was written.
        failed: User id to the exception that stopped its update.
        compensated: True when already-attached users were detached again.
    """

    def __init__(
        self,
        direction: str,
        group_id: str,
        succeeded: list[str],
        failed: dict[str, BaseException],
        message: str | None = None,
    ) -> None:
        self.direction = direction
        self.group_id = group_id
        self.succeeded = list(succeeded)
        self.failed = dict(failed)
        self.compensated = False
        super().__init__(
            message
            or (
                f"Index {direction} for group '{group_id}' failed for "
                f"{len(self.failed)} user(s): {', '.join(self.failed)}"
            )
        )


class OperationTimeoutError(IndexPropagationError):
    """Raised when a group operation exceeds its time budget.

    Store writes may already have landed, so this is reported like a
    partial propagation failure with unknown per-user outcomes.
    """

    def __init__(self, operation: str, group_id: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            direction=operation,
            group_id=group_id,
            succeeded=[],
            failed={},
            message=f"Group {operation} for '{group_id}' timed out after {timeout}s",
        )
