"""Group entity binding admins, invited users and pads under one policy.

A group is persisted as a single JSON document in the key-value store.
Users referenced by a group carry the group id in their own ``groups``
list; that back-reference is maintained by the index maintainer, not here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def unique_ids(values: list[Any]) -> list[Any]:
    """De-duplicate while keeping first-seen order."""
    # Entries may be unhashable until references have been checked
    result: list[Any] = []
    for value in values:
        if value not in result:
            result.append(value)
    return result


class Visibility(str, Enum):
    """Access mode of a group.

    - restricted: invited users only
    - private: anyone holding the password
    - public: anyone with the link
    """

    RESTRICTED = "restricted"
    PRIVATE = "private"
    PUBLIC = "public"


@dataclass
class Group:
    """Group entity.

    Attributes:
        id: Unique identifier, immutable after creation.
        name: Group name, never empty.
        admins: User ids administering the group; the creating admin comes first.
        users: User ids invited to the group.
        pads: Pad ids attached to the group.
        visibility: Access mode.
        password: Password for private groups, None otherwise.
        readonly: When True, pads linked afterwards are read-only.
    """

    id: str
    name: str
    admins: list[str]
    users: list[str] = field(default_factory=list)
    pads: list[str] = field(default_factory=list)
    visibility: Visibility = Visibility.RESTRICTED
    password: str | None = None
    readonly: bool = False

    def __post_init__(self) -> None:
        """Validate group data after initialization."""
        if not self.id:
            raise ValueError("Group ID is required")
        if not self.name:
            raise ValueError("Group name is required")
        if not self.admins:
            raise ValueError("A group needs at least one admin")

    @property
    def members(self) -> list[str]:
        """Admins and invited users, de-duplicated, admins first."""
        return unique_ids([*self.admins, *self.users])

    @property
    def references(self) -> list[str]:
        """Every foreign key the group points to, de-duplicated."""
        return unique_ids([*self.admins, *self.users, *self.pads])

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the document stored under the group key."""
        return {
            "_id": self.id,
            "name": self.name,
            "admins": list(self.admins),
            "users": list(self.users),
            "pads": list(self.pads),
            "visibility": self.visibility.value,
            "password": self.password,
            "readonly": self.readonly,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        """Rebuild a group from its stored document."""
        return cls(
            id=data["_id"],
            name=data["name"],
            admins=list(data["admins"]),
            users=list(data.get("users") or []),
            pads=list(data.get("pads") or []),
            visibility=Visibility(data.get("visibility", Visibility.RESTRICTED.value)),
            password=data.get("password"),
            readonly=bool(data.get("readonly", False)),
        )
