"""Pydantic schemas for group input and output.

GroupInput is deliberately permissive: loosely-typed values (a number in
``admins``, a string ``readonly``) must reach the normalizer, which drops
or defaults them instead of rejecting the whole request.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from padgroups.domain.entities.group import Visibility


class GroupInput(BaseModel):
    """Raw group parameters as supplied by a caller."""

    name: Any = Field(None, description="Group name")
    admin: Any = Field(None, description="Id of the creating administrator")
    admins: Any = Field(None, description="Additional administrator ids")
    users: Any = Field(None, description="Invited user ids")
    pads: Any = Field(None, description="Attached pad ids")
    visibility: Any = Field(None, description="restricted, private or public")
    password: Any = Field(None, description="Password for private groups")
    readonly: Any = Field(None, description="Read-only mode for linked pads")
    id: Any = Field(None, alias="_id", description="Existing group id (edit mode)")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_params(self) -> dict[str, Any]:
        """Return the fields that were actually supplied, keyed like raw input."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class GroupResponse(BaseModel):
    """Schema for a persisted group."""

    id: str = Field(..., description="Group ID")
    name: str
    admins: list[str]
    users: list[str] = Field(default_factory=list)
    pads: list[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.RESTRICTED
    password: str | None = None
    readonly: bool = False

    model_config = ConfigDict(from_attributes=True)
