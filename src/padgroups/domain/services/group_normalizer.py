"""Group normalization service.

Turns loosely-typed group parameters into a canonical Group with defaults
applied. Normalization is local and cheap: it never checks that the
referenced admins, users or pads exist, that needs store round-trips and
is left to the EntityExistenceChecker.
"""

from collections.abc import Mapping
from typing import Any

from padgroups.domain.entities.group import Group, Visibility, unique_ids
from padgroups.domain.exceptions import ValidationError
from padgroups.domain.schemas import GroupInput

VISIBILITY_VALUES = frozenset(v.value for v in Visibility)


def _is_full_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, (set, frozenset)):
        # Sets carry no order; sort for a stable stored document
        return sorted(value, key=str)
    return []


class GroupNormalizer:
    """Builds canonical Group entities from raw parameters.

    Rules:
    - ``name`` and ``admin`` must be non-empty strings
    - ``admins`` is ``admin`` unioned with the string entries of ``admins``
    - ``users`` and ``pads`` are de-duplicated copies, empty when absent;
      sets are accepted and sorted
    - ``visibility`` falls back to restricted
    - ``password`` falls back to None, ``readonly`` to False
    """

    @classmethod
    def validate(cls, params: Mapping[str, Any]) -> None:
        """Check mandatory fields.

        Raises:
            ValidationError: If name or admin is missing, not a string or empty.
        """
        if not (_is_full_str(params.get("name")) and _is_full_str(params.get("admin"))):
            raise ValidationError("name and admin must be strings")

    @classmethod
    def normalize(cls, params: Mapping[str, Any] | GroupInput, group_id: str) -> Group:
        """Normalize raw parameters into a Group.

        Args:
            params: Raw group parameters (mapping or GroupInput).
            group_id: Id to give the resulting group.

        Returns:
            Canonical Group entity.

        Raises:
            ValidationError: If mandatory fields are invalid.
        """
        if isinstance(params, GroupInput):
            params = params.to_params()
        if not isinstance(params, Mapping):
            raise ValidationError("group parameters must be a mapping")
        cls.validate(params)

        extra_admins = [a for a in _as_list(params.get("admins")) if isinstance(a, str)]
        admins = unique_ids([params["admin"], *extra_admins])

        visibility = params.get("visibility")
        if isinstance(visibility, Visibility):
            visibility = visibility.value
        if not (isinstance(visibility, str) and visibility in VISIBILITY_VALUES):
            visibility = Visibility.RESTRICTED.value

        password = params.get("password")
        readonly = params.get("readonly")

        return Group(
            id=group_id,
            name=params["name"],
            admins=admins,
            users=unique_ids(_as_list(params.get("users"))),
            pads=unique_ids(_as_list(params.get("pads"))),
            visibility=Visibility(visibility),
            password=password if isinstance(password, str) else None,
            readonly=readonly if isinstance(readonly, bool) else False,
        )


def normalize_group(params: Mapping[str, Any] | GroupInput, group_id: str) -> Group:
    """Module-level shortcut for GroupNormalizer.normalize."""
    return GroupNormalizer.normalize(params, group_id)
