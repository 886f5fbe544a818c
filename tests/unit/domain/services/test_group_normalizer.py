"""Unit tests for GroupNormalizer."""

import pytest

from padgroups.domain.entities.group import Group, Visibility
from padgroups.domain.exceptions import ValidationError
from padgroups.domain.schemas import GroupInput
from padgroups.domain.services.group_normalizer import GroupNormalizer, normalize_group


class TestMandatoryFields:
    """name and admin must be non-empty strings."""

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"name": "Team"},
            {"admin": "u1"},
            {"name": "", "admin": "u1"},
            {"name": "Team", "admin": ""},
            {"name": 12, "admin": "u1"},
            {"name": "Team", "admin": ["u1"]},
            {"name": None, "admin": None},
        ],
    )
    def test_invalid_mandatory_fields(self, params):
        with pytest.raises(ValidationError, match="name and admin must be strings"):
            GroupNormalizer.normalize(params, "g1")

    def test_non_mapping_input(self):
        with pytest.raises(ValidationError):
            GroupNormalizer.normalize(["Team", "u1"], "g1")  # type: ignore[arg-type]


def test_defaults_applied():
    """A minimal group gets every default."""
    group = normalize_group({"name": "Team A", "admin": "u1"}, "g1")

    assert group == Group(
        id="g1",
        name="Team A",
        admins=["u1"],
        users=[],
        pads=[],
        visibility=Visibility.RESTRICTED,
        password=None,
        readonly=False,
    )


def test_admins_drop_non_strings_and_duplicates():
    group = normalize_group(
        {"name": "Team B", "admin": "u1", "admins": ["u2", 42, "u1", None, "u2"]},
        "g1",
    )

    assert group.admins == ["u1", "u2"]


def test_admins_not_a_list_is_ignored():
    group = normalize_group({"name": "Team", "admin": "u1", "admins": "u2"}, "g1")

    assert group.admins == ["u1"]


def test_users_and_pads_deduplicated():
    group = normalize_group(
        {"name": "Team", "admin": "u1", "users": ["u2", "u3", "u2"], "pads": ("p1", "p1")},
        "g1",
    )

    assert group.users == ["u2", "u3"]
    assert group.pads == ["p1"]


def test_users_pads_and_admins_accept_sets():
    group = normalize_group(
        {
            "name": "Team",
            "admin": "u1",
            "admins": frozenset({"u2"}),
            "users": {"u3", "u2"},
            "pads": frozenset({"p1"}),
        },
        "g1",
    )

    assert group.admins == ["u1", "u2"]
    assert group.users == ["u2", "u3"]
    assert group.pads == ["p1"]


def test_users_and_pads_non_sequence_become_empty():
    group = normalize_group({"name": "Team", "admin": "u1", "users": None, "pads": "p1"}, "g1")

    assert group.users == []
    assert group.pads == []


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        ("restricted", Visibility.RESTRICTED),
        ("private", Visibility.PRIVATE),
        ("public", Visibility.PUBLIC),
        (Visibility.PUBLIC, Visibility.PUBLIC),
        ("PUBLIC", Visibility.RESTRICTED),
        ("secret", Visibility.RESTRICTED),
        (1, Visibility.RESTRICTED),
        (None, Visibility.RESTRICTED),
    ],
)
def test_visibility(given, expected):
    group = normalize_group({"name": "Team", "admin": "u1", "visibility": given}, "g1")

    assert group.visibility is expected


def test_password_and_readonly_type_guarded():
    kept = normalize_group(
        {"name": "Team", "admin": "u1", "password": "secret", "readonly": True}, "g1"
    )
    dropped = normalize_group(
        {"name": "Team", "admin": "u1", "password": 1234, "readonly": "yes"}, "g1"
    )

    assert kept.password == "secret"
    assert kept.readonly is True
    assert dropped.password is None
    assert dropped.readonly is False


def test_private_group_with_password():
    group = normalize_group(
        {
            "name": "Team B",
            "admin": "u1",
            "admins": ["u2", 42],
            "visibility": "private",
            "password": "secret",
        },
        "g1",
    )

    assert group.admins == ["u1", "u2"]
    assert group.visibility is Visibility.PRIVATE
    assert group.password == "secret"


def test_normalization_is_idempotent():
    """Feeding a normalized group's fields back yields the same group."""
    first = normalize_group(
        {
            "name": "Team",
            "admin": "u1",
            "admins": ["u2", 3],
            "users": ["u3", "u3"],
            "pads": ["p1"],
            "visibility": "public",
            "readonly": True,
        },
        "g1",
    )
    data = first.to_dict()
    data["admin"] = first.admins[0]

    assert normalize_group(data, first.id) == first


def test_does_not_mutate_input():
    params = {"name": "Team", "admin": "u1", "admins": ["u2", 42]}

    normalize_group(params, "g1")

    assert params["admins"] == ["u2", 42]


def test_accepts_group_input_schema():
    payload = GroupInput.model_validate(
        {"name": "Team", "admin": "u1", "admins": ["u2", 5], "readonly": "no"}
    )

    group = GroupNormalizer.normalize(payload, "g1")

    assert group.admins == ["u1", "u2"]
    assert group.readonly is False
