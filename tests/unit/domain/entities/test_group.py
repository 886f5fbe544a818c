"""Unit tests for the Group entity."""

import pytest

from padgroups.domain.entities.group import Group, Visibility
from padgroups.domain.services.group_id_generator import GroupIdGenerator


def test_required_fields():
    with pytest.raises(ValueError, match="Group ID is required"):
        Group(id="", name="Team", admins=["u1"])
    with pytest.raises(ValueError, match="Group name is required"):
        Group(id="g1", name="", admins=["u1"])
    with pytest.raises(ValueError, match="at least one admin"):
        Group(id="g1", name="Team", admins=[])


def test_members_and_references():
    group = Group(id="g1", name="Team", admins=["u1", "u2"], users=["u2", "u3"], pads=["p1", "u1"])

    assert group.members == ["u1", "u2", "u3"]
    assert group.references == ["u1", "u2", "u3", "p1"]


def test_stored_document_shape():
    group = Group(id="g1", name="Team", admins=["u1"], visibility=Visibility.PRIVATE, password="pw")

    assert group.to_dict() == {
        "_id": "g1",
        "name": "Team",
        "admins": ["u1"],
        "users": [],
        "pads": [],
        "visibility": "private",
        "password": "pw",
        "readonly": False,
    }


def test_from_dict_applies_defaults():
    group = Group.from_dict({"_id": "g1", "name": "Team", "admins": ["u1"]})

    assert group.visibility is Visibility.RESTRICTED
    assert group.users == []
    assert group.password is None


def test_generated_ids_are_unique_and_well_formed():
    ids = {GroupIdGenerator.generate() for _ in range(100)}

    assert len(ids) == 100
    assert all(GroupIdGenerator.validate(i) for i in ids)
    assert not GroupIdGenerator.validate("import-42")
    assert not GroupIdGenerator.validate(None)  # type: ignore[arg-type]
