"""SQLAlchemy models for PadGroups."""

from padgroups.infrastructure.persistence.models.key_value import KeyValueModel

__all__ = ["KeyValueModel"]
