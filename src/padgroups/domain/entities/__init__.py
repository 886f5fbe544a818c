"""Domain entities for PadGroups.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from padgroups.domain.entities.group import Group, Visibility

__all__ = [
    "Group",
    "Visibility",
]
