"""Domain services for PadGroups.

Services contain the group logic that doesn't fit within the Group entity:
normalization, reference checks and back-reference maintenance.
"""

from padgroups.domain.services.existence_checker import EntityExistenceChecker
from padgroups.domain.services.group_id_generator import GroupIdGenerator
from padgroups.domain.services.group_normalizer import (
    VISIBILITY_VALUES,
    GroupNormalizer,
    normalize_group,
)
from padgroups.domain.services.index_maintainer import (
    IndexDirection,
    PropagationReport,
    SecondaryIndexMaintainer,
)

__all__ = [
    "EntityExistenceChecker",
    "GroupIdGenerator",
    "GroupNormalizer",
    "IndexDirection",
    "PropagationReport",
    "SecondaryIndexMaintainer",
    "VISIBILITY_VALUES",
    "normalize_group",
]
