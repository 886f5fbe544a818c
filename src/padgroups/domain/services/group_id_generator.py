"""Group ID generator service.

Generates opaque, collision-resistant group ids. Ids look like cuids
(a leading ``c`` followed by 32 lowercase hex characters) so they are
safe to concatenate into store keys.
"""

import re
import uuid


class GroupIdGenerator:
    """Generator for unique group ids."""

    PATTERN = re.compile(r"^c[0-9a-f]{32}$")

    @classmethod
    def generate(cls) -> str:
        """Generate a fresh group id.

        Returns:
            A new id such as ``c3f1c2...``.
        """
        return f"c{uuid.uuid4().hex}"

    @classmethod
    def validate(cls, group_id: str) -> bool:
        """Check that an id has the generated format.

        Caller-supplied ids (imports, restores) do not have to match.
        """
        if not isinstance(group_id, str):
            return False
        return bool(cls.PATTERN.match(group_id))
