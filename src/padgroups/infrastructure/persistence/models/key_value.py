"""SQLAlchemy model for the store table.

The store is a flat key-value table: group, user and pad records all live
here as JSON documents, distinguished only by their key.
"""

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from padgroups.infrastructure.persistence.database import Base


class KeyValueModel(Base):
    """SQLAlchemy model for the store table.

    Attributes:
        key: Primary key, the full record key (e.g. ``mypads:group:<id>``).
        value: JSON document stored under the key.
    """

    __tablename__ = "store"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Record key",
    )
    value: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
        comment="Record document",
    )

    def __repr__(self) -> str:
        return f"<KeyValue(key={self.key})>"
