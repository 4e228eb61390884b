# =============================================================================
# mobile_core/models/post.py
# Post Entity
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

from mobile_core.constants import LocalStorageKeys
from mobile_core.models.records import INT, STR, RecordField, RecordSchema


@dataclass(frozen=True)
class Post:
    """A post as returned by the ``posts`` route."""
    id: int
    title: str = ""
    description: str = ""
    user_id: int = 0

    @classmethod
    def from_map(cls, data: Dict[str, Any]) -> Post:
        """Build from the remote JSON shape (``body``/``userId`` keys)."""
        description = data.get("body")
        if description is None:
            description = data.get("description")
        return cls(
            id=int(data.get("id") or 0),
            title=data.get("title") or "",
            description=description or "",
            user_id=int(data.get("userId") or 0),
        )

    def to_map(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.description,
            "userId": self.user_id,
        }


# Field indices are part of the on-disk format
POST_SCHEMA = RecordSchema(
    entity_type=Post,
    type_tag=1,
    box_key=LocalStorageKeys.POSTS,
    fields=(
        RecordField(0, "id", INT),
        RecordField(1, "title", STR),
        RecordField(2, "description", STR),
        RecordField(3, "user_id", INT),
    ),
)
