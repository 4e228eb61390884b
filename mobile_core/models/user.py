# =============================================================================
# mobile_core/models/user.py
# User Entity
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

from mobile_core.constants import LocalStorageKeys
from mobile_core.models.records import INT, STR, RecordField, RecordSchema


@dataclass(frozen=True)
class User:
    """A user as returned by the ``users`` route."""
    id: int
    name: str = ""
    username: str = ""
    email: str = ""

    @classmethod
    def from_map(cls, data: Dict[str, Any]) -> User:
        return cls(
            id=int(data.get("id") or 0),
            name=data.get("name") or "",
            username=data.get("username") or "",
            email=data.get("email") or "",
        )

    def to_map(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
        }


USER_SCHEMA = RecordSchema(
    entity_type=User,
    type_tag=0,
    box_key=LocalStorageKeys.USERS,
    fields=(
        RecordField(0, "id", INT),
        RecordField(1, "name", STR),
        RecordField(2, "username", STR),
        RecordField(3, "email", STR),
    ),
)
