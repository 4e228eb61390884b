"""Domain entities and their cache record schemas."""

from mobile_core.models.records import (
    BOOL,
    FLOAT,
    INT,
    STR,
    CacheRecord,
    FieldCodec,
    RecordField,
    RecordSchema,
)
from mobile_core.models.post import Post, POST_SCHEMA
from mobile_core.models.user import User, USER_SCHEMA

# Every registered entity type, in type-tag order
DEFAULT_SCHEMAS = (USER_SCHEMA, POST_SCHEMA)

__all__ = [
    "BOOL",
    "FLOAT",
    "INT",
    "STR",
    "CacheRecord",
    "FieldCodec",
    "RecordField",
    "RecordSchema",
    "Post",
    "POST_SCHEMA",
    "User",
    "USER_SCHEMA",
    "DEFAULT_SCHEMAS",
]
