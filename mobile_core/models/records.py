# =============================================================================
# mobile_core/models/records.py
# Schema-Versioned Cache Records and Declared Field Codecs
# =============================================================================
"""
CacheRecord - the on-disk representation of a domain entity.

Every entity type declares a RecordSchema once:
- a stable integer ``type_tag`` (never reuse or renumber one)
- a stable ``box_key`` naming the box that holds its records
- an ordered tuple of RecordField(index, name, codec)

Each field is encoded by the codec declared for it, so no value is ever
inspected at runtime to pick a serializer. Records are stored as JSON text::

    {"t": 1, "f": {"0": 7, "1": "title", "2": "body", "3": 2}}

Missing or null fields decode to the codec's zero value; unknown field indices
are ignored so older readers tolerate newer records.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, fields as dataclass_fields
from typing import Any, Callable, Dict, Generic, Tuple, Type, TypeVar

E = TypeVar("E")


@dataclass(frozen=True)
class FieldCodec:
    """Encoder/decoder pair for one declared field type."""
    type_name: str
    zero: Any
    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]

    def read(self, raw: Any) -> Any:
        if raw is None:
            return self.zero
        return self.decode(raw)

    def write(self, value: Any) -> Any:
        if value is None:
            return None
        return self.encode(value)


def _decode_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes")
    return bool(raw)


INT = FieldCodec("int", 0, int, int)
FLOAT = FieldCodec("float", 0.0, float, float)
STR = FieldCodec("str", "", str, str)
BOOL = FieldCodec("bool", False, bool, _decode_bool)


@dataclass(frozen=True)
class RecordField:
    index: int
    name: str
    codec: FieldCodec


@dataclass(frozen=True)
class CacheRecord:
    """Tagged storage form of an entity: type tag plus values by field index."""
    type_tag: int
    fields: Dict[int, Any]

    def to_json(self) -> str:
        return json.dumps(
            {"t": self.type_tag, "f": {str(k): v for k, v in self.fields.items()}},
            separators=(",", ":"),
            sort_keys=True,
        )

    @classmethod
    def from_json(cls, text: str) -> CacheRecord:
        """
        Parse the JSON text written by ``to_json``.

        Raises:
            ValueError: If the text is not a tagged record
        """
        data = json.loads(text)
        if not isinstance(data, dict) or "t" not in data:
            raise ValueError("Not a cache record")
        raw_fields = data.get("f") or {}
        if not isinstance(raw_fields, dict):
            raise ValueError("Cache record fields must be an object")
        return cls(
            type_tag=int(data["t"]),
            fields={int(k): v for k, v in raw_fields.items()},
        )


@dataclass(frozen=True)
class RecordSchema(Generic[E]):
    """Declared mapping between an entity type and its CacheRecord form."""
    entity_type: Type[E]
    type_tag: int
    box_key: str
    fields: Tuple[RecordField, ...]

    def __post_init__(self):
        indices = [f.index for f in self.fields]
        if len(set(indices)) != len(indices):
            raise ValueError(f"Duplicate field index in schema for {self.box_key}")
        declared = {f.name for f in dataclass_fields(self.entity_type)}
        missing = [f.name for f in self.fields if f.name not in declared]
        if missing:
            raise ValueError(
                f"Schema for {self.box_key} names unknown fields: {missing}"
            )

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def to_record(self, entity: E) -> CacheRecord:
        return CacheRecord(
            type_tag=self.type_tag,
            fields={f.index: f.codec.write(getattr(entity, f.name)) for f in self.fields},
        )

    def from_record(self, record: CacheRecord) -> E:
        """
        Rebuild the entity.

        Raises:
            ValueError: If the record belongs to another entity type or a field
                cannot be decoded with its declared codec
        """
        if record.type_tag != self.type_tag:
            raise ValueError(
                f"Record tag {record.type_tag} does not match "
                f"{self.entity_type.__name__} (tag {self.type_tag})"
            )
        try:
            values = {
                f.name: f.codec.read(record.fields.get(f.index))
                for f in self.fields
            }
        except TypeError as e:
            raise ValueError(f"Undecodable {self.box_key} record: {e}") from e
        return self.entity_type(**values)

    def encode(self, entity: E) -> str:
        return self.to_record(entity).to_json()

    def decode(self, text: str) -> E:
        return self.from_record(CacheRecord.from_json(text))
