# =============================================================================
# tests/unit/test_records.py
# Unit Tests for Domain Models and CacheRecord Schemas
# =============================================================================

import json
from dataclasses import dataclass

import pytest

from mobile_core.models import (
    BOOL,
    INT,
    POST_SCHEMA,
    STR,
    USER_SCHEMA,
    CacheRecord,
    Post,
    RecordField,
    RecordSchema,
    User,
)


class TestSchemas:
    """Declared schemas"""

    def test_type_tags_are_stable(self):
        """Tags are part of the on-disk format"""
        assert USER_SCHEMA.type_tag == 0
        assert POST_SCHEMA.type_tag == 1
        assert USER_SCHEMA.box_key == "users"
        assert POST_SCHEMA.box_key == "posts"

    def test_post_record_layout(self, sample_post):
        """Fields are stored under their declared indices"""
        record = POST_SCHEMA.to_record(sample_post)

        assert record.type_tag == 1
        assert record.fields == {0: 1, 1: "a", 2: "b", 3: 2}

    def test_round_trip_is_lossless(self, sample_post, sample_user):
        assert POST_SCHEMA.decode(POST_SCHEMA.encode(sample_post)) == sample_post
        assert USER_SCHEMA.decode(USER_SCHEMA.encode(sample_user)) == sample_user

    def test_round_trip_with_unicode_and_empty_strings(self):
        post = Post(id=7, title="Café ☕", description="", user_id=0)

        assert POST_SCHEMA.decode(POST_SCHEMA.encode(post)) == post

    def test_schema_rejects_unknown_field_names(self):
        with pytest.raises(ValueError):
            RecordSchema(
                entity_type=Post,
                type_tag=5,
                box_key="broken",
                fields=(RecordField(0, "nope", INT),),
            )

    def test_schema_rejects_duplicate_indices(self):
        with pytest.raises(ValueError):
            RecordSchema(
                entity_type=Post,
                type_tag=5,
                box_key="broken",
                fields=(RecordField(0, "id", INT), RecordField(0, "title", STR)),
            )


class TestMissingAndUnknownFields:
    """Decoding tolerates schema drift"""

    def test_missing_fields_default_to_zero_values(self):
        """A record with only the id decodes with zero values elsewhere"""
        post = POST_SCHEMA.decode(json.dumps({"t": 1, "f": {"0": 3}}))

        assert post == Post(id=3, title="", description="", user_id=0)

    def test_null_fields_default_to_zero_values(self):
        post = POST_SCHEMA.decode(json.dumps({"t": 1, "f": {"0": 3, "1": None, "3": None}}))

        assert post.title == ""
        assert post.user_id == 0

    def test_unknown_indices_are_ignored(self):
        """Fields added by a newer version do not break older readers"""
        post = POST_SCHEMA.decode(json.dumps({"t": 1, "f": {"0": 3, "1": "x", "9": "extra"}}))

        assert post == Post(id=3, title="x")

    def test_wrong_tag_is_rejected(self, sample_user):
        with pytest.raises(ValueError):
            POST_SCHEMA.decode(USER_SCHEMA.encode(sample_user))

    def test_non_record_json_is_rejected(self):
        with pytest.raises(ValueError):
            CacheRecord.from_json("[1, 2, 3]")


class TestBoolCodec:
    """Declared boolean codec"""

    @dataclass(frozen=True)
    class Flagged:
        id: int
        enabled: bool = False

    def test_bool_field_round_trip(self):
        schema = RecordSchema(
            entity_type=self.Flagged,
            type_tag=9,
            box_key="flags",
            fields=(RecordField(0, "id", INT), RecordField(1, "enabled", BOOL)),
        )
        entity = self.Flagged(id=1, enabled=True)

        assert schema.decode(schema.encode(entity)) == entity
        assert schema.decode('{"t": 9, "f": {"0": 2}}') == self.Flagged(id=2, enabled=False)

    @pytest.mark.parametrize("raw, expected", [
        (True, True), (False, False), ("true", True), ("0", False), (1, True),
    ])
    def test_bool_read(self, raw, expected):
        assert BOOL.read(raw) is expected


class TestRemoteMapping:
    """JSON shape used by the API"""

    def test_post_from_map_reads_body(self):
        post = Post.from_map({"id": 1, "title": "a", "body": "b", "userId": 2})

        assert post == Post(id=1, title="a", description="b", user_id=2)

    def test_post_from_map_falls_back_to_description(self):
        post = Post.from_map({"id": 1, "description": "b"})

        assert post.description == "b"

    def test_post_to_map(self, sample_post):
        assert sample_post.to_map() == {"id": 1, "title": "a", "body": "b", "userId": 2}

    def test_user_round_trip_through_map(self, sample_user):
        assert User.from_map(sample_user.to_map()) == sample_user

    def test_entities_are_immutable(self, sample_post):
        with pytest.raises(AttributeError):
            sample_post.title = "changed"
