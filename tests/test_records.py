"""Tests for the record adapters used to read ids, text and extra attributes."""

from types import SimpleNamespace

from django.contrib.auth.models import Permission, User

from searchable_options.providers.records import (
    MappingRecord,
    ModelRecord,
    ObjectRecord,
    as_record,
    concrete_fields_by_name,
)


class TestAsRecord:
    def test_model_instance(self) -> None:
        assert isinstance(as_record(User(username="ada")), ModelRecord)

    def test_mapping(self) -> None:
        assert isinstance(as_record({"id": 1}), MappingRecord)

    def test_object(self) -> None:
        assert isinstance(as_record(SimpleNamespace(id=1)), ObjectRecord)

    def test_record_passes_through(self) -> None:
        record = MappingRecord({"id": 1})
        assert as_record(record) is record


class TestModelRecord:
    """Presence follows the model's concrete columns."""

    def test_columns(self) -> None:
        rec = ModelRecord(User(id=3, username="ada"))
        assert rec.has_field("username")
        assert rec.get_field("username") == "ada"
        assert rec.has_field("pk")
        assert rec.get_field("pk") == 3

    def test_non_column_attribute_absent(self) -> None:
        rec = ModelRecord(User(username="ada"))
        assert not rec.has_field("nickname")
        assert not rec.has_field("is_anonymous")

    def test_field_map_shared_per_model(self) -> None:
        first = ModelRecord(User(username="ada"))
        second = ModelRecord(User(username="grace"))
        assert first._fields is second._fields
        assert concrete_fields_by_name(User) is first._fields

    def test_foreign_key_yields_key(self) -> None:
        rec = ModelRecord(Permission(codename="view_tag", content_type_id=12))
        assert rec.has_field("content_type")
        assert rec.has_field("content_type_id")
        assert rec.get_field("content_type") == 12


class TestMappingAndObjectRecord:
    def test_mapping_presence_is_key_presence(self) -> None:
        rec = MappingRecord({"email": None})
        assert rec.has_field("email")
        assert rec.get_field("email") is None
        assert not rec.has_field("name")

    def test_object_attributes(self) -> None:
        rec = ObjectRecord(SimpleNamespace(name="Ada"))
        assert rec.has_field("name")
        assert rec.get_field("name") == "Ada"
        assert not rec.has_field("email")
