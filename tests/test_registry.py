"""
Tests for the type descriptor registry and the JSON descriptor loader.
"""
import json
import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from library_api.core.errors import DescriptorConfigurationError, TypeDescriptorNotFoundError
from library_api.descriptors.loader import load_registry, parse_descriptors
from library_api.descriptors.models import FieldDataType, TypeDescriptor
from library_api.descriptors.registry import TypeDescriptorRegistry


class TestRegistry:
    def test_lookup_is_case_insensitive(self, registry):
        assert registry.get("book") is registry.get("BOOK") is registry.get("Book")
        assert registry.get("article").type_key == "Article"

    @pytest.mark.parametrize("type_key", ["", "   ", None, "magazine"])
    def test_get_missing(self, registry, type_key):
        assert registry.get(type_key) is None

    def test_require_found(self, registry):
        assert registry.require("BOOK").display_name == "Book"

    def test_require_missing(self, registry):
        with pytest.raises(TypeDescriptorNotFoundError) as exc_info:
            registry.require("magazine")
        assert exc_info.value.http_status == 404
        assert exc_info.value.code == "TYPE_DESCRIPTOR_NOT_FOUND"
        assert "magazine" in exc_info.value.message
        assert isinstance(exc_info.value, LookupError)

    @pytest.mark.parametrize("type_key", ["", "  "])
    def test_blank_type_key_rejected(self, type_key):
        with pytest.raises(DescriptorConfigurationError, match="empty typeKey"):
            TypeDescriptorRegistry([TypeDescriptor(type_key=type_key)])

    def test_duplicate_after_case_folding_rejected(self):
        with pytest.raises(DescriptorConfigurationError, match="Duplicate"):
            TypeDescriptorRegistry([TypeDescriptor(type_key="book"), TypeDescriptor(type_key="BOOK")])

    def test_read_only_protocol(self, registry):
        assert len(registry) == 2
        assert "BOOK" in registry
        assert "magazine" not in registry
        assert 42 not in registry
        assert sorted(d.type_key for d in registry) == ["Article", "book"]
        assert sorted(registry.type_keys()) == ["Article", "book"]

    def test_source_list_changes_do_not_leak(self):
        source = [TypeDescriptor(type_key="book")]
        registry = TypeDescriptorRegistry(source)
        source.append(TypeDescriptor(type_key="article"))
        assert registry.get("article") is None

    def test_descriptors_are_frozen(self, registry):
        with pytest.raises(PydanticValidationError):
            registry.get("book").type_key = "other"


class TestParseDescriptors:
    def test_config_section_style(self):
        document = {
            "TypeDescriptors": {
                "book": {
                    "fields": [
                        {"name": "title", "dataType": "String", "isRequired": True, "maxLength": 100},
                        {"name": "pages", "dataType": "int"},
                    ],
                    "indexing": {"fullTextFields": ["title"]},
                    "uiHints": {"titleField": "title"},
                }
            }
        }
        [book] = parse_descriptors(document)
        assert book.type_key == "book"
        assert book.display_name == "book"
        assert book.schema_version == 1
        assert book.field("title").is_required
        assert book.field("title").max_length == 100
        assert book.field("pages").data_type is FieldDataType.int
        assert book.indexing.full_text_fields == ("title",)
        assert book.ui_hints.title_field == "title"
        assert book.policy is None
        assert book.field("missing") is None

    def test_explicit_type_key_wins_over_entry_key(self):
        [d] = parse_descriptors({"first": {"typeKey": "book", "displayName": "Book", "schemaVersion": 3}})
        assert (d.type_key, d.display_name, d.schema_version) == ("book", "Book", 3)

    def test_list_style(self):
        descriptors = parse_descriptors([{"typeKey": "a"}, {"typeKey": "b"}])
        assert [d.type_key for d in descriptors] == ["a", "b"]

    @pytest.mark.parametrize("name,expected", [
        ("String", FieldDataType.string),
        ("dateTime", FieldDataType.datetime),
        ("DECIMAL", FieldDataType.decimal),
        ("bool", FieldDataType.bool),
        ("Geometry", FieldDataType.string),
        (None, FieldDataType.string),
    ])
    def test_data_type_binding(self, name, expected):
        [d] = parse_descriptors({"t": {"fields": [{"name": "f", "dataType": name}]}})
        assert d.fields[0].data_type is expected

    def test_policy_binding(self):
        [d] = parse_descriptors({"t": {"policy": {"allowedReadRoles": ["member"]}}})
        assert d.policy.allowed_read_roles == ("member",)
        assert d.policy.allowed_delete_roles == ()

    def test_non_positive_max_length_rejected(self):
        with pytest.raises(DescriptorConfigurationError):
            parse_descriptors({"t": {"fields": [{"name": "f", "maxLength": 0}]}})

    def test_record_must_be_object(self):
        with pytest.raises(DescriptorConfigurationError):
            parse_descriptors({"t": ["not", "an", "object"]})

    def test_document_must_be_object_or_array(self):
        with pytest.raises(DescriptorConfigurationError):
            parse_descriptors("book")

    def test_bad_pattern_warns_but_loads(self, caplog):
        with caplog.at_level(logging.WARNING, logger="library_api.descriptors.loader"):
            [d] = parse_descriptors({"t": {"fields": [{"name": "code", "pattern": "[invalid("}]}})
        assert d.field("code").pattern == "[invalid("
        assert "invalid pattern" in caplog.text


class TestLoadRegistry:
    def test_bundled_descriptors(self):
        registry = load_registry()
        assert {"book", "article", "profile"} <= {k.lower() for k in registry.type_keys()}
        book = registry.require("book")
        assert book.ui_hints.title_field == "title"
        assert "author" in book.indexing.full_text_fields

    def test_from_file(self, tmp_path):
        path = tmp_path / "descriptors.json"
        path.write_text(json.dumps({"TypeDescriptors": {"Book": {"fields": []}}}), encoding="utf-8")
        assert load_registry(path).get("book").type_key == "Book"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DescriptorConfigurationError, match="not found"):
            load_registry(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DescriptorConfigurationError, match="not valid JSON"):
            load_registry(path)

    def test_duplicate_keys_fail_at_load(self, tmp_path):
        path = tmp_path / "dupes.json"
        path.write_text(json.dumps([{"typeKey": "book"}, {"typeKey": "Book"}]), encoding="utf-8")
        with pytest.raises(DescriptorConfigurationError, match="Duplicate"):
            load_registry(path)
