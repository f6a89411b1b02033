"""Tests for the Forms module."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from form_engine.forms.base import FormBuilder, FormDefinition
from form_engine.forms.loader import FormLoader, load_forms
from form_engine.forms.ordering import derive_question_order, is_required, schema_for_path
from form_engine.forms.registry import FormRegistry


FORMS_DIR = Path(__file__).parent.parent / "examples" / "forms"


class TestFormDefinition:
    """Tests for FormDefinition."""

    def test_create_definition(self):
        form = FormDefinition(id="f1", name="Form One", schema={"type": "object"})

        assert form.id == "f1"
        assert form.name == "Form One"
        assert form.schema_ == {"type": "object"}

    def test_requires_id(self):
        with pytest.raises(ValidationError):
            FormDefinition(id="", name="No id", schema={})

    def test_is_frozen(self, contact_form):
        with pytest.raises(ValidationError):
            contact_form.name = "Renamed"

    def test_summary_reads_schema_title_and_description(self):
        form = FormDefinition(
            id="f1",
            name="Form One",
            schema={"type": "object", "title": "The Title", "description": "About it"},
        )

        assert form.summary() == {
            "id": "f1",
            "name": "Form One",
            "title": "The Title",
            "description": "About it",
        }

    def test_summary_omits_missing_title(self, contact_form):
        assert contact_form.summary() == {"id": "demo-contact", "name": "Demo Contact Form"}

    def test_to_dict_uses_schema_key(self, contact_form):
        data = contact_form.to_dict()

        assert data["schema"]["required"] == ["fullName", "email"]
        assert "schema_" not in data

    def test_unsupported_keywords(self):
        form = FormDefinition(
            id="f1",
            name="Form One",
            schema={
                "type": "object",
                "properties": {
                    "pet": {"oneOf": [{"type": "string"}, {"type": "integer"}]},
                    "owner": {"$ref": "#/$defs/person"},
                },
            },
        )

        assert form.unsupported_keywords() == ["oneOf", "$ref"]


class TestFormBuilder:
    """Tests for FormBuilder."""

    def test_build_flat_form(self, contact_form):
        assert contact_form.schema_ == {
            "type": "object",
            "properties": {
                "fullName": {"type": "string"},
                "age": {"type": "integer", "minimum": 0},
                "email": {"type": "string", "format": "email"},
                "bio": {"type": "string"},
            },
            "required": ["fullName", "email"],
        }

    def test_build_with_section(self):
        address = FormBuilder("address").field("city", required=True)
        form = (
            FormBuilder("order", "Order")
            .title("Order form")
            .description("Place an order")
            .section("address", address, required=True)
            .metadata(owner="sales")
            .build()
        )

        assert form.schema_["title"] == "Order form"
        assert form.schema_["properties"]["address"]["required"] == ["city"]
        assert form.schema_["required"] == ["address"]
        assert form.description == "Place an order"
        assert form.metadata == {"owner": "sales"}


class TestQuestionOrder:
    """Tests for derive_question_order."""

    def test_nested_pre_order(self):
        schema = {
            "type": "object",
            "properties": {
                "a": {"type": "string"},
                "b": {"type": "object", "properties": {"c": {"type": "string"}}},
            },
        }

        assert derive_question_order(schema) == ["a", "b", "b.c"]

    def test_deeply_nested(self):
        schema = {
            "type": "object",
            "properties": {
                "x": {
                    "type": "object",
                    "properties": {
                        "y": {
                            "type": "object",
                            "properties": {"z": {"type": "number"}},
                        },
                        "w": {"type": "boolean"},
                    },
                },
                "v": {"type": "string"},
            },
        }

        assert derive_question_order(schema) == ["x", "x.y", "x.y.z", "x.w", "v"]

    def test_arrays_are_leaves(self):
        schema = {
            "type": "object",
            "properties": {
                "tags": {
                    "type": "array",
                    "items": {"type": "object", "properties": {"label": {"type": "string"}}},
                },
            },
        }

        assert derive_question_order(schema) == ["tags"]

    def test_object_without_properties_is_leaf(self):
        schema = {"type": "object", "properties": {"extra": {"type": "object"}}}

        assert derive_question_order(schema) == ["extra"]

    def test_composition_not_followed(self):
        schema = {
            "type": "object",
            "properties": {
                "contact": {
                    "oneOf": [
                        {"type": "object", "properties": {"phone": {"type": "string"}}},
                    ],
                },
            },
        }

        assert derive_question_order(schema) == ["contact"]

    @pytest.mark.parametrize("schema", [
        {},
        {"type": "string"},
        {"type": "object"},
        {"properties": {"a": {"type": "string"}}},
    ])
    def test_no_questions(self, schema):
        assert derive_question_order(schema) == []

    def test_deterministic(self, contact_form):
        first = derive_question_order(contact_form.schema_)
        second = derive_question_order(contact_form.schema_)

        assert first == second == ["fullName", "age", "email", "bio"]

    def test_base_path(self):
        schema = {"type": "object", "properties": {"c": {"type": "string"}}}

        assert derive_question_order(schema, "b") == ["b.c"]


class TestSchemaLookup:
    """Tests for schema_for_path and is_required."""

    def test_schema_for_path(self, address_form):
        schema = address_form.schema_

        assert schema_for_path(schema, "address.postcode")["pattern"] == "^[0-9]{5}$"
        assert schema_for_path(schema, "address")["type"] == "object"
        assert schema_for_path(schema, "address.country") is None
        assert schema_for_path(schema, "name.first") is None

    def test_is_required(self, address_form):
        schema = address_form.schema_

        assert is_required(schema, "name")
        assert is_required(schema, "address.city")
        assert not is_required(schema, "address.postcode")
        assert not is_required(schema, "missing.city")


class TestFormRegistry:
    """Tests for FormRegistry."""

    def test_register_and_get(self, contact_form):
        registry = FormRegistry()
        registry.register(contact_form)

        assert registry.get("demo-contact") is contact_form
        assert "demo-contact" in registry
        assert len(registry) == 1

    def test_get_missing_returns_none(self):
        assert FormRegistry().get("nope") is None

    def test_reregister_replaces(self, contact_form):
        registry = FormRegistry()
        registry.register(contact_form)
        replacement = FormDefinition(id="demo-contact", name="Replaced", schema={"type": "object"})
        registry.register(replacement)

        assert len(registry) == 1
        assert registry.get("demo-contact").name == "Replaced"

    def test_list_all(self, contact_form, address_form):
        registry = FormRegistry()
        registry.register(contact_form)
        registry.register(address_form)

        assert {f.id for f in registry.list_all()} == {"demo-contact", "address-form"}
        assert sorted(registry.list_ids()) == ["address-form", "demo-contact"]
        assert {f.id for f in registry} == {"demo-contact", "address-form"}

    def test_unregister(self, contact_form):
        registry = FormRegistry()
        registry.register(contact_form)

        assert registry.unregister("demo-contact")
        assert not registry.unregister("demo-contact")
        assert len(registry) == 0

    def test_clear(self, contact_form):
        registry = FormRegistry()
        registry.register(contact_form)
        registry.clear()

        assert len(registry) == 0

    def test_listener_called_on_register(self, contact_form):
        registry = FormRegistry()
        seen = []
        registry.add_listener(lambda definition: seen.append(definition.id))

        registry.register(contact_form)
        registry.register(contact_form)

        assert seen == ["demo-contact", "demo-contact"]

    def test_warns_on_unsupported_keywords(self, caplog):
        registry = FormRegistry()
        form = FormDefinition(
            id="composed",
            name="Composed",
            schema={"type": "object", "anyOf": [{"required": ["a"]}]},
        )

        with caplog.at_level(logging.WARNING, logger="form_engine.forms.registry"):
            registry.register(form)

        assert "composed" in registry
        assert "anyOf" in caplog.text


class TestFormLoader:
    """Tests for FormLoader."""

    def test_load_yaml_file(self):
        registry = FormRegistry()
        forms = FormLoader(registry).load_file(FORMS_DIR / "job_application.yaml")

        assert [f.id for f in forms] == ["job-application"]
        assert registry.get("job-application").name == "Job Application"
        assert forms[0].metadata["source_file"].endswith("job_application.yaml")

    def test_load_json_forms_list(self):
        registry = FormRegistry()
        forms = FormLoader(registry).load_file(FORMS_DIR / "feedback.json")

        assert [f.id for f in forms] == ["event-feedback"]
        assert forms[0].summary()["description"] == "Short survey sent after an event"

    def test_load_directory(self):
        registry = FormRegistry()
        forms = load_forms(FORMS_DIR, registry)

        assert {f.id for f in forms} == {"job-application", "event-feedback"}
        assert len(registry) == 2

    def test_load_from_string(self):
        registry = FormRegistry()
        content = """
forms:
  - id: one
    schema: {type: object, properties: {a: {type: string}}}
  - id: two
    name: Second
    schema: {type: object}
"""
        forms = FormLoader(registry).load_from_string(content)

        assert [f.id for f in forms] == ["one", "two"]
        assert forms[0].name == "one"
        assert forms[1].name == "Second"

    def test_missing_schema_rejected(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"id": "broken", "name": "Broken"}))

        with pytest.raises(ValueError, match="'id' and 'schema'"):
            FormLoader(FormRegistry()).load_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FormLoader(FormRegistry()).load_file(tmp_path / "absent.yaml")

    def test_not_a_directory(self, tmp_path):
        path = tmp_path / "file.yaml"
        path.write_text("id: x\nschema: {}\n")

        with pytest.raises(NotADirectoryError):
            FormLoader(FormRegistry()).load_directory(path)

    def test_empty_file_loads_nothing(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert FormLoader(FormRegistry()).load_file(path) == []
