"""Base classes for Forms - the Definition Layer.

A form definition pairs a stable id with a JSON Schema describing the answer
document. Definitions are:
- Immutable once built
- Replaced wholesale on re-registration
- Snapshotted into every session created from them
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


JsonSchema = dict[str, Any]

UNSUPPORTED_KEYWORDS = ("oneOf", "anyOf", "allOf", "$ref", "if", "then", "else")


class FormDefinition(BaseModel):
    """A named, schema-backed form.

    The schema uses the conventional JSON Schema subset: object type, named
    properties, nested objects, ``required``, primitive type constraints and
    string ``format`` hints.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique form identifier")
    name: str = Field(..., description="Human-readable form name")
    schema_: JsonSchema = Field(
        ...,
        alias="schema",
        description="JSON Schema the answer document must satisfy",
    )
    description: str = Field(default="", description="Human-readable description")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata"
    )

    @property
    def title(self) -> str | None:
        return self.schema_.get("title")

    def unsupported_keywords(self) -> list[str]:
        """List composition keywords anywhere in the schema.

        Paths beneath these keywords never become questions.
        """
        found: list[str] = []
        _collect_keywords(self.schema_, found)
        return found

    def summary(self) -> dict[str, Any]:
        """Short description used when listing forms."""
        result: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.title is not None:
            result["title"] = self.title
        description = self.schema_.get("description") or self.description
        if description:
            result["description"] = description
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "schema": self.schema_,
            "description": self.description,
            "metadata": self.metadata,
        }


def _collect_keywords(schema: Any, found: list[str]) -> None:
    if isinstance(schema, dict):
        for key, value in schema.items():
            if key in UNSUPPORTED_KEYWORDS and key not in found:
                found.append(key)
            _collect_keywords(value, found)
    elif isinstance(schema, list):
        for item in schema:
            _collect_keywords(item, found)


class FormBuilder:
    """Fluent builder for creating FormDefinitions."""

    def __init__(self, form_id: str, name: str | None = None):
        self._id = form_id
        self._name = name or form_id
        self._title: str | None = None
        self._description = ""
        self._properties: dict[str, JsonSchema] = {}
        self._required: list[str] = []
        self._metadata: dict[str, Any] = {}

    def title(self, title: str) -> "FormBuilder":
        self._title = title
        return self

    def description(self, description: str) -> "FormBuilder":
        self._description = description
        return self

    def field(
        self,
        name: str,
        field_type: str = "string",
        required: bool = False,
        **constraints: Any,
    ) -> "FormBuilder":
        self._properties[name] = {"type": field_type, **constraints}
        if required:
            self._required.append(name)
        return self

    def section(
        self,
        name: str,
        builder: "FormBuilder",
        required: bool = False,
    ) -> "FormBuilder":
        """Nest another builder's fields as an object-typed property."""
        self._properties[name] = builder.build_schema()
        if required:
            self._required.append(name)
        return self

    def metadata(self, **kwargs: Any) -> "FormBuilder":
        self._metadata.update(kwargs)
        return self

    def build_schema(self) -> JsonSchema:
        schema: JsonSchema = {"type": "object", "properties": dict(self._properties)}
        if self._title:
            schema["title"] = self._title
        if self._required:
            schema["required"] = list(self._required)
        return schema

    def build(self) -> FormDefinition:
        return FormDefinition(
            id=self._id,
            name=self._name,
            schema=self.build_schema(),
            description=self._description,
            metadata=self._metadata,
        )
