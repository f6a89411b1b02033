"""Question order derivation.

Walks a JSON Schema property tree depth-first, pre-order: a property's own
path comes before the paths of its children. Only object-typed properties
with named ``properties`` are descended into; arrays and primitives are
leaves. Composition keywords are not followed.
"""

from typing import Any

from form_engine.utils.helpers import join_path


def derive_question_order(schema: dict[str, Any], base_path: str = "") -> list[str]:
    """Derive the ordered list of field paths for a schema.

    Args:
        schema: JSON Schema for the answer document (or a sub-schema)
        base_path: Dot path of ``schema`` within the document

    Returns:
        Dot paths in presentation order

    Example:
        >>> derive_question_order({
        ...     "type": "object",
        ...     "properties": {
        ...         "a": {"type": "string"},
        ...         "b": {"type": "object", "properties": {"c": {"type": "string"}}},
        ...     },
        ... })
        ['a', 'b', 'b.c']
    """
    paths: list[str] = []
    properties = schema.get("properties")
    if schema.get("type") != "object" or not isinstance(properties, dict):
        return paths

    for key, child in properties.items():
        child_path = join_path(base_path, key)
        paths.append(child_path)
        if isinstance(child, dict):
            paths.extend(derive_question_order(child, child_path))
    return paths


def schema_for_path(schema: dict[str, Any], path: str) -> dict[str, Any] | None:
    """Look up the sub-schema describing a dot path.

    Returns:
        The property schema, or None if the path is not declared
    """
    current: Any = schema
    for part in path.split("."):
        properties = current.get("properties") if isinstance(current, dict) else None
        if not isinstance(properties, dict) or part not in properties:
            return None
        current = properties[part]
    return current if isinstance(current, dict) else None


def is_required(schema: dict[str, Any], path: str) -> bool:
    """Whether the last segment of ``path`` is listed as required by its parent."""
    parent_path, _, name = path.rpartition(".")
    parent = schema_for_path(schema, parent_path) if parent_path else schema
    return parent is not None and name in parent.get("required", [])
