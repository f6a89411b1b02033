"""Utility helper functions."""

import hashlib
import json
from typing import Any, Iterable


PATH_SEPARATOR = "."


def deterministic_hash(value: str) -> str:
    """Generate a deterministic hex digest from a string.

    Args:
        value: String to hash

    Returns:
        First 16 hex characters of the SHA-256 digest
    """
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def schema_fingerprint(schema: dict[str, Any]) -> str:
    """Fingerprint a schema by its canonical JSON encoding."""
    return deterministic_hash(json.dumps(schema, sort_keys=True, default=str))


def join_path(parent: str, key: str, separator: str = PATH_SEPARATOR) -> str:
    return f"{parent}{separator}{key}" if parent else key


def path_from_segments(segments: Iterable[Any], separator: str = PATH_SEPARATOR) -> str:
    """Turn instance-path segments into a dot path.

    The document root maps to the empty string.
    """
    return separator.join(str(segment) for segment in segments)


def flatten_dict(
    d: dict[str, Any],
    parent_key: str = "",
    separator: str = PATH_SEPARATOR,
) -> dict[str, Any]:
    """Flatten a nested dictionary.

    Empty nested dictionaries are kept as values so the key is not lost.

    Args:
        d: Dictionary to flatten
        parent_key: Parent key prefix
        separator: Key separator

    Returns:
        Flattened dictionary
    """
    items: list[tuple[str, Any]] = []

    for key, value in d.items():
        new_key = join_path(parent_key, key, separator)

        if isinstance(value, dict) and value:
            items.extend(flatten_dict(value, new_key, separator).items())
        else:
            items.append((new_key, value))

    return dict(items)


def build_document(
    data: dict[str, Any],
    separator: str = PATH_SEPARATOR,
) -> dict[str, Any]:
    """Rebuild a nested document from flat path-keyed answers.

    Paths are applied in mapping order. A non-dict value sitting where an
    intermediate segment needs a container is replaced by a new dict, and a
    later path overwrites whatever an earlier one left at the same key.

    Args:
        data: Mapping of dot paths to raw values
        separator: Key separator

    Returns:
        Nested dictionary
    """
    result: dict[str, Any] = {}

    for key, value in data.items():
        parts = key.split(separator)
        current = result

        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = value

    return result
