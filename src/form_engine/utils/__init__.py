"""Utility functions for the form engine."""

from form_engine.utils.helpers import (
    build_document,
    deterministic_hash,
    flatten_dict,
    path_from_segments,
    schema_fingerprint,
)

__all__ = [
    "build_document",
    "deterministic_hash",
    "flatten_dict",
    "path_from_segments",
    "schema_fingerprint",
]
