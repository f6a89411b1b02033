"""
Form Engine - schema-validated, multi-step form sessions.

Register JSON Schema backed forms, open sessions against them, answer
questions by field path, move between questions and get per-field and
overall validity back after every answer.
"""

__version__ = "0.1.0"

from form_engine.errors import FormEngineError, FormNotFound, FormSchemaError, SessionNotFound
from form_engine.forms.base import FormBuilder, FormDefinition
from form_engine.forms.ordering import derive_question_order
from form_engine.forms.registry import FormRegistry
from form_engine.sessions.base import FieldState, FormSession, OverallValidity, SessionStatus
from form_engine.sessions.store import SessionStore
from form_engine.engine.session_engine import (
    FormEngine,
    current_question_path,
    move_to_next,
    move_to_previous,
    set_field_value,
)
from form_engine.engine.validation_engine import ValidationEngine, run_schema_validation

__all__ = [
    "FieldState",
    "FormBuilder",
    "FormDefinition",
    "FormEngine",
    "FormEngineError",
    "FormNotFound",
    "FormRegistry",
    "FormSchemaError",
    "FormSession",
    "OverallValidity",
    "SessionNotFound",
    "SessionStatus",
    "SessionStore",
    "ValidationEngine",
    "current_question_path",
    "derive_question_order",
    "move_to_next",
    "move_to_previous",
    "run_schema_validation",
    "set_field_value",
]
