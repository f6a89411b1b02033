"""Engine module - Runtime layer.

Contains:
- Session Engine: Applies answers and moves the question cursor
- Validation Engine: Enforces schema correctness of session answers
"""

from form_engine.engine.session_engine import (
    FormEngine,
    current_question_path,
    move_to_next,
    move_to_previous,
    set_answers,
    set_field_value,
)
from form_engine.engine.validation_engine import (
    SchemaValidatorCache,
    ValidationEngine,
    ValidationIssue,
    ValidationResult,
    run_schema_validation,
)

__all__ = [
    "FormEngine",
    "SchemaValidatorCache",
    "ValidationEngine",
    "ValidationIssue",
    "ValidationResult",
    "current_question_path",
    "move_to_next",
    "move_to_previous",
    "run_schema_validation",
    "set_answers",
    "set_field_value",
]
