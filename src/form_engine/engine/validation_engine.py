"""Validation Engine - schema-driven validation of session answers.

The Validation Engine:
- Rebuilds the nested answer document from a session's flat answers
- Validates it with a jsonschema validator, collecting every violation
- Redistributes violations onto the per-path field state
- Caches compiled validators per form id
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import jsonschema
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing.exceptions import Unresolvable

from form_engine.errors import FormSchemaError
from form_engine.forms.base import FormDefinition
from form_engine.sessions.base import (
    FieldState,
    FormSession,
    OverallValidity,
    SessionStatus,
)
from form_engine.utils.helpers import build_document, path_from_segments, schema_fingerprint

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """A single schema violation."""

    message: str
    path: str = ""
    keyword: str = ""
    schema_path: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "path": self.path,
            "keyword": self.keyword,
            "schemaPath": self.schema_path,
        }


@dataclass
class ValidationResult:
    """Result of validating one answer document."""

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)
    document: dict[str, Any] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return len(self.issues)

    def messages_by_path(self) -> dict[str, list[str]]:
        """Group issue messages by dot path, keeping their order."""
        grouped: dict[str, list[str]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.path, []).append(issue.message)
        return grouped

    def root_messages(self) -> list[str]:
        """Messages reported against the document itself, such as missing required fields."""
        return self.messages_by_path().get("", [])

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errorCount": self.error_count,
            "issues": [i.to_dict() for i in self.issues],
        }


class SchemaValidatorCache:
    """Compiled jsonschema validators, keyed by form id and schema fingerprint.

    The fingerprint keeps sessions holding an older snapshot of a form from
    reusing the validator compiled for its replacement. Only the most
    recently compiled fingerprint is kept per form id.
    """

    def __init__(self, check_formats: bool = True):
        self.check_formats = check_formats
        self._validators: dict[tuple[str, str], Validator] = {}

    def get(self, definition: FormDefinition) -> Validator:
        """Get (compiling if needed) the validator for a definition.

        Raises:
            FormSchemaError: If the definition's schema is malformed
        """
        key = (definition.id, schema_fingerprint(definition.schema_))
        validator = self._validators.get(key)
        if validator is None:
            self.invalidate(definition.id)
            validator = self._compile(definition)
            self._validators[key] = validator
        return validator

    def invalidate(self, form_id: str) -> int:
        """Drop every cached validator for a form id.

        Returns:
            Number of validators dropped
        """
        stale = [key for key in self._validators if key[0] == form_id]
        for key in stale:
            del self._validators[key]
        if stale:
            logger.debug("Invalidated %d cached validator(s) for form '%s'", len(stale), form_id)
        return len(stale)

    def on_register(self, definition: FormDefinition) -> None:
        """Registry listener: a re-registered form needs recompiling."""
        self.invalidate(definition.id)

    def clear(self) -> None:
        self._validators.clear()

    def __len__(self) -> int:
        return len(self._validators)

    def _compile(self, definition: FormDefinition) -> Validator:
        schema = definition.schema_
        cls = validator_for(schema, default=jsonschema.Draft202012Validator)
        try:
            cls.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise FormSchemaError(definition.id, e.message) from e

        format_checker = jsonschema.FormatChecker() if self.check_formats else None
        logger.debug("Compiled %s for form '%s'", cls.__name__, definition.id)
        return cls(schema, format_checker=format_checker)


class ValidationEngine:
    """Engine for validating session answers against their form's schema."""

    def __init__(self, cache: SchemaValidatorCache | None = None):
        self.cache = cache if cache is not None else SchemaValidatorCache()

    def validate_document(
        self,
        definition: FormDefinition,
        document: dict[str, Any],
    ) -> ValidationResult:
        """Validate a nested answer document against a form definition.

        Args:
            definition: Form whose schema applies
            document: Nested answer document

        Returns:
            Validation result holding every violation found

        Raises:
            FormSchemaError: If the schema is malformed or holds a $ref that
                does not resolve
        """
        validator = self.cache.get(definition)
        try:
            issues = [
                ValidationIssue(
                    message=error.message,
                    path=path_from_segments(error.absolute_path),
                    keyword=str(error.validator),
                    schema_path=list(error.absolute_schema_path),
                )
                for error in validator.iter_errors(document)
            ]
        except Unresolvable as e:
            raise FormSchemaError(definition.id, f"unresolvable reference: {e}") from e
        return ValidationResult(valid=not issues, issues=issues, document=document)

    def validate_answers(
        self,
        definition: FormDefinition,
        answers: dict[str, Any],
    ) -> ValidationResult:
        """Validate flat, path-keyed answers against a form definition."""
        return self.validate_document(definition, build_document(answers))

    def run_schema_validation(self, session: FormSession) -> ValidationResult:
        """Validate a session and rewrite its field and overall state.

        Every path in the session's question order gets a fresh field state:
        its messages are replaced by the messages reported for that exact
        path. A valid document marks the session complete; an invalid one
        leaves the status as it was.

        Raises:
            FormSchemaError: If the session's form schema is malformed. The
                session is left untouched.
        """
        result = self.validate_answers(session.definition_snapshot, session.data)
        grouped = result.messages_by_path()

        for path in session.question_order:
            existing = session.fields.get(path) or FieldState(path=path, schema_valid=True)
            messages = grouped.get(path, [])
            session.fields[path] = existing.model_copy(
                update={"schema_valid": not messages, "messages": list(messages)}
            )

        session.overall_validity = OverallValidity.VALID if result.valid else OverallValidity.INVALID
        if result.valid:
            session.status = SessionStatus.COMPLETE
        session.touch()

        logger.debug(
            "Validated session %s: %s (%d issue(s))",
            session.session_id,
            session.overall_validity.value,
            result.error_count,
        )
        return result


_default_engine: ValidationEngine | None = None


def get_default_validation_engine() -> ValidationEngine:
    """Get the process-wide validation engine used by the module-level API."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ValidationEngine()
    return _default_engine


def run_schema_validation(
    session: FormSession,
    engine: ValidationEngine | None = None,
) -> ValidationResult:
    """Validate a session, using the default engine unless one is given."""
    engine = engine if engine is not None else get_default_validation_engine()
    return engine.run_schema_validation(session)
