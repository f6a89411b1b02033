"""Session Engine - runtime operations on live form sessions.

The Session Engine:
- Applies answers to a session and revalidates it
- Moves the question cursor forwards and backwards
- Wires the registry, session store and validator cache together
"""

import logging
from typing import Any

from form_engine.errors import SessionNotFound
from form_engine.forms.base import FormDefinition
from form_engine.forms.registry import FormRegistry
from form_engine.sessions.base import FieldState, FormSession, SessionStatus
from form_engine.sessions.store import SessionStore
from form_engine.engine.validation_engine import (
    SchemaValidatorCache,
    ValidationEngine,
    ValidationResult,
    run_schema_validation,
)
from form_engine.utils.helpers import flatten_dict

logger = logging.getLogger(__name__)


def _apply_answer(session: FormSession, path: str, value: Any) -> None:
    session.data[path] = value

    # Only question paths carry field state.
    if path in session.question_order:
        existing = session.fields.get(path)
        if existing is None:
            session.fields[path] = FieldState(path=path, value=value, touched=True)
        else:
            session.fields[path] = existing.model_copy(update={"value": value, "touched": True})
    else:
        logger.debug(
            "Session %s: '%s' is not a question of form '%s'",
            session.session_id,
            path,
            session.form_id,
        )

    if session.status == SessionStatus.NOT_STARTED:
        session.status = SessionStatus.IN_PROGRESS


def set_field_value(
    session: FormSession,
    path: str,
    value: Any,
    engine: ValidationEngine | None = None,
) -> ValidationResult:
    """Record an answer and revalidate the whole session.

    Any path is accepted into the answers, including ones outside the
    question order; those take part in validation but get no field state.
    The answer is stored even when the validation pass reports it invalid.

    Args:
        session: Session to update
        path: Dot path of the answered field
        value: Raw answer
        engine: Validation engine (defaults to the process-wide one)

    Returns:
        Result of the validation pass that followed the update
    """
    _apply_answer(session, path, value)
    return run_schema_validation(session, engine)


def set_answers(
    session: FormSession,
    answers: dict[str, Any],
    engine: ValidationEngine | None = None,
) -> ValidationResult:
    """Record several answers at once and validate once at the end.

    Nested mappings are flattened to dot paths, so both
    ``{"address.city": "Oslo"}`` and ``{"address": {"city": "Oslo"}}`` work.
    """
    for path, value in flatten_dict(answers).items():
        _apply_answer(session, path, value)
    return run_schema_validation(session, engine)


def move_to_next(session: FormSession) -> None:
    """Advance the question cursor; stays put on the last question."""
    if session.current_question_index < len(session.question_order) - 1:
        session.current_question_index += 1
        session.touch()


def move_to_previous(session: FormSession) -> None:
    """Step the question cursor back; stays put on the first question."""
    if session.current_question_index > 0:
        session.current_question_index -= 1
        session.touch()


def current_question_path(session: FormSession) -> str | None:
    """Path of the current question, or None for a form without questions."""
    return session.current_question_path


class FormEngine:
    """Facade over the registry, session store and validation engine.

    Session operations take a session id and raise ``SessionNotFound`` for
    unknown ids; ``create_session`` raises ``FormNotFound``.
    """

    def __init__(
        self,
        registry: FormRegistry | None = None,
        store: SessionStore | None = None,
        validation_engine: ValidationEngine | None = None,
    ):
        self.registry = registry if registry is not None else FormRegistry()
        self.store = store if store is not None else SessionStore(self.registry)
        self.validation_engine = validation_engine or ValidationEngine(SchemaValidatorCache())
        self.registry.add_listener(self.validation_engine.cache.on_register)

    # Forms

    def register_form(self, definition: FormDefinition) -> None:
        self.registry.register(definition)

    def list_forms(self) -> list[FormDefinition]:
        return self.registry.list_all()

    def get_form(self, form_id: str) -> FormDefinition | None:
        return self.registry.get(form_id)

    # Sessions

    def create_session(self, form_id: str, user_id: str | None = None) -> FormSession:
        return self.store.create_session(form_id, user_id=user_id)

    def get_session(self, session_id: str) -> FormSession:
        session = self.store.get_session(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def list_sessions(self, user_id: str | None = None) -> list[FormSession]:
        return self.store.list_sessions(user_id=user_id)

    # Answers and validation

    def set_field_value(self, session_id: str, path: str, value: Any) -> FormSession:
        session = self.get_session(session_id)
        set_field_value(session, path, value, self.validation_engine)
        return session

    def set_answers(self, session_id: str, answers: dict[str, Any]) -> FormSession:
        session = self.get_session(session_id)
        set_answers(session, answers, self.validation_engine)
        return session

    def run_schema_validation(self, session_id: str) -> ValidationResult:
        session = self.get_session(session_id)
        return self.validation_engine.run_schema_validation(session)

    # Navigation

    def move_to_next(self, session_id: str) -> FormSession:
        session = self.get_session(session_id)
        move_to_next(session)
        return session

    def move_to_previous(self, session_id: str) -> FormSession:
        session = self.get_session(session_id)
        move_to_previous(session)
        return session

    def current_question_path(self, session_id: str) -> str | None:
        return current_question_path(self.get_session(session_id))
