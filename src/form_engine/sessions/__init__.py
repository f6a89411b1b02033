"""Sessions module - per-attempt form state."""

from form_engine.sessions.base import (
    AnswerValue,
    FieldState,
    FormSession,
    OverallValidity,
    SessionStatus,
)
from form_engine.sessions.store import SessionStore

__all__ = [
    "AnswerValue",
    "FieldState",
    "FormSession",
    "OverallValidity",
    "SessionStatus",
    "SessionStore",
]
