"""Exceptions raised by the form engine.

Lookup-only queries (``FormRegistry.get``, ``SessionStore.get_session``)
return ``None`` instead of raising; the errors below are for operations that
cannot proceed.
"""


class FormEngineError(Exception):
    """Base class for all form engine errors."""


class FormNotFound(FormEngineError, LookupError):
    """A session was requested against a form id that is not registered."""

    def __init__(self, form_id: str):
        self.form_id = form_id
        super().__init__(f"Form not found: {form_id}")


class SessionNotFound(FormEngineError, LookupError):
    """An operation referenced a session id that does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class FormSchemaError(FormEngineError):
    """A form definition carries a schema that cannot be compiled."""

    def __init__(self, form_id: str, message: str):
        self.form_id = form_id
        super().__init__(f"Invalid schema for form '{form_id}': {message}")
