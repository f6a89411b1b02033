"""Session Store - in-memory session state keyed by session id."""

import logging
import uuid
from typing import Iterator

from form_engine.errors import FormNotFound
from form_engine.forms.ordering import derive_question_order
from form_engine.forms.registry import FormRegistry, get_global_registry
from form_engine.sessions.base import FormSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Creates sessions from registered forms and keeps them in memory.

    Nothing is persisted; sessions live as long as the store.
    """

    def __init__(self, registry: FormRegistry | None = None):
        self.registry = registry if registry is not None else get_global_registry()
        self._sessions: dict[str, FormSession] = {}

    def create_session(self, form_id: str, user_id: str | None = None) -> FormSession:
        """Start a new session against a registered form.

        Args:
            form_id: Id of the registered form
            user_id: Optional owner, used by ``list_sessions`` filtering

        Returns:
            The new session

        Raises:
            FormNotFound: If no form is registered under ``form_id``
        """
        definition = self.registry.get(form_id)
        if definition is None:
            raise FormNotFound(form_id)

        snapshot = definition.model_copy(deep=True)
        session = FormSession(
            session_id=str(uuid.uuid4()),
            form_id=form_id,
            user_id=user_id,
            definition_snapshot=snapshot,
            question_order=derive_question_order(snapshot.schema_),
        )
        self._sessions[session.session_id] = session

        logger.debug(
            "Created session %s for form '%s' with %d question(s)",
            session.session_id,
            form_id,
            len(session.question_order),
        )
        return session

    def get_session(self, session_id: str) -> FormSession | None:
        """Get a session by id, or None if it does not exist."""
        return self._sessions.get(session_id)

    def list_sessions(self, user_id: str | None = None) -> list[FormSession]:
        """List sessions, optionally only those owned by ``user_id``."""
        sessions = list(self._sessions.values())
        if user_id is None:
            return sessions
        return [s for s in sessions if s.user_id == user_id]

    def delete_session(self, session_id: str) -> bool:
        """Remove a session.

        Returns:
            True if the session existed
        """
        return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[FormSession]:
        return iter(list(self._sessions.values()))

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
