"""Tests for the Sessions module."""

import uuid

import pytest

from form_engine.errors import FormNotFound
from form_engine.forms.base import FormDefinition
from form_engine.forms.registry import FormRegistry
from form_engine.sessions.base import (
    FieldState,
    OverallValidity,
    SessionStatus,
)
from form_engine.sessions.store import SessionStore


@pytest.fixture
def registry(contact_form, address_form):
    registry = FormRegistry()
    registry.register(contact_form)
    registry.register(address_form)
    return registry


@pytest.fixture
def store(registry):
    return SessionStore(registry)


class TestCreateSession:
    """Tests for SessionStore.create_session."""

    def test_initial_state(self, store):
        session = store.create_session("demo-contact")

        assert uuid.UUID(session.session_id)
        assert session.form_id == "demo-contact"
        assert session.data == {}
        assert session.fields == {}
        assert session.status == SessionStatus.NOT_STARTED
        assert session.overall_validity == OverallValidity.UNKNOWN
        assert session.question_order == ["fullName", "age", "email", "bio"]
        assert session.current_question_index == 0
        assert session.current_question_path == "fullName"

    def test_nested_question_order(self, store):
        session = store.create_session("address-form")

        assert session.question_order == ["name", "address", "address.city", "address.postcode"]

    def test_unique_ids(self, store):
        ids = {store.create_session("demo-contact").session_id for _ in range(20)}

        assert len(ids) == 20

    def test_unknown_form(self, store):
        with pytest.raises(FormNotFound) as exc_info:
            store.create_session("unknown-form-id")

        assert exc_info.value.form_id == "unknown-form-id"
        assert isinstance(exc_info.value, LookupError)
        assert len(store) == 0

    def test_snapshot_isolated_from_reregistration(self, store, registry):
        session = store.create_session("demo-contact")
        registry.register(FormDefinition(
            id="demo-contact",
            name="Changed",
            schema={"type": "object", "properties": {"only": {"type": "string"}}},
        ))

        assert session.definition_snapshot.name == "Demo Contact Form"
        assert session.question_order == ["fullName", "age", "email", "bio"]
        assert store.create_session("demo-contact").question_order == ["only"]

    def test_snapshot_is_a_copy(self, store, registry):
        session = store.create_session("demo-contact")

        assert session.definition_snapshot == registry.get("demo-contact")
        assert session.definition_snapshot is not registry.get("demo-contact")
        assert session.definition_snapshot.schema_ is not registry.get("demo-contact").schema_

    def test_empty_form(self, registry, store):
        registry.register(FormDefinition(id="empty", name="Empty", schema={"type": "object"}))
        session = store.create_session("empty")

        assert session.question_order == []
        assert session.current_question_path is None


class TestSessionLookup:
    """Tests for getting and listing sessions."""

    def test_get_session(self, store):
        session = store.create_session("demo-contact")

        assert store.get_session(session.session_id) is session
        assert session.session_id in store

    def test_get_unknown_returns_none(self, store):
        assert store.get_session("unknown-session-id") is None

    def test_list_sessions(self, store):
        first = store.create_session("demo-contact", user_id="alice")
        second = store.create_session("address-form", user_id="bob")
        third = store.create_session("demo-contact")

        assert {s.session_id for s in store.list_sessions()} == {
            first.session_id,
            second.session_id,
            third.session_id,
        }
        assert [s.session_id for s in store.list_sessions(user_id="alice")] == [first.session_id]
        assert store.list_sessions(user_id="carol") == []

    def test_user_filter_is_exact(self, store):
        store.create_session("demo-contact", user_id="alice")

        assert store.list_sessions(user_id="Alice") == []
        assert store.list_sessions(user_id="ali") == []

    def test_delete_session(self, store):
        session = store.create_session("demo-contact")

        assert store.delete_session(session.session_id)
        assert not store.delete_session(session.session_id)
        assert store.get_session(session.session_id) is None

    def test_iter_and_clear(self, store):
        store.create_session("demo-contact")
        store.create_session("demo-contact")

        assert len(list(store)) == 2
        store.clear()
        assert len(store) == 0


class TestSessionSerialization:
    """Tests for the wire representation of sessions."""

    def test_summary(self, store):
        session = store.create_session("demo-contact")

        assert session.summary() == {
            "sessionId": session.session_id,
            "formId": "demo-contact",
            "status": "not-started",
            "overallValidity": "unknown",
            "currentQuestionPath": "fullName",
        }

    def test_to_dict(self, store):
        session = store.create_session("demo-contact", user_id="alice")
        session.data["fullName"] = "Alice"
        session.fields["fullName"] = FieldState(path="fullName", value="Alice", touched=True)

        data = session.to_dict()

        assert data["userId"] == "alice"
        assert data["questionOrder"] == ["fullName", "age", "email", "bio"]
        assert data["data"] == {"fullName": "Alice"}
        assert data["fields"]["fullName"] == {
            "path": "fullName",
            "value": "Alice",
            "schemaValid": False,
            "messages": [],
            "touched": True,
        }
