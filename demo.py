#!/usr/bin/env python3
"""
Demo script showing basic usage of the Form Engine.

Run this script after installing the package:
    pip install -e .
    python demo.py
"""

from form_engine.forms.base import FormBuilder
from form_engine.forms.demo import demo_contact_form
from form_engine.engine.session_engine import FormEngine
from form_engine.protocol.tools import ToolServer


def demo_form_creation(engine):
    """Demonstrate building and registering forms."""
    print("=" * 60)
    print("1. REGISTERING FORMS")
    print("=" * 60)

    address = (
        FormBuilder("address")
        .field("street", "string")
        .field("city", "string", required=True)
    )
    shipping = (
        FormBuilder("shipping", "Shipping Details")
        .field("recipient", "string", required=True)
        .section("address", address, required=True)
        .field("express", "boolean")
        .build()
    )

    engine.register_form(demo_contact_form())
    engine.register_form(shipping)

    for form in engine.list_forms():
        print(f"Registered form: {form.id} ({form.name})")
    print()


def demo_session(engine):
    """Demonstrate answering and navigating a session."""
    print("=" * 60)
    print("2. FILLING OUT A SESSION")
    print("=" * 60)

    session = engine.create_session("shipping", user_id="demo-user")
    print(f"Question order: {session.question_order}")

    engine.set_field_value(session.session_id, "recipient", "Grace Hopper")
    engine.move_to_next(session.session_id)
    print(f"Current question: {engine.current_question_path(session.session_id)}")
    print(f"Status: {session.status.value}, validity: {session.overall_validity.value}")

    engine.set_field_value(session.session_id, "address.city", "Arlington")
    print(f"Status: {session.status.value}, validity: {session.overall_validity.value}")
    print()


def demo_validation(engine):
    """Demonstrate per-field validation messages."""
    print("=" * 60)
    print("3. VALIDATION MESSAGES")
    print("=" * 60)

    session = engine.create_session("demo-contact")
    engine.set_field_value(session.session_id, "email", "not-an-email")

    for path, state in session.fields.items():
        marker = "ok" if state.schema_valid else "INVALID"
        print(f"  {path}: {marker} {state.messages}")

    result = engine.run_schema_validation(session.session_id)
    print(f"Form-level messages: {result.root_messages()}")
    print()


def demo_tools(engine):
    """Demonstrate the tool-call protocol."""
    print("=" * 60)
    print("4. TOOL CALLS")
    print("=" * 60)

    server = ToolServer(engine)
    started = server.call("start_form_session", {"formId": "demo-contact"})
    session_id = started["session"]["sessionId"]

    server.call("set_field_value", {"sessionId": session_id, "path": "fullName", "value": "Alice"})
    server.call("set_field_value", {"sessionId": session_id, "path": "email", "value": "alice@example.com"})
    state = server.call("get_form_state", {"sessionId": session_id})
    print(f"Session summary: {state['session']}")
    print()


def main():
    engine = FormEngine()
    demo_form_creation(engine)
    demo_session(engine)
    demo_validation(engine)
    demo_tools(engine)


if __name__ == "__main__":
    main()
