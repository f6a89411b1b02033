"""Shared fixtures for the form engine tests."""

import pytest

from form_engine.engine.session_engine import FormEngine
from form_engine.forms.base import FormDefinition
from form_engine.forms.demo import demo_contact_form


@pytest.fixture
def contact_form():
    return demo_contact_form()


@pytest.fixture
def address_form():
    return FormDefinition(
        id="address-form",
        name="Address Form",
        schema={
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "address": {
                    "type": "object",
                    "properties": {
                        "city": {"type": "string"},
                        "postcode": {"type": "string", "pattern": "^[0-9]{5}$"},
                    },
                    "required": ["city"],
                },
            },
            "required": ["name", "address"],
        },
    )


@pytest.fixture
def engine(contact_form, address_form):
    engine = FormEngine()
    engine.register_form(contact_form)
    engine.register_form(address_form)
    return engine
