"""Built-in demo form so a fresh engine has something to fill out."""

from form_engine.forms.base import FormBuilder, FormDefinition


DEMO_FORM_ID = "demo-contact"


def demo_contact_form() -> FormDefinition:
    return (
        FormBuilder(DEMO_FORM_ID, "Demo Contact Form")
        .field("fullName", "string", required=True)
        .field("age", "integer", minimum=0)
        .field("email", "string", required=True, format="email")
        .field("bio", "string")
        .build()
    )
