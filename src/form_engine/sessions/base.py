"""Session state models.

A session is one attempt at filling out a form. It holds the flat,
path-keyed answers, per-field validation state and a question cursor.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field

from form_engine.forms.base import FormDefinition


AnswerValue = Union[str, int, float, bool, None, list[Any], dict[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    """Lifecycle of a session."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class OverallValidity(str, Enum):
    """Outcome of the most recent validation pass."""

    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"


class FieldState(BaseModel):
    """Validation state of a single question."""

    path: str = Field(..., description="Dot path of the field")
    value: Any = Field(default=None, description="Last supplied raw value")
    schema_valid: bool = Field(default=False, description="Passed structural validation")
    messages: list[str] = Field(
        default_factory=list,
        description="Messages from the latest validation pass"
    )
    touched: bool = Field(default=False, description="An answer has been supplied")

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "value": self.value,
            "schemaValid": self.schema_valid,
            "messages": list(self.messages),
            "touched": self.touched,
        }


class FormSession(BaseModel):
    """An in-progress or completed attempt at a form.

    ``question_order`` and ``definition_snapshot`` are fixed at creation.
    ``data`` may hold paths outside ``question_order``; ``fields`` only ever
    tracks the paths in it.
    """

    session_id: str = Field(..., description="Globally unique session id")
    form_id: str = Field(..., description="Id of the form this session fills out")
    user_id: str | None = Field(default=None, description="Optional owner identifier")
    definition_snapshot: FormDefinition = Field(
        ...,
        description="The form definition as registered when the session began"
    )
    data: dict[str, Any] = Field(default_factory=dict, description="Answers by dot path")
    fields: dict[str, FieldState] = Field(default_factory=dict, description="Field state by dot path")
    status: SessionStatus = Field(default=SessionStatus.NOT_STARTED)
    overall_validity: OverallValidity = Field(default=OverallValidity.UNKNOWN)
    question_order: list[str] = Field(default_factory=list, description="Question paths in order")
    current_question_index: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def current_question_path(self) -> str | None:
        if not self.question_order:
            return None
        return self.question_order[self.current_question_index]

    def touch(self) -> None:
        self.updated_at = _utcnow()

    def summary(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "formId": self.form_id,
            "status": self.status.value,
            "overallValidity": self.overall_validity.value,
            "currentQuestionPath": self.current_question_path,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.summary(),
            "userId": self.user_id,
            "questionOrder": list(self.question_order),
            "currentQuestionIndex": self.current_question_index,
            "data": dict(self.data),
            "fields": {path: state.to_dict() for path, state in self.fields.items()},
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
