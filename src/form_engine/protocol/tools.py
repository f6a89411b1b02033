"""Tool Server - exposes the engine as named remote operations.

Each tool takes a JSON object of arguments (camelCase keys) and returns a
JSON object. ``handle_request`` wraps tools in a JSON-RPC 2.0 envelope with
``initialize``, ``tools/list`` and ``tools/call`` methods.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from form_engine import __version__
from form_engine.engine.session_engine import FormEngine
from form_engine.errors import FormEngineError
from form_engine.sessions.base import AnswerValue

logger = logging.getLogger(__name__)

SERVER_NAME = "form-engine"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NoInput(ToolInput):
    pass


class StartSessionInput(ToolInput):
    form_id: str = Field(..., alias="formId")
    user_id: str | None = Field(default=None, alias="userId")


class SessionInput(ToolInput):
    session_id: str = Field(..., alias="sessionId")


class SetFieldValueInput(SessionInput):
    path: str
    value: AnswerValue


@dataclass
class Tool:
    """A named operation callable through the protocol."""

    name: str
    description: str
    input_model: type[ToolInput]
    handler: Callable[[Any], dict[str, Any]]

    def input_schema(self) -> dict[str, Any]:
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        return schema

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


class ToolNotFound(FormEngineError, LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ToolServer:
    """Dispatches tool calls onto a FormEngine."""

    def __init__(self, engine: FormEngine):
        self.engine = engine
        self._tools: dict[str, Tool] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self.register(Tool(
            "list_forms",
            "List all available form definitions.",
            NoInput,
            self._list_forms,
        ))
        self.register(Tool(
            "start_form_session",
            "Start a new form session for a given form id.",
            StartSessionInput,
            self._start_form_session,
        ))
        self.register(Tool(
            "get_form_state",
            "Get full state for a form session, including field-level validity.",
            SessionInput,
            self._get_form_state,
        ))
        self.register(Tool(
            "set_field_value",
            "Set or update the answer for a specific field path within a session.",
            SetFieldValueInput,
            self._set_field_value,
        ))
        self.register(Tool(
            "next_question",
            "Move to the next question in the session.",
            SessionInput,
            self._next_question,
        ))
        self.register(Tool(
            "previous_question",
            "Move to the previous question in the session.",
            SessionInput,
            self._previous_question,
        ))
        self.register(Tool(
            "validate_form",
            "Run JSON Schema validation for the session.",
            SessionInput,
            self._validate_form,
        ))

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def list_tools(self) -> list[dict[str, Any]]:
        return [tool.to_dict() for tool in self._tools.values()]

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a tool and return its raw output.

        Raises:
            ToolNotFound: If no tool has this name
            pydantic.ValidationError: If the arguments do not fit the tool
            FormEngineError: If the engine rejects the operation
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFound(name)
        parsed = tool.input_model.model_validate(arguments or {})
        return tool.handler(parsed)

    def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a tool and wrap its output (or failure) as a text content result."""
        if name not in self._tools:
            raise ToolNotFound(name)
        try:
            output = self.call(name, arguments)
        except (FormEngineError, ValidationError) as e:
            logger.info("Tool %s failed: %s", name, e)
            return {
                "content": [{"type": "text", "text": f"Error: {e}"}],
                "isError": True,
            }
        return {
            "content": [{"type": "text", "text": json.dumps(output, indent=2, default=str)}],
        }

    def handle_request(self, request: Any) -> dict[str, Any] | None:
        """Handle one JSON-RPC request object.

        Returns:
            The response object, or None for notifications
        """
        if (
            not isinstance(request, dict)
            or request.get("jsonrpc") != "2.0"
            or not isinstance(request.get("method"), str)
        ):
            return error_response(None, INVALID_REQUEST, "Invalid request")

        request_id = request.get("id")
        is_notification = "id" not in request
        method = request["method"]
        params = request.get("params") or {}

        try:
            if method == "initialize":
                result = {
                    "protocolVersion": PROTOCOL_VERSION,
                    "serverInfo": {"name": SERVER_NAME, "version": __version__},
                    "capabilities": {"tools": {}},
                }
            elif method == "tools/list":
                result = {"tools": self.list_tools()}
            elif method == "tools/call":
                if not isinstance(params, dict) or not isinstance(params.get("name"), str):
                    return error_response(request_id, INVALID_PARAMS, "tools/call needs a tool name")
                result = self.call_tool(params["name"], params.get("arguments"))
            elif method.startswith("notifications/"):
                return None
            else:
                return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        except ToolNotFound as e:
            return error_response(request_id, METHOD_NOT_FOUND, str(e))

        if is_notification:
            return None
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    # Tool handlers

    def _list_forms(self, _: NoInput) -> dict[str, Any]:
        return {"forms": [f.summary() for f in self.engine.list_forms()]}

    def _start_form_session(self, args: StartSessionInput) -> dict[str, Any]:
        session = self.engine.create_session(args.form_id, user_id=args.user_id)
        return {"session": session.summary()}

    def _get_form_state(self, args: SessionInput) -> dict[str, Any]:
        session = self.engine.get_session(args.session_id)
        return {
            "session": session.summary(),
            "data": dict(session.data),
            "fields": {path: state.to_dict() for path, state in session.fields.items()},
        }

    def _set_field_value(self, args: SetFieldValueInput) -> dict[str, Any]:
        session = self.engine.set_field_value(args.session_id, args.path, args.value)
        field_state = session.fields.get(args.path)
        return {
            "session": session.summary(),
            "field": field_state.to_dict() if field_state is not None else None,
        }

    def _next_question(self, args: SessionInput) -> dict[str, Any]:
        return {"session": self.engine.move_to_next(args.session_id).summary()}

    def _previous_question(self, args: SessionInput) -> dict[str, Any]:
        return {"session": self.engine.move_to_previous(args.session_id).summary()}

    def _validate_form(self, args: SessionInput) -> dict[str, Any]:
        result = self.engine.run_schema_validation(args.session_id)
        session = self.engine.get_session(args.session_id)
        return {
            "session": session.summary(),
            "fields": {path: state.to_dict() for path, state in session.fields.items()},
            "errors": result.root_messages(),
        }


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}
