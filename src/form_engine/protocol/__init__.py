"""Protocol module - remote access to the engine.

Contains:
- ToolServer: Named tool operations and the JSON-RPC envelope around them
- serve: Line-delimited JSON stdio transport
"""

from form_engine.protocol.stdio import serve
from form_engine.protocol.tools import Tool, ToolNotFound, ToolServer

__all__ = [
    "Tool",
    "ToolNotFound",
    "ToolServer",
    "serve",
]
