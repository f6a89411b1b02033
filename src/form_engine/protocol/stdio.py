"""Line-delimited JSON transport for the tool server.

Reads one JSON-RPC request per line from an input stream and writes one
response per line, until the input is exhausted.
"""

import json
import logging
from typing import IO

from form_engine.protocol.tools import INTERNAL_ERROR, PARSE_ERROR, ToolServer, error_response

logger = logging.getLogger(__name__)


def serve(server: ToolServer, stdin: IO[str], stdout: IO[str]) -> int:
    """Serve requests until EOF.

    Args:
        server: Tool server handling the requests
        stdin: Stream of newline-delimited JSON requests
        stdout: Stream responses are written to

    Returns:
        Number of requests handled
    """
    handled = 0
    for line in stdin:
        line = line.strip()
        if not line:
            continue

        try:
            request = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Discarding malformed request: %s", e)
            response = error_response(None, PARSE_ERROR, f"Parse error: {e.msg}")
        else:
            handled += 1
            try:
                response = server.handle_request(request)
            except Exception as e:
                logger.exception("Request failed")
                request_id = request.get("id") if isinstance(request, dict) else None
                response = error_response(request_id, INTERNAL_ERROR, f"Internal error: {e}")

        if response is not None:
            stdout.write(json.dumps(response, default=str) + "\n")
            stdout.flush()

    logger.debug("Input closed after %d request(s)", handled)
    return handled
