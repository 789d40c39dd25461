"""
ComfortMap Backend — Request ID Middleware
============================================

What:  Tags every request with a short ID and echoes it in X-Request-ID.
Why:   A failed create only tells the browser "Could not create note"; the
       driver error behind it lives in the server log. The ID joins the two.
How:   A client-supplied X-Request-ID is reused when it looks sane; otherwise
       an 8-character UUID prefix is generated. The ID goes into a ContextVar
       (read by the access log and the exception handlers in main.py) and
       into request.state (read by route handlers).
When:  Outermost middleware, so even 500s from the handlers carry the header.

Example:
    POST /api/notes                      → 500 {"error": "Could not create note"}
    X-Request-ID: 3f9a1c2e
    log: [3f9a1c2e] POST /api/notes: Could not create note | Context: {...}
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ── Context Variable ──────────────────────────────────────────────────────
# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client IDs are echoed into headers and logs; anything else is replaced
_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request ID.

    Behavior:
        1. X-Request-ID present and made of [A-Za-z0-9._-], at most 64 chars → reuse
        2. Missing, empty, or anything else → generate a fresh one
        3. Store it for loggers/handlers, then set it on the response
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get("X-Request-ID", "")
        rid = supplied if _CLIENT_ID_RE.match(supplied) else _new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
