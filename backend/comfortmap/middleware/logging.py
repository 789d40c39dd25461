"""
ComfortMap Backend — Access Log Middleware
============================================

What:  One log line per review API call, e.g.

           POST /api/notes 201 12.4ms [3f9a1c2e] from 127.0.0.1
           GET /api/notes 500 3.1ms [77b0e912] from 127.0.0.1

Why:   The API has exactly two operations and both fail the same opaque way
       (a static 500 body). Status, duration and request ID per call are what
       an operator needs to see whether the store is down or a client is
       sending bodies the store rejects.
How:   Wraps call_next, measures with perf_counter, picks the level from the
       status so 5xx lines can be alerted on:
           5xx → ERROR    4xx → WARNING    else → INFO
       The same values are attached as `extra` fields for structured handlers.

Scope:
    ✅ /api/* only
    ❌ /health (probed every few seconds) and static frontend assets
    ❌ Request bodies: review text is user-written free text
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from comfortmap.middleware.request_id import request_id_var

logger = logging.getLogger("comfortmap.access")

API_PREFIX = "/api"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per /api request once its response is ready."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if not path.startswith(API_PREFIX):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
