"""
SalesDesk Backend — Access Log Middleware
==========================================

What:  One log line per request: method, path, status, duration, request id.
Why:   The exception handlers log failures with their cause; this line gives
       the outcome of every request, successful or not, in one place.

Levels follow the status class so alerting can key off severity:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Never logged: request bodies (passwords), the auth header (tokens).
Liveness probes (/health) are skipped to keep the log readable.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from salesdesk.middleware.request_id import request_id_var

logger = logging.getLogger("salesdesk.access")

SKIP_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIP_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The 500 body is rendered further out by ServerErrorMiddleware
            _log_request(request, path, 500, start)
            raise

        _log_request(request, path, response.status_code, start)
        return response


def _log_request(request: Request, path: str, status: int, start: float) -> None:
    duration_ms = (time.perf_counter() - start) * 1000
    client_ip = request.client.host if request.client else "unknown"
    rid = request_id_var.get("")
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
        },
    )
