"""
MarkNotes Backend - Request Logging Middleware
==============================================

What:  One access log line per HTTP request.
How:   Measures wall time around call_next and logs method, path, status,
       duration, request id, client IP and, for authenticated requests, the
       caller's user id to the `marknotes.access` logger. The level follows
       the status: 5xx ERROR, 4xx WARNING, else INFO.

Not logged:
    - Request bodies: note content and passwords stay out of logs
    - /health checks and the /api-docs page with its OpenAPI schema
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from marknotes.middleware.request_id import request_id_var

logger = logging.getLogger("marknotes.access")

QUIET_PATHS = {"/health", "/openapi.json"}
QUIET_PREFIXES = ("/api-docs",)


def _status_level(status: int) -> int:
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
        if path in QUIET_PATHS or path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        fields = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": path,
            "status": response.status_code,
            "duration_ms": elapsed_ms,
            "client_ip": request.client.host if request.client else "unknown",
            # Set by get_current_user; anonymous routes leave it unset
            "user_id": getattr(request.state, "user_id", None) or "-",
        }
        logger.log(
            _status_level(response.status_code),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] user=%(user_id)s from %(client_ip)s",
            fields,
            extra=fields,
        )
        return response
