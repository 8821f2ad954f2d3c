"""
Benefícios API: Request Logging Middleware
===========================================

What:  One log line per HTTP request with method, path, status and duration.
Why:   The only record of who called what, and how long the database took.
How:   Measures from middleware entry to response; picks the log level from
       the status class (5xx ERROR, 4xx WARNING, otherwise INFO).

Example line:
    2024-05-01T12:00:00 [INFO] beneficios.access: GET /api/beneficios/ 200 4.2ms [a1b2c3d4] from 127.0.0.1

Request bodies are never logged (they carry addresses).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("beneficios.access")

# Probed every few seconds by orchestrators; logging them buries real traffic
QUIET_PATHS = {"/health", "/favicon.ico"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
