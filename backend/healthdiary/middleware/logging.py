"""
Health Diary Backend — Access Log Middleware
=============================================

What:  One line per API request, attributed to the caller when known.
How:   get_current_user records the authenticated user_id on request.state;
       this middleware reads it back after the handler has run.

Line format:
    GET /api/entries 200 12.4ms [a1b2c3d4] user=7 from 127.0.0.1

Level:
    5xx                              ERROR
    4xx, or slower than the limit    WARNING
    everything else                  INFO

Never logged: request bodies (passwords, diary notes) and the
Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from healthdiary.config import settings
from healthdiary.middleware.request_id import request_id_var

logger = logging.getLogger("healthdiary.access")

# Probes and API docs would drown out diary traffic
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def level_for(status: int, duration_ms: float) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400 or duration_ms > settings.slow_request_ms:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        user_id = getattr(request.state, "user_id", None)
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        logger.log(
            level_for(response.status_code, duration_ms),
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            rid,
            user_id if user_id is not None else "-",
            client_ip,
            extra={
                "request_id": rid,
                "user_id": user_id,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
