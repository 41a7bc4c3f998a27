"""
Docs Wallet Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request: method, path, status, duration,
       request id, caller identity, client address.
How:   Starlette middleware timing the downstream call with perf_counter.
       Log level follows the status class (5xx ERROR, 4xx WARNING, else INFO)
       and the fields are also passed as `extra` for structured handlers.
When:  Runs inside RequestIDMiddleware, so the request id is already set.

Never logged: request bodies, uploaded file contents, Authorization headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from docs_wallet.middleware.request_id import request_id_var

logger = logging.getLogger("docs_wallet.access")

# Probes hit these every few seconds
QUIET_PATHS = {"/health", "/"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request except liveness / health probes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        # Set by the access guard on protected routes
        claim = getattr(request.state, "claim", None)
        caller = claim.email if claim is not None else "-"

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] %s from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            caller,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "caller": caller,
            },
        )

        return response
