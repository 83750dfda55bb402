"""
Logging Middleware for Correlation ID and Request Tracking

Generates or extracts a correlation ID for every request and binds it,
together with request metadata, to the structlog context so every log
line emitted while serving the request carries it.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

from ..utils.logging_context import bind_request_context

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
SESSION_HEADER = "X-Session-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Inject correlation IDs and request context into all logs.

    - Accepts correlation_id from X-Correlation-ID, generates one otherwise
    - Echoes it back in the response headers
    - Logs request start/completion with timing
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Clear any existing context from previous requests
        clear_contextvars()

        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        client_ip = request.client.host if request.client else "unknown"

        bind_contextvars(
            correlation_id=correlation_id,
            request_method=request.method,
            request_path=request.url.path,
            client_ip=client_ip,
        )

        start_time = time.time()

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
        )

        try:
            response = await call_next(request)

            duration_ms = int((time.time() - start_time) * 1000)
            response.headers[CORRELATION_HEADER] = correlation_id

            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)

            logger.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=duration_ms,
                exc_info=True,
            )

            # Re-raise to let FastAPI handle it
            raise

        finally:
            clear_contextvars()


class SessionContextMiddleware(BaseHTTPMiddleware):
    """
    Bind the browser session ID (X-Session-ID header) to the logging context.

    Runs inside LoggingMiddleware, after the correlation ID is bound.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        session_id = request.headers.get(SESSION_HEADER)
        if session_id:
            bind_request_context(session_id=session_id)

        return await call_next(request)
