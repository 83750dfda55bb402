"""
Logging Context Management Utilities

Helpers for adding and removing context in structured logs.
Context automatically appears in all log statements within the scope.
"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars


def bind_request_context(
    request_id: Optional[str] = None,
    session_id: Optional[str] = None,
    **kwargs
):
    """
    Bind request-related context to all logs.

    Args:
        request_id: Unique request identifier
        session_id: Browser session identifier, if the client sent one
        **kwargs: Additional context key-value pairs

    Example:
        ```python
        bind_request_context(request_id="abc123", session_id="s-42")
        logger.info("browsing catalog")  # Includes request_id, session_id
        ```
    """
    context: Dict[str, Any] = {}

    if request_id:
        context["request_id"] = request_id
    if session_id:
        context["session_id"] = session_id

    context.update(kwargs)
    bind_contextvars(**context)


def bind_browse_context(
    kind: str,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    **kwargs
):
    """
    Bind catalog browsing context (which listing, which page).

    Example:
        ```python
        bind_browse_context(kind="accessory", page=2, per_page=24)
        logger.info("catalog page served")
        ```
    """
    context: Dict[str, Any] = {"catalog_kind": kind}

    if page is not None:
        context["page"] = page
    if per_page is not None:
        context["per_page"] = per_page

    context.update(kwargs)
    bind_contextvars(**context)


def unbind_context(*keys: str):
    """Remove specific keys from logging context."""
    unbind_contextvars(*keys)


@contextmanager
def log_context(**context_vars):
    """
    Context manager for temporary logging context.

    Context is added on enter and removed on exit.

    Example:
        ```python
        with log_context(device_type="SMARTPHONE", nav_level="brands"):
            logger.info("loading brands")  # Includes device_type, nav_level
        ```
    """
    bind_contextvars(**context_vars)

    try:
        yield
    finally:
        unbind_contextvars(*context_vars.keys())


@contextmanager
def log_performance(operation_name: str, logger=None):
    """
    Context manager for logging operation duration.

    Example:
        ```python
        with log_performance("catalog_browse"):
            page = await source.browse(spec)
        # Logs catalog_browse_started / catalog_browse_completed with duration_ms
        ```
    """
    if logger is None:
        logger = structlog.get_logger()

    start_time = time.time()

    logger.info(f"{operation_name}_started", operation=operation_name)

    try:
        yield
    finally:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{operation_name}_completed",
            operation=operation_name,
            duration_ms=duration_ms
        )
