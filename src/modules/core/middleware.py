"""Request correlation middleware.

Binds a correlation id to structlog's context for the lifetime of each
request so every log line emitted by views, services and repositories
can be joined back to one storefront or admin-console call.
"""

from __future__ import annotations

import re
import time
from contextvars import ContextVar
from typing import Callable

import structlog
import uuid6
from django.http import HttpRequest, HttpResponse

CORRELATION_HEADER = "X-Request-ID"

# Client-supplied ids are echoed into logs and headers; keep them boring
_VALID_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)


def _incoming_id(request: HttpRequest) -> str:
    candidate = request.headers.get(CORRELATION_HEADER, "").strip()
    if candidate and _VALID_ID.match(candidate):
        return candidate
    return str(uuid6.uuid7())


class CorrelationIdMiddleware:
    """Reuse the caller's ``X-Request-ID`` or mint a UUIDv7 one.

    The id is stored in a ContextVar, bound into structlog's context
    vars, and returned on the response header of the same name.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _incoming_id(request)
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        started = time.monotonic()
        response = self.get_response(request)

        logger.info(
            "http.request",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[CORRELATION_HEADER] = cid
        return response
