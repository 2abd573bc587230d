# src/faultline/adapters/http/middleware.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Trace ID Middleware.

Summary:
    Gives every request a correlation identifier so reported errors can be
    matched to the request that produced them. The id is read from (or echoed
    on) the ``x-trace-id`` header, stored on ``request.state.trace_id``, and put
    in the logging context picked up by the reporter.

Layer:
    adapters/http
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from faultline.infrastructure.logging.logger import set_request_context

TRACE_HEADER = "x-trace-id"

# Typical UUIDs are 36 chars; anything far longer is rejected.
_MAX_TRACE_LEN = 128


def _sanitize_inbound_trace(raw: str | None) -> str | None:
    """Return the trimmed inbound trace id, or ``None`` if empty or oversized."""
    if raw is None:
        return None
    value = raw.strip()
    if not value or len(value) > _MAX_TRACE_LEN:
        return None
    return value


class TraceIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to the request, the log context and the response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        trace_id = _sanitize_inbound_trace(request.headers.get(TRACE_HEADER)) or str(
            uuid.uuid4()
        )
        request.state.trace_id = trace_id
        set_request_context(trace_id=trace_id)

        response = await call_next(request)
        if TRACE_HEADER not in response.headers:
            response.headers[TRACE_HEADER] = trace_id
        return response


__all__ = ["TRACE_HEADER", "TraceIdMiddleware"]
