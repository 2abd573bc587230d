# src/faultline/adapters/http/errors.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""FastAPI glue for classified errors.

Summary:
    Serializes ``ClassifiedError``/``NormalizedError`` (and any unhandled
    exception) into the standard error envelope. Classification and reporting
    stay in the application layer; this module only renders.

Layer:
    adapters/http
"""
from __future__ import annotations

import json
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from faultline.application.schemas.dto.errors import PublicErrorView
from faultline.application.services.notifier import Notifier
from faultline.application.services.reporter import Reporter
from faultline.application.services.user_messages import resolve_user_message
from faultline.config.settings import Settings, get_settings
from faultline.domain.exceptions.base import ClassifiedError, NormalizedError


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "trace_id", None)


def _json_safe(details: dict[str, Any]) -> dict[str, Any]:
    """Round-trip ``details`` through JSON, rendering foreign objects with ``repr``."""
    return json.loads(json.dumps(details, default=repr))


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    user_message: str | None = None,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if user_message is not None:
        err["user_message"] = user_message
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


def _render(view: PublicErrorView, request: Request, settings: Settings) -> Response:
    payload = error_envelope(
        code=view.error_code,
        http_status=view.status_code,
        message=view.message,
        user_message=resolve_user_message(view.error_code),
        details=_json_safe(view.details) if settings.expose_error_details else None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=view.status_code, content=payload)


def _reporter(settings: Settings) -> Reporter:
    return Reporter(metrics_enabled=settings.metrics_enabled)


async def handle_classified_error(request: Request, exc: Exception) -> Response:
    """Render a deliberately raised or already-normalized error.

    A ``NormalizedError`` was reported by the wrapper that raised it; a raw
    ``ClassifiedError`` is reported here, with the request path as context.
    """
    settings = get_settings()
    if isinstance(exc, ClassifiedError):
        view = _reporter(settings).report(exc, request.url.path)
    elif isinstance(exc, NormalizedError):
        view = PublicErrorView.from_error(exc)
    else:
        return await handle_unhandled_exception(request, exc)
    return _render(view, request, settings)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    """Classify, report and render any other exception."""
    settings = get_settings()
    result = Notifier(_reporter(settings)).notify(exc, request.url.path)
    return _render(result, request, settings)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the classified-error handlers to ``app``."""
    app.add_exception_handler(ClassifiedError, handle_classified_error)
    app.add_exception_handler(NormalizedError, handle_classified_error)
    app.add_exception_handler(Exception, handle_unhandled_exception)


__all__ = [
    "error_envelope",
    "handle_classified_error",
    "handle_unhandled_exception",
    "register_error_handlers",
]
