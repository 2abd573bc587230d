# src/faultline/infrastructure/logging/logger.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Structured JSON logging utilities.

This module exposes an idempotent root configurator, a per-module logger
factory, and the ``EventRecorder`` implementation the reporter writes through.

Features:
    * Stable keys: ``ts``, ``level``, ``logger``, ``message``.
    * Automatic enrichment with ``request_id`` and ``trace_id`` via contextvars.
    * Fallback enrichment via record attributes, env var, or the active OTEL span.
    * Arbitrary structured fields are rendered with ``repr`` when not JSON-native.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "LoggingEventRecorder",
    "configure_root_logging",
    "get_json_logger",
    "get_request_id",
    "get_trace_id",
    "set_request_context",
]

_REQUEST_ID_ENV_KEY = "REQUEST_ID"

# Keys owned by the formatter itself.
_RESERVED_KEYS = frozenset({"ts", "level", "logger", "message"})

_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("faultline_request_id", default=None)
_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("faultline_trace_id", default=None)

# OpenTelemetry is an optional dependency; only used to derive a trace id.
_otel_trace: Any | None = None
try:  # pragma: no cover - OTEL may not be installed
    from opentelemetry import trace as _otel_trace_mod

    _otel_trace = _otel_trace_mod
except Exception:  # pragma: no cover - OTEL may not be installed
    _otel_trace = None


def set_request_context(*, request_id: str | None = None, trace_id: str | None = None) -> None:
    """Set per-request correlation identifiers on the current context.

    Passing only one argument updates that value and leaves the other unchanged.

    Args:
        request_id: Correlation identifier from ``X-Request-ID``, if any.
        trace_id: Distributed tracing identifier, if any.
    """
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if trace_id is not None:
        _TRACE_ID_CTX.set(trace_id)


def get_request_id() -> str | None:
    """Return the current request id from contextvars, if any."""
    return _REQUEST_ID_CTX.get(None)


def get_trace_id() -> str | None:
    """Return the current trace id, falling back to the active OTEL span."""
    return _TRACE_ID_CTX.get(None) or _derive_otel_trace_id()


def _derive_otel_trace_id() -> str | None:
    """Derive a hex trace id from the current OpenTelemetry span, if any."""
    if _otel_trace is None:
        return None
    try:
        ctx = _otel_trace.get_current_span().get_span_context()
        trace_id = getattr(ctx, "trace_id", 0)
        # OTEL uses 0 as the "invalid" trace id sentinel.
        if not trace_id:
            return None
        return f"{int(trace_id):032x}"
    except Exception:  # pragma: no cover - defensive only
        return None


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and optional extras."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON object.

        Args:
            record: Logging record.

        Returns:
            JSON-encoded log line.
        """
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        try:
            rid: str | None = (
                getattr(record, "request_id", None)
                or _REQUEST_ID_CTX.get(None)
                or os.getenv(_REQUEST_ID_ENV_KEY)
            )
            if rid:
                payload["request_id"] = rid
        except Exception as exc:  # pragma: no cover (defensive)
            payload["request_id_error"] = str(exc)

        try:
            tid: str | None = getattr(record, "trace_id", None) or get_trace_id()
            if tid:
                payload["trace_id"] = tid
        except Exception as exc:  # pragma: no cover (defensive)
            payload["trace_id_error"] = str(exc)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        # Structured fields passed as ``extra={"extra": {...}}``; reserved keys get ``extra_``.
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            for key, value in extra.items():
                payload[f"extra_{key}" if key in _RESERVED_KEYS else key] = value

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=repr)


def configure_root_logging(level: str | int | None = None) -> None:
    """Initialize the root logger with a JSON stream handler (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    if isinstance(resolved, str):
        resolved = resolved.upper()
    root.setLevel(resolved)

    if root.handlers:
        # Already configured; avoid duplicate handlers on reload.
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module-specific logger backed by the JSON root handler.

    This does *not* implicitly configure the root logger. Call
    :func:`configure_root_logging` once at startup.

    Args:
        name: Logger name, typically ``__name__`` of the caller.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


class LoggingEventRecorder:
    """``EventRecorder`` backed by a standard ``logging.Logger``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_json_logger("faultline.errors")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def record(self, level: int, message: str, fields: Mapping[str, Any]) -> None:
        """Emit ``message`` at ``level`` with ``fields`` as structured extras."""
        self._logger.log(level, message, extra={"extra": dict(fields)})
