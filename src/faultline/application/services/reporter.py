# src/faultline/application/services/reporter.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Error reporter.

Synopsis:
    Emits exactly one structured ERROR event for a classified failure and
    returns its public view. Logging and metrics are best-effort: a failing
    sink never changes what the caller gets back.
"""

from __future__ import annotations

import logging
import traceback
from contextlib import suppress
from typing import Any

from faultline.application.schemas.dto.errors import PublicErrorView
from faultline.domain.exceptions.base import ClassifiedError
from faultline.domain.interfaces.event_recorder import EventRecorder
from faultline.infrastructure.logging.logger import (
    LoggingEventRecorder,
    get_request_id,
    get_trace_id,
)
from faultline.infrastructure.observability.metrics import inc_errors_reported

__all__ = ["DEFAULT_CONTEXT", "Reporter", "report"]

DEFAULT_CONTEXT = "Application"


def _stack_of(error: ClassifiedError) -> str:
    """Format the traceback of the error's cause, or of the error itself."""
    source: BaseException = (
        error.__cause__ if isinstance(error.__cause__, BaseException) else error
    )
    return "".join(traceback.format_exception(type(source), source, source.__traceback__))


class Reporter:
    """Logs classified errors through an ``EventRecorder``."""

    def __init__(
        self,
        recorder: EventRecorder | None = None,
        *,
        metrics_enabled: bool = True,
    ) -> None:
        """Initialize the reporter.

        Args:
            recorder: Structured event sink; defaults to a ``LoggingEventRecorder``.
            metrics_enabled: Count each report in the Prometheus registry.
        """
        self._recorder = recorder or LoggingEventRecorder()
        self._metrics_enabled = metrics_enabled

    def build_fields(self, error: ClassifiedError, context: str) -> dict[str, Any]:
        """Return the structured fields recorded for ``error``."""
        fields: dict[str, Any] = {
            "context": context,
            "message": error.message,
            "error_code": error.error_code,
            "status_code": error.status_code,
            "details": error.details,
            "stack": _stack_of(error),
        }
        trace_id = get_trace_id()
        if trace_id:
            fields["trace_id"] = trace_id
        request_id = get_request_id()
        if request_id:
            fields["request_id"] = request_id
        return fields

    def report(self, error: ClassifiedError, context: str = DEFAULT_CONTEXT) -> PublicErrorView:
        """Record one structured event for ``error`` and return its public view.

        Args:
            error: Classified failure.
            context: Label of the logical operation, for log correlation.

        Returns:
            The public projection of ``error``.
        """
        view = PublicErrorView.from_error(error)

        # Best-effort boundary: a failing log sink must never reach the caller.
        try:
            self._recorder.record(
                logging.ERROR,
                f"[{context}] Error: {error.message}",
                self.build_fields(error, context),
            )
        except Exception:  # noqa: BLE001
            pass

        if self._metrics_enabled:
            with suppress(Exception):
                inc_errors_reported(error.error_code, error.status_code)

        return view


_default_reporter: Reporter | None = None


def _get_default_reporter() -> Reporter:
    global _default_reporter
    if _default_reporter is None:
        _default_reporter = Reporter()
    return _default_reporter


def report(error: ClassifiedError, context: str = DEFAULT_CONTEXT) -> PublicErrorView:
    """Report ``error`` through the default logging-backed reporter."""
    return _get_default_reporter().report(error, context)
