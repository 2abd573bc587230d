# src/faultline/application/services/notifier.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Classify, report, and attach the user-facing message in one call."""

from __future__ import annotations

from typing import Any

from faultline.application.schemas.dto.errors import NotifyResult
from faultline.application.services.classifier import classify
from faultline.application.services.reporter import Reporter, report
from faultline.application.services.user_messages import resolve_user_message

__all__ = ["DEFAULT_CONTEXT", "Notifier", "notify"]

DEFAULT_CONTEXT = "Notification"


class Notifier:
    """Notifier bound to a specific ``Reporter``."""

    def __init__(self, reporter: Reporter | None = None) -> None:
        self._reporter = reporter or Reporter()

    def notify(self, raw_failure: Any, context: str = DEFAULT_CONTEXT) -> NotifyResult:
        view = self._reporter.report(classify(raw_failure, context), context)
        return NotifyResult(
            **view.model_dump(),
            user_message=resolve_user_message(view.error_code),
        )


def notify(raw_failure: Any, context: str = DEFAULT_CONTEXT) -> NotifyResult:
    """Classify and report ``raw_failure``; return its view plus the user message."""
    view = report(classify(raw_failure, context), context)
    return NotifyResult(**view.model_dump(), user_message=resolve_user_message(view.error_code))
