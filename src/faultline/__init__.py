# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Faultline: normalize heterogeneous failures into one classified error.

Typical usage:
    from faultline import classify, notify, wrap, not_found_error

    fetch = wrap(fetch_profile, "FetchProfile")
"""

from __future__ import annotations

from faultline.application.schemas.dto.errors import NotifyResult, PublicErrorView
from faultline.application.services.classifier import classify
from faultline.application.services.notifier import Notifier, notify
from faultline.application.services.reporter import Reporter, report
from faultline.application.services.user_messages import resolve_user_message
from faultline.application.services.wrapper import handles_errors, wrap
from faultline.domain.enums.error_kind import ErrorKind
from faultline.domain.exceptions.base import (
    ClassifiedError,
    NormalizedError,
    api_error,
    blockchain_error,
    conflict_error,
    forbidden_error,
    not_found_error,
    timeout_error,
    unauthorized_error,
    unexpected_error,
    validation_error,
)
from faultline.domain.interfaces.event_recorder import EventRecorder

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "EventRecorder",
    "NormalizedError",
    "NotifyResult",
    "Notifier",
    "PublicErrorView",
    "Reporter",
    "api_error",
    "blockchain_error",
    "classify",
    "conflict_error",
    "forbidden_error",
    "handles_errors",
    "not_found_error",
    "notify",
    "report",
    "resolve_user_message",
    "timeout_error",
    "unauthorized_error",
    "unexpected_error",
    "validation_error",
    "wrap",
]
