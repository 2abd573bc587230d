# src/faultline/application/services/classifier.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Failure classifier.

Synopsis:
    Maps an arbitrary failure value onto exactly one taxonomy kind and returns
    a ``ClassifiedError``. Pure: no I/O besides a debug log line when the
    classification itself blows up.

Resolution order (first match wins):
    1. Already classified: a ``ClassifiedError``, a value carrying the three
       canonical fields, or a value tagged with a known taxonomy error code.
    2. Abort/timeout signal (``ECONNABORTED``/``ETIMEDOUT`` codes, Python
       ``TimeoutError``, ``httpx.TimeoutException``, timed-out ``OSError``).
    3. Upstream response payload (``response.status`` + ``response.data``).
    4. "Transaction"/"Signature" in the message text (blockchain heuristic).
    5. Anything else: unexpected.

Field access is shape-based: a field is looked up as a mapping key or an
attribute, under its snake_case or camelCase name, so plain dicts, JS-style
payloads, and exception objects are all accepted.
"""

from __future__ import annotations

import errno
from collections.abc import Mapping
from typing import Any

import httpx

from faultline.domain.enums.error_kind import ErrorKind
from faultline.domain.exceptions.base import (
    ClassifiedError,
    api_error,
    blockchain_error,
    timeout_error,
    unexpected_error,
)
from faultline.infrastructure.logging.logger import get_json_logger

__all__ = ["classify"]

logger = get_json_logger(__name__)

_MISSING = object()

TIMEOUT_CODES: frozenset[str] = frozenset({"ECONNABORTED", "ETIMEDOUT"})
_TIMEOUT_ERRNOS: frozenset[int] = frozenset({errno.ETIMEDOUT, errno.ECONNABORTED})

# Known false-positive source: any message mentioning these words is treated
# as a blockchain failure, related or not.
BLOCKCHAIN_MARKERS: tuple[str, ...] = ("Transaction", "Signature")

TIMEOUT_MESSAGE = "Request timed out"
API_FALLBACK_MESSAGE = "API request failed"
BLOCKCHAIN_MESSAGE = "Blockchain transaction failed"
UNEXPECTED_MESSAGE = "Unexpected error occurred"


def _field(source: Any, *names: str) -> Any:
    """Return the first present field of ``source`` among ``names``, else ``None``."""
    if source is None:
        return None
    for name in names:
        if isinstance(source, Mapping):
            if name in source:
                return source[name]
            continue
        value = getattr(source, name, _MISSING)
        if value is not _MISSING:
            return value
    return None


def _is_status(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _message_of(raw: Any) -> str | None:
    """Return the failure's message text, if it has one."""
    message = _field(raw, "message")
    if isinstance(message, str):
        return message
    if isinstance(raw, BaseException):
        return str(raw)
    return None


def _has_response(response: Any) -> bool:
    if response is None:
        return False
    if isinstance(response, (str, bytes, int, float)):
        return bool(response)
    return True


def _from_classified(raw: Any) -> ClassifiedError | None:
    """Step 1: pass through or rebuild an already-classified failure."""
    if isinstance(raw, ClassifiedError):
        return raw

    error_code = _field(raw, "error_code", "errorCode")
    status_code = _field(raw, "status_code", "statusCode")
    message = _field(raw, "message")
    known = ErrorKind.from_error_code(error_code)

    canonical = (
        isinstance(error_code, str)
        and bool(error_code)
        and _is_status(status_code)
        and isinstance(message, str)
    )
    if not canonical and known is None:
        return None

    details = _field(raw, "details")
    return ClassifiedError(
        message if isinstance(message, str) else str(error_code),
        # Only upstream failures carry codes outside the taxonomy.
        kind=known or ErrorKind.API,
        status_code=status_code if _is_status(status_code) else None,
        error_code=error_code,
        details=details if isinstance(details, Mapping) else None,
    )


def _is_timeout(raw: Any) -> bool:
    """Step 2: abort/timeout signal."""
    if isinstance(raw, (TimeoutError, httpx.TimeoutException)):
        return True
    if isinstance(raw, OSError) and raw.errno in _TIMEOUT_ERRNOS:
        return True
    code = _field(raw, "code")
    return isinstance(code, str) and code in TIMEOUT_CODES


def _response_data(response: Any) -> Any:
    """Return the upstream body: ``response.data``, else the httpx JSON body."""
    data = _field(response, "data")
    if data is None and isinstance(response, httpx.Response):
        try:
            data = response.json()
        except (ValueError, httpx.StreamError):
            data = None
    return data


def _from_response(response: Any) -> ClassifiedError:
    """Step 3: upstream API failure, keeping the upstream's status and code."""
    status = _field(response, "status", "status_code")
    data = _response_data(response)
    message = _field(data, "message")
    return api_error(
        message if isinstance(message, str) and message else API_FALLBACK_MESSAGE,
        {"api_response": data, "status": status},
        status_code=status if _is_status(status) else None,
        error_code=_field(data, "errorCode", "error_code"),
    )


def _classify(raw: Any) -> ClassifiedError:
    classified = _from_classified(raw)
    if classified is not None:
        return classified

    if _is_timeout(raw):
        return timeout_error(TIMEOUT_MESSAGE, {"original_error": _message_of(raw)})

    response = _field(raw, "response")
    if _has_response(response):
        return _from_response(response)

    message = _message_of(raw)
    if message is not None and any(marker in message for marker in BLOCKCHAIN_MARKERS):
        return blockchain_error(BLOCKCHAIN_MESSAGE, {"original_error": message})

    return unexpected_error(message or UNEXPECTED_MESSAGE, {"original_error": raw})


def classify(raw_failure: Any, context: str | None = None) -> ClassifiedError:
    """Map an arbitrary failure onto the error taxonomy.

    Never raises: if classification itself fails, the failure is reported as
    ``UNEXPECTED_ERROR``.

    Args:
        raw_failure: Exception, mapping, or any other value describing a failure.
        context: Optional label of the logical operation, used only for logging.

    Returns:
        The classified error. An input that already is a ``ClassifiedError`` is
        returned as-is.
    """
    try:
        classified = _classify(raw_failure)
    except Exception as exc:  # noqa: BLE001 - classification must not fail outward
        logger.debug(
            "classification.failed",
            extra={"extra": {"context": context, "classification_error": repr(exc)}},
        )
        classified = unexpected_error(
            UNEXPECTED_MESSAGE,
            {"original_error": raw_failure, "classification_error": repr(exc)},
        )

    if classified is not raw_failure and isinstance(raw_failure, BaseException):
        classified.__cause__ = raw_failure
    return classified
