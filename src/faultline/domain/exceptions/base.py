# src/faultline/domain/exceptions/base.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""
Canonical error representations.

Summary:
    ``ClassifiedError`` is the single normalized failure type. It is a tagged
    variant rather than a class hierarchy: the ``kind`` attribute identifies the
    taxonomy member, so callers switch on ``error.kind`` (or ``error_code``)
    instead of on the exception's type.

    ``NormalizedError`` is what wrapped operations raise once a failure has been
    classified and reported. It carries only the public view of the error.

Layer:
    domain/exceptions
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from faultline.domain.enums.error_kind import ErrorKind


def _string_keys(details: Mapping[Any, Any] | None) -> dict[str, Any]:
    """Copy ``details`` with every key coerced to ``str``."""
    return {str(key): value for key, value in (details or {}).items()}


def _coerce_status(value: object, default: int) -> int:
    """Return ``value`` if it is a positive int status, else ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _rebuild(cls: type[Exception], args: tuple[Any, ...], kwargs: dict[str, Any]) -> Exception:
    """Unpickle helper for exceptions whose ``__init__`` takes keyword-only fields."""
    return cls(*args, **kwargs)


class ClassifiedError(Exception):
    """Normalized failure with a machine-readable classification.

    Instances are read-only once constructed; every public field is exposed
    through a property.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        status_code: int | None = None,
        error_code: str | None = None,
        details: Mapping[Any, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self._kind = kind
        self._message = message
        self._status_code = _coerce_status(status_code, kind.status_code)
        self._error_code = (
            error_code if isinstance(error_code, str) and error_code else kind.error_code
        )
        self._details = _string_keys(details)

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def error_code(self) -> str:
        return self._error_code

    @property
    def details(self) -> dict[str, Any]:
        # Copy so callers cannot mutate the error through the returned mapping.
        return dict(self._details)

    def as_dict(self) -> dict[str, Any]:
        """Return the public projection as a plain dict."""
        return {
            "status_code": self._status_code,
            "error_code": self._error_code,
            "message": self._message,
            "details": dict(self._details),
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self._kind.name}, status_code={self._status_code}, "
            f"error_code={self._error_code!r}, message={self._message!r})"
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            _rebuild,
            (
                type(self),
                (self._message,),
                {
                    "kind": self._kind,
                    "status_code": self._status_code,
                    "error_code": self._error_code,
                    "details": self._details,
                },
            ),
        )


class NormalizedError(Exception):
    """Failure raised by wrapped operations after classification and reporting."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Mapping[Any, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = _string_keys(details)

    def as_dict(self) -> dict[str, Any]:
        """Return the carried public view as a plain dict."""
        return {
            "status_code": self.status_code,
            "error_code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, (type(self), (), self.as_dict()))


# --------------------------------------------------------------------------- #
# One constructor per taxonomy kind
# --------------------------------------------------------------------------- #


def validation_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Invalid caller input (400)."""
    return ClassifiedError(message, kind=ErrorKind.VALIDATION, details=details)


def not_found_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Requested resource does not exist (404)."""
    return ClassifiedError(message, kind=ErrorKind.NOT_FOUND, details=details)


def unauthorized_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Caller is not authenticated (401)."""
    return ClassifiedError(message, kind=ErrorKind.UNAUTHORIZED, details=details)


def forbidden_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Caller is authenticated but not allowed (403)."""
    return ClassifiedError(message, kind=ErrorKind.FORBIDDEN, details=details)


def conflict_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Resource state conflict, e.g. a duplicate (409)."""
    return ClassifiedError(message, kind=ErrorKind.CONFLICT, details=details)


def blockchain_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """On-chain transaction or signing failure (503)."""
    return ClassifiedError(message, kind=ErrorKind.BLOCKCHAIN, details=details)


def timeout_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Aborted or timed-out request (408)."""
    return ClassifiedError(message, kind=ErrorKind.TIMEOUT, details=details)


def api_error(
    message: str,
    details: dict[str, Any] | None = None,
    *,
    status_code: int | None = None,
    error_code: str | None = None,
) -> ClassifiedError:
    """Upstream API failure; status and code default to 500 / ``API_ERROR``."""
    return ClassifiedError(
        message,
        kind=ErrorKind.API,
        status_code=status_code,
        error_code=error_code,
        details=details,
    )


def unexpected_error(message: str, details: dict[str, Any] | None = None) -> ClassifiedError:
    """Anything that matched no other kind (500)."""
    return ClassifiedError(message, kind=ErrorKind.UNEXPECTED, details=details)


__all__ = [
    "ClassifiedError",
    "NormalizedError",
    "api_error",
    "blockchain_error",
    "conflict_error",
    "forbidden_error",
    "not_found_error",
    "timeout_error",
    "unauthorized_error",
    "unexpected_error",
    "validation_error",
]
