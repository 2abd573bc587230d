# src/faultline/domain/enums/error_kind.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""
Error taxonomy.

Purpose:
    Closed set of error kinds. Each kind owns a fixed transport status code and
    a stable, never-localized error code that downstream consumers switch on.

Layer:
    domain

Notes:
    - Additive only: renaming or renumbering an existing code is a breaking
      change for every consumer of the error envelope.
    - ``API`` is the only kind whose status/code may be overridden per
      occurrence (by the upstream that produced the failure).
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Taxonomy member. The enum value is the kind's default error code."""

    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    BLOCKCHAIN = "BLOCKCHAIN_ERROR"
    TIMEOUT = "TIMEOUT_ERROR"
    API = "API_ERROR"
    UNEXPECTED = "UNEXPECTED_ERROR"

    @property
    def error_code(self) -> str:
        """Default error code for this kind."""
        return self.value

    @property
    def status_code(self) -> int:
        """Default transport status code for this kind."""
        return _STATUS_CODES[self]

    @classmethod
    def from_error_code(cls, code: object) -> ErrorKind | None:
        """Return the kind owning ``code``, or ``None`` for unknown codes."""
        if not isinstance(code, str):
            return None
        try:
            return cls(code)
        except ValueError:
            return None


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.BLOCKCHAIN: 503,
    ErrorKind.TIMEOUT: 408,
    ErrorKind.API: 500,
    ErrorKind.UNEXPECTED: 500,
}

__all__ = ["ErrorKind"]
