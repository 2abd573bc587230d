# src/faultline/application/services/user_messages.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""User-facing messages per error code.

Sentences are fixed and pre-approved; they never interpolate diagnostic data.
"""

from __future__ import annotations

from types import MappingProxyType

from faultline.domain.enums.error_kind import ErrorKind

__all__ = ["FALLBACK_USER_MESSAGE", "USER_MESSAGES", "resolve_user_message"]

FALLBACK_USER_MESSAGE = "An unexpected error occurred. Please try again or contact support."

USER_MESSAGES: MappingProxyType[str, str] = MappingProxyType(
    {
        ErrorKind.VALIDATION.error_code: (
            "Invalid input provided. Please check your data and try again."
        ),
        ErrorKind.NOT_FOUND.error_code: "The requested resource could not be found.",
        ErrorKind.UNAUTHORIZED.error_code: (
            "You are not authorized to perform this action. Please log in."
        ),
        ErrorKind.FORBIDDEN.error_code: "You do not have permission to access this resource.",
        ErrorKind.CONFLICT.error_code: "A conflict occurred. The resource may already exist.",
        ErrorKind.BLOCKCHAIN.error_code: (
            "There was an issue with the blockchain transaction. Please try again later."
        ),
        ErrorKind.TIMEOUT.error_code: (
            "The request took too long to complete. "
            "Please check your connection and try again."
        ),
        ErrorKind.API.error_code: (
            "There was a problem communicating with the server. Please try again."
        ),
    }
)


def resolve_user_message(error_code: str | None) -> str:
    """Return the user-facing sentence for ``error_code`` (fallback for unknown codes)."""
    if not isinstance(error_code, str):
        return FALLBACK_USER_MESSAGE
    return USER_MESSAGES.get(error_code, FALLBACK_USER_MESSAGE)
