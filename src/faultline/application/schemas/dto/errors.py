# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Public error DTOs.

Purpose:
    Read-only projections of a classified failure that are safe to hand across
    the system boundary.

Layer: application/schemas/dto
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import Field

from faultline.application.schemas.dto.base import BaseDTO


class _ErrorLike(Protocol):
    status_code: int
    error_code: str
    message: str
    details: dict[str, Any]


class PublicErrorView(BaseDTO):
    """Status, code, message and details of a classified failure."""

    status_code: int = Field(..., gt=0, description="Transport status code.")
    error_code: str = Field(..., min_length=1, description="Stable machine-readable code.")
    message: str = Field(..., description="Diagnostic message (not necessarily end-user safe).")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque diagnostic payload (original error, upstream body, ...).",
    )

    @classmethod
    def from_error(cls, error: _ErrorLike) -> PublicErrorView:
        """Project a ``ClassifiedError`` or ``NormalizedError`` onto the view."""
        return cls(
            status_code=error.status_code,
            error_code=error.error_code,
            message=error.message,
            details=dict(error.details),
        )


class NotifyResult(PublicErrorView):
    """Public view plus the pre-approved sentence to show end users."""

    user_message: str = Field(..., description="User-facing sentence for the error code.")


__all__ = ["NotifyResult", "PublicErrorView"]
