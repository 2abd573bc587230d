# src/faultline/config/settings.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Faultline Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the error-normalization layer. The core
    pipeline (classify/report/notify/wrap) never reads settings itself; only the
    infrastructure and HTTP adapters consult them.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown fields.
    - Explicit `validation_alias` per field (the env var name).
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed configuration for Faultline."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    service_name: str = Field(
        default="faultline",
        description="Logical service name attached to logs.",
        validation_alias="SERVICE_NAME",
    )
    log_level: str | None = Field(
        default=None,
        description="Override log level (e.g., 'DEBUG', 'INFO'). If not set, defaults are used.",
        validation_alias="LOG_LEVEL",
    )
    expose_error_details: bool = Field(
        default=False,
        description=(
            "Include the diagnostic `details` payload in HTTP error envelopes. "
            "Rejected in production."
        ),
        validation_alias="FAULTLINE_EXPOSE_ERROR_DETAILS",
    )
    metrics_enabled: bool = Field(
        default=True,
        description="Count reported errors in the Prometheus registry.",
        validation_alias="FAULTLINE_METRICS_ENABLED",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def _validate_detail_exposure(self) -> Settings:
        """Reject exposing diagnostic details to clients in production.

        Raises:
            ValueError: If details exposure is enabled with ENVIRONMENT=production.
        """
        if self.expose_error_details and self.environment is Environment.PRODUCTION:
            raise ValueError(
                "FAULTLINE_EXPOSE_ERROR_DETAILS must not be enabled in production.",
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.error("Invalid configuration", extra={"extra": {"errors": exc.errors()}})
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
    logger.info(
        "Settings initialized",
        extra={
            "extra": {
                "environment": settings.environment.value,
                "expose_error_details": settings.expose_error_details,
                "metrics_enabled": settings.metrics_enabled,
            }
        },
    )
    return settings
