# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import pytest

from faultline.application.services.reporter import Reporter
from faultline.config.settings import get_settings
from faultline.infrastructure.logging import logger as logger_module
from recorder_testkit import FailingEventRecorder, RecordingEventRecorder


@pytest.fixture
def recorder() -> RecordingEventRecorder:
    return RecordingEventRecorder()


@pytest.fixture
def reporter(recorder: RecordingEventRecorder) -> Reporter:
    return Reporter(recorder, metrics_enabled=False)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from ambient env and the cached Settings singleton."""
    for key in (
        "ENVIRONMENT",
        "SERVICE_NAME",
        "LOG_LEVEL",
        "FAULTLINE_EXPOSE_ERROR_DETAILS",
        "FAULTLINE_METRICS_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _clear_correlation_context() -> None:
    """Correlation ids live in contextvars; reset them between tests."""
    logger_module._REQUEST_ID_CTX.set(None)
    logger_module._TRACE_ID_CTX.set(None)


@pytest.fixture
def failing_recorder() -> FailingEventRecorder:
    return FailingEventRecorder()
