# src/faultline/application/services/wrapper.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Operation wrapper.

Synopsis:
    Runs a caller-supplied operation and, on failure, classifies and reports
    the raised exception before raising a ``NormalizedError`` in its place.

Behavior:
    * Coroutine functions (and objects with ``async def __call__``) get an
      ``async`` wrapper; classification and reporting only start after the
      awaited operation has settled. A sync callable that returns an
      awaitable has it settled under the same handling.
    * Success: the result is returned untouched and nothing is logged.
    * ``NormalizedError`` raised by an inner wrapped operation is re-raised as-is
      (it was already reported).
    * Only ``Exception`` is normalized. Cancellation and other
      ``BaseException`` subclasses propagate unchanged.
    * No timeouts are imposed here.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar, cast

from faultline.application.services.classifier import classify
from faultline.application.services.reporter import Reporter, report
from faultline.domain.exceptions.base import NormalizedError

__all__ = ["DEFAULT_CONTEXT", "handles_errors", "wrap"]

DEFAULT_CONTEXT = "AsyncOperation"

F = TypeVar("F", bound=Callable[..., Any])


def _normalize(exc: Exception, context: str, reporter: Reporter | None) -> NormalizedError:
    classified = classify(exc, context)
    view = reporter.report(classified, context) if reporter else report(classified, context)
    return NormalizedError(
        status_code=view.status_code,
        error_code=view.error_code,
        message=view.message,
        details=view.details,
    )


def _is_async_callable(operation: Callable[..., Any]) -> bool:
    """True for coroutine functions and objects with an ``async def __call__``."""
    if inspect.iscoroutinefunction(operation):
        return True
    call = getattr(type(operation), "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


async def _settle(
    awaitable: Awaitable[Any], context: str, reporter: Reporter | None
) -> Any:
    try:
        return await awaitable
    except NormalizedError:
        raise
    except Exception as exc:
        raise _normalize(exc, context, reporter) from exc


def wrap(
    operation: F,
    context: str = DEFAULT_CONTEXT,
    *,
    reporter: Reporter | None = None,
) -> F:
    """Return ``operation`` wrapped so its failures are classified and reported.

    Args:
        operation: Sync callable or coroutine function to protect.
        context: Label of the logical operation, for log correlation.
        reporter: Optional reporter; the default logging-backed one otherwise.

    Returns:
        A callable with the same signature as ``operation``.

    Raises:
        NormalizedError: When ``operation`` raises; chained to the original.
    """
    if _is_async_callable(operation):
        async_op = cast(Callable[..., Awaitable[Any]], operation)

        @functools.wraps(operation)
        async def async_wrapped(*args: Any, **kwargs: Any) -> Any:
            return await _settle(async_op(*args, **kwargs), context, reporter)

        return cast(F, async_wrapped)

    @functools.wraps(operation)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        try:
            result = operation(*args, **kwargs)
        except NormalizedError:
            raise
        except Exception as exc:
            raise _normalize(exc, context, reporter) from exc
        if inspect.isawaitable(result):
            return _settle(result, context, reporter)
        return result

    return cast(F, wrapped)


def handles_errors(
    context: str = DEFAULT_CONTEXT,
    *,
    reporter: Reporter | None = None,
) -> Callable[[F], F]:
    """Decorator form of :func:`wrap`.

    Example:
        @handles_errors("LoadProfile")
        async def load_profile(user_id: str) -> Profile: ...
    """

    def decorator(operation: F) -> F:
        return wrap(operation, context, reporter=reporter)

    return decorator
