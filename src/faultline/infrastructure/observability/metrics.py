# src/faultline/infrastructure/observability/metrics.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Prometheus metrics for reported errors.

Exports
-------
* ``faultline_errors_reported_total`` (Counter), labelled by ``error_code``
  and ``status_code``. The name is part of the public contract.

Design
------
The counter is created against the *current* default registry
(:data:`prometheus_client.REGISTRY`). If a collector with the same name already
exists there, it is reused instead of registering a duplicate, which keeps
module re-imports and registry swaps in tests safe.
"""

from __future__ import annotations

from collections.abc import Sequence

import prometheus_client as prom
from prometheus_client import Counter
from prometheus_client.registry import CollectorRegistry

ERRORS_REPORTED_TOTAL = "faultline_errors_reported_total"


def _get_or_create_counter(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Counter:
    """Return a counter bound to the current default registry.

    Args:
        name: Metric name.
        doc: Human-readable metric description.
        labelnames: Optional iterable of label names.

    Returns:
        A :class:`Counter` bound to the current :data:`prom.REGISTRY`.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    existing = mapping.get(name)
    if isinstance(existing, Counter):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Counter(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            mapping = getattr(registry, "_names_to_collectors", {})
            again = mapping.get(name)
            if isinstance(again, Counter):
                return again
        raise


def get_errors_reported_total() -> Counter:
    """Return the reported-errors counter for the active registry."""
    return _get_or_create_counter(
        ERRORS_REPORTED_TOTAL,
        "Classified errors reported, by error code and status code.",
        labelnames=("error_code", "status_code"),
    )


def inc_errors_reported(error_code: str, status_code: int) -> None:
    """Increment the reported-errors counter for one classified error."""
    get_errors_reported_total().labels(
        error_code=error_code, status_code=str(status_code)
    ).inc()


__all__ = [
    "ERRORS_REPORTED_TOTAL",
    "get_errors_reported_total",
    "inc_errors_reported",
]
