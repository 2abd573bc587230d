# src/faultline/domain/interfaces/event_recorder.py
# Copyright (c) Faultline.
# SPDX-License-Identifier: MIT
"""Domain-facing interface for the structured logging collaborator.

The reporter only needs one capability from a log sink: record a leveled event
with a free-text message and an open mapping of structured fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventRecorder(Protocol):
    """Sink for leveled structured events."""

    def record(self, level: int, message: str, fields: Mapping[str, Any]) -> None:
        """Record one structured event.

        Args:
            level: ``logging`` severity (e.g. ``logging.ERROR``).
            message: Human-readable event message.
            fields: Structured fields attached to the event.
        """

        raise NotImplementedError
