"""HTTP adapters (FastAPI/Starlette)."""

from __future__ import annotations

from .errors import error_envelope, register_error_handlers
from .middleware import TraceIdMiddleware

__all__ = ["TraceIdMiddleware", "error_envelope", "register_error_handlers"]
