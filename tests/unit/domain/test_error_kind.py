from __future__ import annotations

import pytest

from faultline.domain.enums.error_kind import ErrorKind


@pytest.mark.parametrize(
    ("kind", "status_code", "error_code"),
    [
        (ErrorKind.VALIDATION, 400, "VALIDATION_ERROR"),
        (ErrorKind.NOT_FOUND, 404, "NOT_FOUND"),
        (ErrorKind.UNAUTHORIZED, 401, "UNAUTHORIZED"),
        (ErrorKind.FORBIDDEN, 403, "FORBIDDEN"),
        (ErrorKind.CONFLICT, 409, "CONFLICT"),
        (ErrorKind.BLOCKCHAIN, 503, "BLOCKCHAIN_ERROR"),
        (ErrorKind.TIMEOUT, 408, "TIMEOUT_ERROR"),
        (ErrorKind.API, 500, "API_ERROR"),
        (ErrorKind.UNEXPECTED, 500, "UNEXPECTED_ERROR"),
    ],
)
def test_taxonomy_table_is_stable(kind: ErrorKind, status_code: int, error_code: str) -> None:
    """Codes are a public contract: they must never be renumbered or renamed."""
    assert kind.status_code == status_code
    assert kind.error_code == error_code


def test_error_codes_are_unique() -> None:
    """Enum values double as codes, so each kind owns a distinct one."""
    codes = [k.error_code for k in ErrorKind]
    assert len(codes) == len(set(codes))


def test_from_error_code_resolves_known_codes_only() -> None:
    assert ErrorKind.from_error_code("FORBIDDEN") is ErrorKind.FORBIDDEN
    assert ErrorKind.from_error_code("TIMEOUT_ERROR") is ErrorKind.TIMEOUT
    assert ErrorKind.from_error_code("RATE_LIMITED") is None
    assert ErrorKind.from_error_code(None) is None
    assert ErrorKind.from_error_code(404) is None
