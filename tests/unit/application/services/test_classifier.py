from __future__ import annotations

import errno
from typing import Any

import httpx
import pytest
import respx

from faultline.application.services.classifier import classify
from faultline.domain.enums.error_kind import ErrorKind
from faultline.domain.exceptions.base import ClassifiedError, NormalizedError, not_found_error

_REQ = httpx.Request("GET", "https://upstream.test/v1/wallets/w-1")


# --------------------------------------------------------------------------- #
# Scenarios
# --------------------------------------------------------------------------- #


def test_etimedout_code_is_a_timeout() -> None:
    """A bare timeout code maps to 408 with no original message."""
    err = classify({"code": "ETIMEDOUT"})

    assert err.kind is ErrorKind.TIMEOUT
    assert err.status_code == 408
    assert err.error_code == "TIMEOUT_ERROR"
    assert err.message == "Request timed out"
    assert err.details == {"original_error": None}


def test_signature_message_is_a_blockchain_failure() -> None:
    err = classify({"message": "Signature verification failed"})

    assert err.status_code == 503
    assert err.error_code == "BLOCKCHAIN_ERROR"
    assert err.message == "Blockchain transaction failed"
    assert err.details == {"original_error": "Signature verification failed"}


def test_upstream_response_keeps_upstream_status_and_code() -> None:
    payload = {"message": "missing", "errorCode": "NOT_FOUND"}
    err = classify({"response": {"status": 404, "data": payload}})

    assert err.kind is ErrorKind.API
    assert err.status_code == 404
    assert err.error_code == "NOT_FOUND"
    assert err.message == "missing"
    assert err.details == {"api_response": payload, "status": 404}


def test_plain_exception_is_unexpected() -> None:
    """Unmatched exceptions keep their text and become the cause."""
    exc = Exception("boom")
    err = classify(exc)

    assert err.status_code == 500
    assert err.error_code == "UNEXPECTED_ERROR"
    assert err.message == "boom"
    assert err.details["original_error"] is exc
    assert err.__cause__ is exc


# --------------------------------------------------------------------------- #
# Step 1: already classified
# --------------------------------------------------------------------------- #


def test_classified_error_passes_through_unchanged() -> None:
    """Already classified errors are returned by identity."""
    original = not_found_error("no such wallet", {"wallet_id": "w-1"})
    assert classify(original) is original


@pytest.mark.parametrize(
    "raw",
    [
        {"code": "ETIMEDOUT"},
        {"message": "Transaction reverted"},
        {"response": {"status": 409, "data": {"errorCode": "DUPLICATE"}}},
        ValueError("boom"),
        None,
    ],
)
def test_classify_is_idempotent(raw: Any) -> None:
    once = classify(raw)
    twice = classify(once)

    assert twice is once
    assert twice.as_dict() == once.as_dict()


def test_value_with_canonical_fields_is_rebuilt_field_for_field() -> None:
    """Values carrying status, code and message are taken at face value."""
    raw = {
        "statusCode": 429,
        "errorCode": "RATE_LIMITED",
        "message": "slow down",
        "details": {"retry_after": 3},
    }
    err = classify(raw)

    assert err.kind is ErrorKind.API
    assert err.as_dict() == {
        "status_code": 429,
        "error_code": "RATE_LIMITED",
        "message": "slow down",
        "details": {"retry_after": 3},
    }


def test_normalized_error_is_treated_as_already_classified() -> None:
    raised = NormalizedError(
        status_code=503,
        error_code="BLOCKCHAIN_ERROR",
        message="Blockchain transaction failed",
        details={"original_error": "Transaction reverted"},
    )
    err = classify(raised)

    assert err.kind is ErrorKind.BLOCKCHAIN
    assert err.as_dict() == raised.as_dict()
    assert err.__cause__ is raised


def test_non_string_detail_keys_are_stringified() -> None:
    err = classify({"errorCode": "CONFLICT", "message": "dup", "details": {1: "x", 2.5: "y"}})

    assert err.kind is ErrorKind.CONFLICT
    assert err.details == {"1": "x", "2.5": "y"}


def test_known_error_code_tag_selects_the_kind() -> None:
    err = classify({"errorCode": "FORBIDDEN"})

    assert err.kind is ErrorKind.FORBIDDEN
    assert err.status_code == 403
    assert err.error_code == "FORBIDDEN"


def test_known_error_code_tag_wins_over_timeout_signal() -> None:
    """Step 1 runs before the timeout check."""
    err = classify({"error_code": "CONFLICT", "code": "ETIMEDOUT", "message": "dup"})
    assert err.kind is ErrorKind.CONFLICT
    assert err.message == "dup"


# --------------------------------------------------------------------------- #
# Step 2: timeouts
# --------------------------------------------------------------------------- #


def test_econnaborted_code_on_exception_attribute() -> None:
    class AbortedError(Exception):
        code = "ECONNABORTED"

    err = classify(AbortedError("socket hang up"))

    assert err.error_code == "TIMEOUT_ERROR"
    assert err.details == {"original_error": "socket hang up"}


@pytest.mark.parametrize(
    "exc",
    [
        TimeoutError("timed out"),
        httpx.ReadTimeout("read timed out", request=_REQ),
        httpx.ConnectTimeout("connect timed out", request=_REQ),
        ConnectionAbortedError(errno.ECONNABORTED, "Software caused connection abort"),
        OSError(errno.ETIMEDOUT, "Connection timed out"),
    ],
)
def test_python_timeout_signals(exc: BaseException) -> None:
    """Native timeout exceptions count as abort signals."""
    err = classify(exc)

    assert err.status_code == 408
    assert err.error_code == "TIMEOUT_ERROR"
    assert err.message == "Request timed out"


def test_unrelated_code_is_not_a_timeout() -> None:
    err = classify({"code": "ECONNREFUSED", "message": "refused"})
    assert err.error_code == "UNEXPECTED_ERROR"
    assert err.message == "refused"


def test_timeout_signal_precedes_upstream_response() -> None:
    """Step 2 runs before the upstream response check."""
    err = classify({"code": "ETIMEDOUT", "response": {"status": 502, "data": {}}})
    assert err.error_code == "TIMEOUT_ERROR"


# --------------------------------------------------------------------------- #
# Step 3: upstream responses
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    ("response", "status", "code", "message"),
    [
        ({"status": 503}, 503, "API_ERROR", "API request failed"),
        ({"data": {"message": "bad key"}}, 500, "API_ERROR", "bad key"),
        ({}, 500, "API_ERROR", "API request failed"),
        ({"status": 0, "data": {"errorCode": "X"}}, 500, "X", "API request failed"),
    ],
)
def test_upstream_defaults(
    response: dict[str, Any], status: int, code: str, message: str
) -> None:
    err = classify({"response": response})

    assert err.status_code == status
    assert err.error_code == code
    assert err.message == message
    assert err.details["api_response"] == response.get("data")


def test_upstream_response_precedes_blockchain_heuristic() -> None:
    err = classify({"message": "Transaction failed", "response": {"status": 502}})
    assert err.error_code == "API_ERROR"
    assert err.status_code == 502


def test_httpx_status_error_uses_json_body() -> None:
    """An httpx error response contributes its JSON body."""
    response = httpx.Response(
        422,
        json={"message": "amount must be positive", "errorCode": "INVALID_AMOUNT"},
        request=_REQ,
    )
    exc = httpx.HTTPStatusError("422 Unprocessable Entity", request=_REQ, response=response)

    err = classify(exc)

    assert err.status_code == 422
    assert err.error_code == "INVALID_AMOUNT"
    assert err.message == "amount must be positive"
    assert err.details["status"] == 422
    assert err.__cause__ is exc


def test_httpx_status_error_with_non_json_body_falls_back() -> None:
    response = httpx.Response(502, text="<html>Bad Gateway</html>", request=_REQ)
    exc = httpx.HTTPStatusError("502 Bad Gateway", request=_REQ, response=response)

    err = classify(exc)

    assert err.status_code == 502
    assert err.error_code == "API_ERROR"
    assert err.message == "API request failed"
    assert err.details["api_response"] is None


@respx.mock
def test_raise_for_status_from_real_client_is_classified() -> None:
    respx.get("https://upstream.test/v1/orders/o-9").mock(
        return_value=httpx.Response(404, json={"message": "order not found"})
    )

    with httpx.Client() as client:
        response = client.get("https://upstream.test/v1/orders/o-9")
        with pytest.raises(httpx.HTTPStatusError) as info:
            response.raise_for_status()

    err = classify(info.value)
    assert err.status_code == 404
    assert err.error_code == "API_ERROR"
    assert err.message == "order not found"


# --------------------------------------------------------------------------- #
# Step 4: blockchain heuristic
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    "message",
    ["Transaction simulation failed", "Invalid Signature", "xTransactionx"],
)
def test_blockchain_markers(message: str) -> None:
    err = classify(RuntimeError(message))
    assert err.error_code == "BLOCKCHAIN_ERROR"
    assert err.details == {"original_error": message}


def test_blockchain_markers_are_case_sensitive() -> None:
    """Only the capitalized markers trigger the heuristic."""
    err = classify(RuntimeError("transaction failed; signature invalid"))
    assert err.error_code == "UNEXPECTED_ERROR"


# --------------------------------------------------------------------------- #
# Step 5 and the no-raise guarantee
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize("raw", [None, {}, "plain string", 42, object()])
def test_messageless_values_get_fallback_message(raw: Any) -> None:
    err = classify(raw)

    assert err.error_code == "UNEXPECTED_ERROR"
    assert err.status_code == 500
    assert err.message == "Unexpected error occurred"
    assert err.details["original_error"] is raw


def test_exception_with_empty_message_gets_fallback() -> None:
    err = classify(RuntimeError())
    assert err.message == "Unexpected error occurred"


def test_failure_during_classification_degrades_to_unexpected() -> None:
    """A value that blows up on access never makes classify raise."""
    class Hostile:
        def __getattr__(self, name: str) -> Any:
            raise RuntimeError(f"no access to {name}")

    raw = Hostile()
    err = classify(raw, "Hostile")

    assert isinstance(err, ClassifiedError)
    assert err.error_code == "UNEXPECTED_ERROR"
    assert err.message == "Unexpected error occurred"
    assert err.details["original_error"] is raw
    assert "no access to" in err.details["classification_error"]
