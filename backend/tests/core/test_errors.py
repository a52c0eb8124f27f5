"""Error Hierarchy — tests for codes, statuses and the REST envelope.

Tests cover:
    - Every input validation error is a 400 with its stable lowercase code
    - UniqueConstraintViolationError is a 409 that keeps its cause
    - to_response never includes the raw cause
    - Input validation envelopes echo the field and a truncated raw value
"""

import pytest

from settle.core.errors import (
    AmountInvalidError, AssetPairInvalidError, ErrorCategory, HopInvalidError,
    IdInvalidError, InputValidationError, MAX_ECHOED_VALUE, PathInvalidError,
    PriceInvalidError, RequestInvalidError,
    SecretInvalidError, UniqueConstraintViolationError, CredentialDerivationError,
)


@pytest.mark.parametrize("error,code", [
    (PriceInvalidError("x"), "price_invalid"),
    (AmountInvalidError("x"), "amount_invalid"),
    (AssetPairInvalidError("x"), "pair_invalid"),
    (PathInvalidError("x"), "path_invalid"),
    (IdInvalidError("x"), "id_invalid"),
    (SecretInvalidError("x"), "secret_invalid"),
    (HopInvalidError("x"), "hop_invalid"),
])
def test_input_validation_codes(error, code):
    assert isinstance(error, InputValidationError)
    assert error.code == code
    assert error.http_status == 400
    assert error.category == ErrorCategory.VALIDATION
    assert error.raw == "x"
    assert "x" in error.message


def test_unique_violation_keeps_cause():
    cause = RuntimeError("duplicate key")
    error = UniqueConstraintViolationError(cause)
    assert error.cause is cause
    assert error.http_status == 409
    assert error.category == ErrorCategory.CONFLICT


def test_response_envelope_hides_cause():
    error = UniqueConstraintViolationError(RuntimeError("users_username_key"))
    body = error.to_response()
    assert body["error"]["code"] == "unique_constraint_violation"
    assert "users_username_key" not in str(body)


def test_derivation_error_is_internal():
    error = CredentialDerivationError(ValueError("memory limit exceeded"))
    assert error.http_status == 500
    assert error.category == ErrorCategory.INTERNAL


def test_price_side_names_field_in_details():
    body = PriceInvalidError("340282366920938463463374607431768211456", "base").to_response()
    assert body["error"]["details"] == [{
        "field": "price.base",
        "value": "340282366920938463463374607431768211456",
    }]


def test_malformed_price_details_use_plain_field():
    body = PriceInvalidError("12/").to_response()
    assert body["error"]["details"][0]["field"] == "price"


def test_path_details_echo_offending_element():
    body = PathInvalidError("nobody[offer_x]", ValueError()).to_response()
    assert body["error"]["code"] == "path_invalid"
    assert body["error"]["details"] == [{"field": "path", "value": "nobody[offer_x]"}]


def test_long_raw_value_is_truncated():
    body = AmountInvalidError("9" * 1000).to_response()
    value = body["error"]["details"][0]["value"]
    assert value == "9" * MAX_ECHOED_VALUE + "..."


def test_request_invalid_details_list_fields():
    error = RequestInvalidError([
        {"loc": ("body", "username"), "msg": "too short", "type": "string_too_short"},
    ])
    assert error.http_status == 400
    assert error.to_response()["error"]["details"] == [{
        "field": "body.username", "message": "too short", "type": "string_too_short",
    }]


def test_non_input_errors_have_no_details():
    body = UniqueConstraintViolationError(RuntimeError()).to_response()
    assert "details" not in body["error"]
