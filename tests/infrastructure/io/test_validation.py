"""Tests for inbound JSON validation helpers."""

import pytest

from stripe_request_core.domain.api_errors import ApiErrorEnvelope
from stripe_request_core.infrastructure.io.validation import IncomingDataError, validate_json_as


def test_validate_json_as_returns_model() -> None:
    envelope = validate_json_as(ApiErrorEnvelope, b'{"error": {"type": "api_error"}}')
    assert envelope.error.type == "api_error"


@pytest.mark.parametrize("payload", ["not json", '{"error": "flat string"}', "[]"])
def test_validate_json_as_wraps_failures(payload: str) -> None:
    with pytest.raises(IncomingDataError, match="Invalid JSON payload"):
        validate_json_as(ApiErrorEnvelope, payload)
