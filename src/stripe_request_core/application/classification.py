"""Classification of HTTP responses into typed values or `StripeError`s."""

from __future__ import annotations

from collections.abc import Mapping

from ..domain.api_errors import ApiErrorCode, ApiErrorEnvelope, ApiErrorType
from ..exceptions import ApiError, InvalidEncodingError, SchemaMismatchError, StripeError
from ..infrastructure.io.validation import IncomingDataError, validate_json_as
from ..types import TransportResponse

SHOULD_RETRY_HEADER = "Stripe-Should-Retry"


def parse_should_retry(headers: Mapping[str, str] | None) -> bool | None:
    """Read the `Stripe-Should-Retry` hint: True, False, or None when absent/garbled."""
    if not headers:
        return None
    lowered = SHOULD_RETRY_HEADER.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            text = value.strip().lower()
            if text == "true":
                return True
            if text == "false":
                return False
            return None
    return None


def classify_error_response(status: int, body: bytes) -> StripeError:
    """Map a non-success response body to a structured error.

    Bodies that are not UTF-8, not JSON, or not shaped like a Stripe error become a
    `SchemaMismatchError` rather than leaking a parser exception.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return SchemaMismatchError.for_error_body(status)

    try:
        envelope = validate_json_as(ApiErrorEnvelope, text)
    except IncomingDataError:
        return SchemaMismatchError.for_error_body(status)

    error = envelope.error
    return ApiError(
        http_status=status,
        error_type=ApiErrorType.parse(error.type),
        code=None if error.code is None else ApiErrorCode.parse(error.code),
        raw_code=error.code,
        raw_type=error.type,
        message=error.message,
        param=error.param,
        decline_code=error.decline_code,
        doc_url=error.doc_url,
        request_log_url=error.request_log_url,
    )


def decode_success[OutputT](response: TransportResponse, output_type: type[OutputT]) -> OutputT:
    """Decode a 2xx body into `output_type`.

    Raises:
        InvalidEncodingError: If the body is not UTF-8.
        SchemaMismatchError: If the body does not validate against `output_type`.
    """
    try:
        text = response.body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(response.status) from exc

    try:
        return validate_json_as(output_type, text)
    except IncomingDataError as exc:
        raise SchemaMismatchError.for_success_body(output_type, response.status) from exc
