"""Custom exceptions for the Stripe request core.

Every failure the executor can surface is a `StripeError` subclass, so callers can
catch one base type and pattern-match on the concrete class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .domain.api_errors import ApiErrorCode, ApiErrorType


class StripeError(Exception):
    """Base exception for all client errors."""

    pass


class TransportError(StripeError):
    """Raised when the HTTP transport fails before a response is received.

    Connection failures, DNS failures and transport timeouts all land here. These are
    always eligible for retry, subject to the retry policy.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Transport error: {detail}")


class InvalidEncodingError(StripeError):
    """Raised when a successful response body is not valid UTF-8.

    This is a data-integrity failure, never retried.
    """

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"Response was not valid UTF-8 (status={status}).")


class SchemaMismatchError(StripeError):
    """Raised when a response body does not match the expected schema.

    Covers both a success body that fails to validate against the caller's type and
    an error body that is not a well-formed Stripe error object.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)

    @classmethod
    def for_success_body(cls, output_type: object, status: int) -> SchemaMismatchError:
        return cls(f"Error deserializing response data as {output_type}.", status=status)

    @classmethod
    def for_error_body(cls, status: int) -> SchemaMismatchError:
        return cls(f"Could not deserialize Stripe error (status={status}).", status=status)


class ApiError(StripeError):
    """Raised when Stripe returns a structured error object.

    Exposes the originating HTTP status and the machine-readable code so calling code
    can branch on specific failure categories.
    """

    def __init__(
        self,
        *,
        http_status: int,
        error_type: ApiErrorType,
        code: ApiErrorCode | None = None,
        raw_code: str | None = None,
        raw_type: str | None = None,
        message: str | None = None,
        param: str | None = None,
        decline_code: str | None = None,
        doc_url: str | None = None,
        request_log_url: str | None = None,
    ) -> None:
        self.http_status = http_status
        self.error_type = error_type
        self.code = code
        self.raw_code = raw_code
        self.raw_type = raw_type
        self.message = message
        self.param = param
        self.decline_code = decline_code
        self.doc_url = doc_url
        self.request_log_url = request_log_url
        summary = message or "no message"
        super().__init__(
            f"Stripe API error ({http_status}, {raw_type or error_type}, "
            f"code={raw_code or 'none'}): {summary}"
        )


class PolicyMisconfiguredError(StripeError):
    """Raised when a retry policy authorises zero attempts.

    This is a programming error at the call site rather than a remote failure.
    """

    def __init__(self, policy: object) -> None:
        self.policy = policy
        super().__init__(f"Invalid strategy: {policy!r} authorised no attempts.")


class MissingApiKeyError(StripeError):
    """Raised when a client is built without a secret key."""

    def __init__(self) -> None:
        super().__init__(
            "No Stripe secret key configured.\n"
            "Set STRIPE_SECRET_KEY in the environment or .env, or pass --api-key."
        )


class ConfigFileNotFoundError(StripeError):
    """Raised when the configured client TOML file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(StripeError):
    """Raised when a client config file is not valid TOML."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file is not valid TOML: {path} ({detail})")


class ConfigFileValidationError(StripeError):
    """Raised when a client config file fails schema validation."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file validation failed: {path} ({detail})")
