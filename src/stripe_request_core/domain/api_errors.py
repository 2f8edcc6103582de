"""Stripe error object shapes with forward-compatible enums.

Stripe adds error codes regularly, so both enums are open: any value we do not know
decodes to `UNKNOWN` instead of failing, and the raw string is kept alongside.

Usage example:
    from stripe_request_core.domain.api_errors import ApiErrorCode

    ApiErrorCode.parse("card_declined")  # ApiErrorCode.CARD_DECLINED
    ApiErrorCode.parse("brand_new_code")  # ApiErrorCode.UNKNOWN
"""

from __future__ import annotations

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict


class OpenEnum:
    """Mixin giving a StrEnum an explicit catch-all member."""

    @classmethod
    def _missing_(cls, value: object) -> Self:
        return cls("unknown")

    @classmethod
    def parse(cls, value: str) -> Self:
        return cls(value)


class ApiErrorType(OpenEnum, StrEnum):
    API_ERROR = "api_error"
    CARD_ERROR = "card_error"
    IDEMPOTENCY_ERROR = "idempotency_error"
    INVALID_REQUEST_ERROR = "invalid_request_error"
    UNKNOWN = "unknown"


class ApiErrorCode(OpenEnum, StrEnum):
    ACCOUNT_CLOSED = "account_closed"
    ACCOUNT_COUNTRY_INVALID_ADDRESS = "account_country_invalid_address"
    ACCOUNT_INVALID = "account_invalid"
    ACCOUNT_NUMBER_INVALID = "account_number_invalid"
    AMOUNT_TOO_LARGE = "amount_too_large"
    AMOUNT_TOO_SMALL = "amount_too_small"
    API_KEY_EXPIRED = "api_key_expired"
    AUTHENTICATION_REQUIRED = "authentication_required"
    BALANCE_INSUFFICIENT = "balance_insufficient"
    BANK_ACCOUNT_DECLINED = "bank_account_declined"
    CARD_DECLINE_RATE_LIMIT_EXCEEDED = "card_decline_rate_limit_exceeded"
    CARD_DECLINED = "card_declined"
    CHARGE_ALREADY_CAPTURED = "charge_already_captured"
    CHARGE_ALREADY_REFUNDED = "charge_already_refunded"
    CHARGE_DISPUTED = "charge_disputed"
    CHARGE_EXCEEDS_SOURCE_LIMIT = "charge_exceeds_source_limit"
    CHARGE_EXPIRED_FOR_CAPTURE = "charge_expired_for_capture"
    COUNTRY_UNSUPPORTED = "country_unsupported"
    CUSTOMER_MAX_PAYMENT_METHODS = "customer_max_payment_methods"
    EMAIL_INVALID = "email_invalid"
    EXPIRED_CARD = "expired_card"
    IDEMPOTENCY_KEY_IN_USE = "idempotency_key_in_use"
    INCORRECT_CVC = "incorrect_cvc"
    INCORRECT_NUMBER = "incorrect_number"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_CHARGE_AMOUNT = "invalid_charge_amount"
    INVALID_CVC = "invalid_cvc"
    INVALID_EXPIRY_MONTH = "invalid_expiry_month"
    INVALID_EXPIRY_YEAR = "invalid_expiry_year"
    INVALID_NUMBER = "invalid_number"
    LIVEMODE_MISMATCH = "livemode_mismatch"
    LOCK_TIMEOUT = "lock_timeout"
    MISSING = "missing"
    PARAMETER_INVALID_EMPTY = "parameter_invalid_empty"
    PARAMETER_INVALID_INTEGER = "parameter_invalid_integer"
    PARAMETER_MISSING = "parameter_missing"
    PARAMETER_UNKNOWN = "parameter_unknown"
    PAYMENT_INTENT_UNEXPECTED_STATE = "payment_intent_unexpected_state"
    PAYMENT_METHOD_UNACTIVATED = "payment_method_unactivated"
    PLATFORM_API_KEY_EXPIRED = "platform_api_key_expired"
    PROCESSING_ERROR = "processing_error"
    RATE_LIMIT = "rate_limit"
    REFUND_DISPUTED_PAYMENT = "refund_disputed_payment"
    RESOURCE_ALREADY_EXISTS = "resource_already_exists"
    RESOURCE_MISSING = "resource_missing"
    SECRET_KEY_REQUIRED = "secret_key_required"
    TESTMODE_CHARGES_ONLY = "testmode_charges_only"
    TLS_VERSION_UNSUPPORTED = "tls_version_unsupported"
    TOKEN_ALREADY_USED = "token_already_used"
    TRANSFERS_NOT_ALLOWED = "transfers_not_allowed"
    URL_INVALID = "url_invalid"
    UNKNOWN = "unknown"


class ApiErrorObject(BaseModel):
    """The `error` member of a Stripe error response."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: str
    code: str | None = None
    message: str | None = None
    param: str | None = None
    decline_code: str | None = None
    doc_url: str | None = None
    request_log_url: str | None = None


class ApiErrorEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    error: ApiErrorObject
