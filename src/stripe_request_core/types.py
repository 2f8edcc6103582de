"""Request and response value types shared by the executor and transports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Self

from .encoding import ParamPairs, encode_params, urlencode_pairs

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


class StripeMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RequestDescription:
    """One Stripe API call, as produced by a resource request builder.

    Immutable: every builder helper returns a new description. The idempotency key,
    once set, travels unchanged through every retry of the call.

    Usage example:
        description = (
            RequestDescription(StripeMethod.POST, "/refunds")
            .form_params({"charge": "ch_123", "metadata": {"order": "42"}})
            .with_idempotency_key("refund-ch_123")
        )
    """

    method: StripeMethod
    path: str
    query: ParamPairs = ()
    form: ParamPairs = ()
    body: bytes | None = None
    content_type: str | None = None
    idempotency_key: str | None = None
    stripe_account: str | None = None

    def query_params(self, params: Mapping[str, object]) -> Self:
        return replace(self, query=self.query + encode_params(params))

    def form_params(self, params: Mapping[str, object]) -> Self:
        return replace(
            self, form=self.form + encode_params(params), body=None, content_type=None
        )

    def json_body(self, payload: bytes) -> Self:
        return replace(self, body=payload, form=(), content_type=JSON_CONTENT_TYPE)

    def with_idempotency_key(self, key: str) -> Self:
        return replace(self, idempotency_key=key)

    def with_stripe_account(self, account: str) -> Self:
        return replace(self, stripe_account=account)

    def query_string(self) -> str:
        return urlencode_pairs(self.query)

    def body_bytes(self) -> bytes | None:
        """Materialise the request body; None for bodiless requests."""
        if self.body is not None:
            return self.body
        if self.form:
            return urlencode_pairs(self.form).encode("utf-8")
        return None

    def resolved_content_type(self) -> str | None:
        if self.content_type is not None:
            return self.content_type
        if self.form:
            return FORM_CONTENT_TYPE
        return None


def _empty_headers() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class PreparedRequest:
    """A fully resolved HTTP request, ready for a transport to send.

    Built once per logical call and re-sent unchanged on every attempt.
    """

    method: StripeMethod
    url: str
    headers: Mapping[str, str] = field(default_factory=_empty_headers)
    body: bytes | None = None

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and full body of one HTTP response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=_empty_headers)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None
