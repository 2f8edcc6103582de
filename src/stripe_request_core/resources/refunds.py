"""Refund resource: response model and request builders.

Each builder keeps its parameters in a private frozen params object; setters return a
new builder, and `build()` turns the parameters into a `RequestDescription`.

Usage example:
    from stripe_request_core.resources.refunds import CreateRefund, CreateRefundReason

    request = (
        CreateRefund()
        .charge("ch_123")
        .amount(500)
        .reason(CreateRefundReason.REQUESTED_BY_CUSTOMER)
        .metadata({"order": "42"})
    )
    refund = client.send(request)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..application.pagination import ListPaginator, StripeList
from ..domain.api_errors import OpenEnum
from ..types import RequestDescription, StripeMethod

if TYPE_CHECKING:
    from _typeshed import DataclassInstance

type RangeQuery = int | Mapping[str, int]


class RefundStatus(OpenEnum, StrEnum):
    CANCELED = "canceled"
    FAILED = "failed"
    PENDING = "pending"
    REQUIRES_ACTION = "requires_action"
    SUCCEEDED = "succeeded"
    UNKNOWN = "unknown"


class RefundReason(OpenEnum, StrEnum):
    DUPLICATE = "duplicate"
    EXPIRED_UNCAPTURED_CHARGE = "expired_uncaptured_charge"
    FRAUDULENT = "fraudulent"
    REQUESTED_BY_CUSTOMER = "requested_by_customer"
    UNKNOWN = "unknown"


class CreateRefundReason(StrEnum):
    """Reasons a caller may give when creating a refund."""

    DUPLICATE = "duplicate"
    FRAUDULENT = "fraudulent"
    REQUESTED_BY_CUSTOMER = "requested_by_customer"


class CreateRefundOrigin(StrEnum):
    CUSTOMER_BALANCE = "customer_balance"


class Refund(BaseModel):
    """A Stripe refund object (the fields this client relies on)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    object: str = "refund"
    amount: int
    currency: str
    created: int
    status: RefundStatus | None = None
    reason: RefundReason | None = None
    charge: str | None = None
    payment_intent: str | None = None
    failure_reason: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: object) -> object:
        return RefundStatus.parse(value) if isinstance(value, str) else value

    @field_validator("reason", mode="before")
    @classmethod
    def _parse_reason(cls, value: object) -> object:
        return RefundReason.parse(value) if isinstance(value, str) else value


def _params(inner: DataclassInstance) -> dict[str, object]:
    return asdict(inner)


@dataclass(frozen=True)
class _ListRefundParams:
    charge: str | None = None
    created: RangeQuery | None = None
    ending_before: str | None = None
    expand: tuple[str, ...] | None = None
    limit: int | None = None
    payment_intent: str | None = None
    starting_after: str | None = None


@dataclass(frozen=True)
class ListRefund:
    """Returns a list of all refunds you created, most recent first."""

    inner: _ListRefundParams = field(default_factory=_ListRefundParams)
    output_type: ClassVar[type[StripeList[Refund]]] = StripeList[Refund]

    def charge(self, charge: str) -> Self:
        """Only return refunds for the charge specified by this charge ID."""
        return replace(self, inner=replace(self.inner, charge=charge))

    def created(self, created: RangeQuery) -> Self:
        return replace(self, inner=replace(self.inner, created=created))

    def ending_before(self, ending_before: str) -> Self:
        return replace(self, inner=replace(self.inner, ending_before=ending_before))

    def expand(self, *fields: str) -> Self:
        return replace(self, inner=replace(self.inner, expand=fields))

    def limit(self, limit: int) -> Self:
        """A limit on the number of objects to be returned, between 1 and 100."""
        return replace(self, inner=replace(self.inner, limit=limit))

    def payment_intent(self, payment_intent: str) -> Self:
        return replace(self, inner=replace(self.inner, payment_intent=payment_intent))

    def starting_after(self, starting_after: str) -> Self:
        return replace(self, inner=replace(self.inner, starting_after=starting_after))

    def build(self) -> RequestDescription:
        return RequestDescription(StripeMethod.GET, "/refunds").query_params(_params(self.inner))

    def paginate(self) -> ListPaginator[Refund]:
        return ListPaginator(self.build(), Refund)


@dataclass(frozen=True)
class _ExpandParams:
    expand: tuple[str, ...] | None = None


@dataclass(frozen=True)
class RetrieveRefund:
    """Retrieves the details of an existing refund."""

    refund: str
    inner: _ExpandParams = field(default_factory=_ExpandParams)
    output_type: ClassVar[type[Refund]] = Refund

    def expand(self, *fields: str) -> Self:
        return replace(self, inner=replace(self.inner, expand=fields))

    def build(self) -> RequestDescription:
        return RequestDescription(StripeMethod.GET, f"/refunds/{self.refund}").query_params(
            _params(self.inner)
        )


@dataclass(frozen=True)
class _CreateRefundParams:
    amount: int | None = None
    charge: str | None = None
    currency: str | None = None
    customer: str | None = None
    expand: tuple[str, ...] | None = None
    instructions_email: str | None = None
    metadata: Mapping[str, str] | None = None
    origin: CreateRefundOrigin | None = None
    payment_intent: str | None = None
    reason: CreateRefundReason | None = None
    refund_application_fee: bool | None = None
    reverse_transfer: bool | None = None


@dataclass(frozen=True)
class CreateRefund:
    """Create a refund for a charge or PaymentIntent.

    Pass an idempotency key with `idempotency_key()` to make retries of this call
    safe against duplicate refunds; otherwise the client generates one per call when
    its policy allows retries.
    """

    inner: _CreateRefundParams = field(default_factory=_CreateRefundParams)
    key: str | None = None
    output_type: ClassVar[type[Refund]] = Refund

    def amount(self, amount: int) -> Self:
        return replace(self, inner=replace(self.inner, amount=amount))

    def charge(self, charge: str) -> Self:
        """The identifier of the charge to refund."""
        return replace(self, inner=replace(self.inner, charge=charge))

    def currency(self, currency: str) -> Self:
        """Three-letter ISO currency code, in lowercase."""
        return replace(self, inner=replace(self.inner, currency=currency.lower()))

    def customer(self, customer: str) -> Self:
        return replace(self, inner=replace(self.inner, customer=customer))

    def expand(self, *fields: str) -> Self:
        return replace(self, inner=replace(self.inner, expand=fields))

    def instructions_email(self, email: str) -> Self:
        return replace(self, inner=replace(self.inner, instructions_email=email))

    def metadata(self, metadata: Mapping[str, str]) -> Self:
        return replace(self, inner=replace(self.inner, metadata=dict(metadata)))

    def origin(self, origin: CreateRefundOrigin) -> Self:
        return replace(self, inner=replace(self.inner, origin=origin))

    def payment_intent(self, payment_intent: str) -> Self:
        return replace(self, inner=replace(self.inner, payment_intent=payment_intent))

    def reason(self, reason: CreateRefundReason) -> Self:
        return replace(self, inner=replace(self.inner, reason=reason))

    def refund_application_fee(self, refund: bool) -> Self:
        return replace(self, inner=replace(self.inner, refund_application_fee=refund))

    def reverse_transfer(self, reverse: bool) -> Self:
        return replace(self, inner=replace(self.inner, reverse_transfer=reverse))

    def idempotency_key(self, key: str) -> Self:
        return replace(self, key=key)

    def build(self) -> RequestDescription:
        description = RequestDescription(StripeMethod.POST, "/refunds").form_params(
            _params(self.inner)
        )
        if self.key is not None:
            description = description.with_idempotency_key(self.key)
        return description


@dataclass(frozen=True)
class _UpdateRefundParams:
    expand: tuple[str, ...] | None = None
    metadata: Mapping[str, str] | None = None


@dataclass(frozen=True)
class UpdateRefund:
    """Updates the metadata of a refund; other fields cannot be changed."""

    refund: str
    inner: _UpdateRefundParams = field(default_factory=_UpdateRefundParams)
    output_type: ClassVar[type[Refund]] = Refund

    def expand(self, *fields: str) -> Self:
        return replace(self, inner=replace(self.inner, expand=fields))

    def metadata(self, metadata: Mapping[str, str]) -> Self:
        return replace(self, inner=replace(self.inner, metadata=dict(metadata)))

    def build(self) -> RequestDescription:
        return RequestDescription(StripeMethod.POST, f"/refunds/{self.refund}").form_params(
            _params(self.inner)
        )


@dataclass(frozen=True)
class CancelRefund:
    """Cancels a refund with a status of `requires_action`."""

    refund: str
    inner: _ExpandParams = field(default_factory=_ExpandParams)
    output_type: ClassVar[type[Refund]] = Refund

    def expand(self, *fields: str) -> Self:
        return replace(self, inner=replace(self.inner, expand=fields))

    def build(self) -> RequestDescription:
        return RequestDescription(
            StripeMethod.POST, f"/refunds/{self.refund}/cancel"
        ).form_params(_params(self.inner))
