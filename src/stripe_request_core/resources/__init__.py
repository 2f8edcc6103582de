"""Representative Stripe resources built on the request core."""

from .refunds import (
    CancelRefund,
    CreateRefund,
    CreateRefundOrigin,
    CreateRefundReason,
    ListRefund,
    Refund,
    RefundReason,
    RefundStatus,
    RetrieveRefund,
    UpdateRefund,
)

__all__ = [
    "CancelRefund",
    "CreateRefund",
    "CreateRefundOrigin",
    "CreateRefundReason",
    "ListRefund",
    "Refund",
    "RefundReason",
    "RefundStatus",
    "RetrieveRefund",
    "UpdateRefund",
]
