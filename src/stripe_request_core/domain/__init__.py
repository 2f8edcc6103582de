"""Domain modules for the request core."""

from .api_errors import ApiErrorCode, ApiErrorType
from .retry_policy import AttemptOutcome, Continue, NoRetry, Once, RetryPolicy, RetryUpTo, Stop

__all__ = [
    "ApiErrorCode",
    "ApiErrorType",
    "AttemptOutcome",
    "Continue",
    "NoRetry",
    "Once",
    "RetryPolicy",
    "RetryUpTo",
    "Stop",
]
