"""Request executor: the retry loop around a single Stripe API call.

Usage example:
    from stripe_request_core.application.executor import execute, prepare_request
    from stripe_request_core.domain.retry_policy import RetryUpTo
    from stripe_request_core.infrastructure import RequestsTransport
    from stripe_request_core.types import RequestDescription, StripeMethod

    prepared = prepare_request(
        RequestDescription(StripeMethod.GET, "/balance"),
        api_base="https://api.stripe.com/v1",
        headers={"Authorization": "Bearer sk_test_123"},
    )
    balance = execute(RequestsTransport(), prepared, RetryUpTo(3), dict[str, object])
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping

from ..domain.retry_policy import AttemptOutcome, RetryPolicy, Stop
from ..exceptions import PolicyMisconfiguredError, StripeError, TransportError
from ..observability import get_logger
from ..protocols import AsyncTransport, BlockingTransport
from ..types import PreparedRequest, RequestDescription, TransportResponse
from .classification import classify_error_response, decode_success, parse_should_retry

logger = get_logger("stripe_request_core.executor")

IDEMPOTENCY_HEADER = "Idempotency-Key"
STRIPE_ACCOUNT_HEADER = "Stripe-Account"


def prepare_request(
    description: RequestDescription,
    *,
    api_base: str,
    headers: Mapping[str, str] | None = None,
) -> PreparedRequest:
    """Resolve a description into the exact request every attempt will send.

    The body is materialised here, once, and the idempotency key is attached as a
    header here, once; the retry loop never rebuilds either.
    """
    url = api_base.rstrip("/") + "/" + description.path.lstrip("/")
    query = description.query_string()
    if query:
        url = f"{url}?{query}"

    merged: dict[str, str] = dict(headers or {})
    content_type = description.resolved_content_type()
    if content_type is not None:
        merged["Content-Type"] = content_type
    if description.idempotency_key is not None:
        merged[IDEMPOTENCY_HEADER] = description.idempotency_key
    if description.stripe_account is not None:
        merged[STRIPE_ACCOUNT_HEADER] = description.stripe_account

    return PreparedRequest(
        method=description.method,
        url=url,
        headers=merged,
        body=description.body_bytes(),
    )


class _AttemptState:
    """Mutable bookkeeping for one logical call; never leaves the executor."""

    def __init__(self) -> None:
        self.attempts = 0
        self.status: int | None = None
        self.should_retry: bool | None = None
        self.last_error: StripeError | None = None

    def outcome(self) -> AttemptOutcome:
        return AttemptOutcome(
            status=self.status,
            should_retry=self.should_retry,
            attempts=self.attempts,
        )

    def record_transport_error(self, error: TransportError) -> None:
        self.attempts += 1
        self.status = None
        self.should_retry = None
        self.last_error = error

    def record_error_response(self, response: TransportResponse) -> None:
        self.attempts += 1
        self.status = response.status
        self.should_retry = parse_should_retry(response.headers)
        self.last_error = classify_error_response(response.status, response.body)

    def stop(self, request: PreparedRequest, policy: RetryPolicy) -> StripeError:
        if self.last_error is None:
            return PolicyMisconfiguredError(policy)
        logger.info(
            "Giving up on %s %s after %s attempt(s): %s",
            request.method,
            _redact(request.url),
            self.attempts,
            self.last_error,
        )
        return self.last_error


def _redact(url: str) -> str:
    return url.split("?", 1)[0]


def _log_retry(request: PreparedRequest, state: _AttemptState, delay: float | None) -> None:
    if state.attempts == 0:
        return
    logger.warning(
        "Retrying %s %s (attempt %s, last status=%s, should_retry=%s, delay=%ss)",
        request.method,
        _redact(request.url),
        state.attempts + 1,
        state.status,
        state.should_retry,
        delay or 0,
    )


def send_with_retries(
    transport: BlockingTransport,
    request: PreparedRequest,
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> TransportResponse:
    """Send until a 2xx response arrives or the policy says stop.

    Raises:
        StripeError: The last recorded error once the policy stops, or
            `PolicyMisconfiguredError` if the policy never allowed an attempt.
    """
    state = _AttemptState()
    while True:
        decision = policy.decide(state.outcome())
        if isinstance(decision, Stop):
            raise state.stop(request, policy)

        _log_retry(request, state, decision.delay_seconds)
        if decision.delay_seconds:
            sleep(decision.delay_seconds)

        logger.debug("Sending %s %s", request.method, _redact(request.url))
        try:
            response = transport.send(request)
        except TransportError as exc:
            state.record_transport_error(exc)
            continue

        if response.is_success:
            return response
        state.record_error_response(response)


async def send_with_retries_async(
    transport: AsyncTransport,
    request: PreparedRequest,
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> TransportResponse:
    """Async twin of `send_with_retries`; suspends instead of blocking between attempts."""
    state = _AttemptState()
    while True:
        decision = policy.decide(state.outcome())
        if isinstance(decision, Stop):
            raise state.stop(request, policy)

        _log_retry(request, state, decision.delay_seconds)
        if decision.delay_seconds:
            await sleep(decision.delay_seconds)

        logger.debug("Sending %s %s", request.method, _redact(request.url))
        try:
            response = await transport.send(request)
        except TransportError as exc:
            state.record_transport_error(exc)
            continue

        if response.is_success:
            return response
        state.record_error_response(response)


def execute[OutputT](
    transport: BlockingTransport,
    request: PreparedRequest,
    policy: RetryPolicy,
    output_type: type[OutputT],
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> OutputT:
    """Run one logical call to completion and decode the result.

    Encoding and schema failures on a 2xx body are raised straight away; they are
    never retried.
    """
    response = send_with_retries(transport, request, policy, sleep=sleep)
    return decode_success(response, output_type)


async def execute_async[OutputT](
    transport: AsyncTransport,
    request: PreparedRequest,
    policy: RetryPolicy,
    output_type: type[OutputT],
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> OutputT:
    response = await send_with_retries_async(transport, request, policy, sleep=sleep)
    return decode_success(response, output_type)
