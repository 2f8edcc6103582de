"""Retry policies for Stripe requests.

A policy is a pure value: given the outcome of the latest attempt it says whether to
stop or to send again, optionally after a delay. It never performs IO.

Usage example:
    from stripe_request_core.domain.retry_policy import AttemptOutcome, RetryUpTo

    policy = RetryUpTo(max_attempts=3)
    policy.decide(AttemptOutcome())  # Continue(delay_seconds=None)
    policy.decide(AttemptOutcome(status=500, attempts=1))  # Continue(delay_seconds=0.5)
"""

from __future__ import annotations

from dataclasses import dataclass

# Client errors still retried when `stop_on_client_errors` is set.
RETRYABLE_CLIENT_STATUSES: tuple[int, ...] = (409, 429)


@dataclass(frozen=True)
class AttemptOutcome:
    """What the executor knows after the latest attempt.

    `status` is None when no response has been seen (first attempt, or the last
    attempt failed in the transport). `should_retry` mirrors the
    `Stripe-Should-Retry` header: None when absent.
    """

    status: int | None = None
    should_retry: bool | None = None
    attempts: int = 0


@dataclass(frozen=True)
class Stop:
    """Stop sending and surface the last error."""


@dataclass(frozen=True)
class Continue:
    """Send another attempt, after `delay_seconds` if set."""

    delay_seconds: float | None = None


type Decision = Stop | Continue


def _single_attempt(outcome: AttemptOutcome) -> Decision:
    if outcome.attempts == 0:
        return Continue()
    return Stop()


@dataclass(frozen=True)
class Once:
    """Send exactly one attempt, whatever the outcome."""

    def decide(self, outcome: AttemptOutcome) -> Decision:
        return _single_attempt(outcome)


@dataclass(frozen=True)
class NoRetry:
    """Send exactly one attempt.

    Behaves like `Once`; use it where the call site wants to state that retrying
    would be wrong, not merely unnecessary.
    """

    def decide(self, outcome: AttemptOutcome) -> Decision:
        return _single_attempt(outcome)


@dataclass(frozen=True)
class RetryUpTo:
    """Send up to `max_attempts` attempts with capped exponential backoff.

    The delay before attempt k+1 (k attempts made) is
    `min(max_backoff_seconds, backoff_factor * 2 ** (k - 1))`, which never decreases
    and never exceeds the cap.

    Every non-2xx status is retried until the budget runs out. With
    `stop_on_client_errors`, a 4xx other than 409 or 429 stops at once unless
    Stripe sends `Stripe-Should-Retry: true`.
    """

    max_attempts: int
    backoff_factor: float = 0.5
    max_backoff_seconds: float = 8.0
    stop_on_client_errors: bool = False

    def compute_backoff(self, attempts: int) -> float:
        """Return the delay before the next attempt, given attempts made so far."""
        if attempts <= 0:
            return 0.0
        return float(min(self.max_backoff_seconds, self.backoff_factor * (2 ** (attempts - 1))))

    def decide(self, outcome: AttemptOutcome) -> Decision:
        if outcome.attempts == 0:
            return Continue() if self.max_attempts > 0 else Stop()

        # An explicit "do not retry" from Stripe wins over everything else.
        if outcome.should_retry is False:
            return Stop()

        status = outcome.status
        if (
            self.stop_on_client_errors
            and outcome.should_retry is None
            and status is not None
            and 400 <= status < 500
            and status not in RETRYABLE_CLIENT_STATUSES
        ):
            return Stop()

        if outcome.attempts >= self.max_attempts:
            return Stop()

        delay = self.compute_backoff(outcome.attempts)
        return Continue(delay if delay > 0 else None)


type RetryPolicy = Once | NoRetry | RetryUpTo


def allows_retry(policy: RetryPolicy) -> bool:
    """Return True if the policy can ever send more than one attempt."""
    return isinstance(policy, RetryUpTo) and policy.max_attempts > 1
