"""Blocking and async Stripe clients.

A client owns one long-lived transport and the configuration used to turn request
descriptions into authenticated HTTP requests. Clients are safe to share across
threads (blocking) or tasks (async); they hold no per-call state.

Usage example:
    from stripe_request_core.client import StripeClient
    from stripe_request_core.config import ClientConfig
    from stripe_request_core.resources.refunds import CreateRefund

    client = StripeClient(config=ClientConfig.from_env())
    refund = client.send(CreateRefund().charge("ch_123").amount(500))
"""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Self

from . import __version__
from .application.executor import execute, execute_async, prepare_request
from .config import ClientConfig
from .domain.retry_policy import RetryPolicy, allows_retry
from .exceptions import MissingApiKeyError
from .infrastructure import HttpxTransport, RequestsTransport
from .protocols import AsyncTransport, BlockingTransport, StripeRequest
from .types import PreparedRequest, RequestDescription, StripeMethod


class _ClientBase:
    def __init__(self, *, config: ClientConfig) -> None:
        if not config.api_key:
            raise MissingApiKeyError()
        self.config = config

    def default_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "User-Agent": f"{self.config.user_agent}/{__version__}",
            "Accept": "application/json",
        }
        if self.config.api_version:
            headers["Stripe-Version"] = self.config.api_version
        return headers

    def resolve_policy(self, policy: RetryPolicy | None) -> RetryPolicy:
        return self.config.retry_policy() if policy is None else policy

    def prepare(self, description: RequestDescription, policy: RetryPolicy) -> PreparedRequest:
        """Resolve headers and body for one logical call.

        A retryable POST without an idempotency key gets a fresh UUID4 key here, so
        every attempt of this call carries the same key.
        """
        if (
            description.method is StripeMethod.POST
            and description.idempotency_key is None
            and allows_retry(policy)
        ):
            description = description.with_idempotency_key(str(uuid.uuid4()))
        if description.stripe_account is None and self.config.stripe_account:
            description = description.with_stripe_account(self.config.stripe_account)
        return prepare_request(
            description,
            api_base=self.config.versioned_base,
            headers=self.default_headers(),
        )


class StripeClient(_ClientBase):
    """Blocking client: each call blocks the calling thread until it completes."""

    def __init__(
        self,
        *,
        config: ClientConfig,
        transport: BlockingTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(config=config)
        self._owned_transport: RequestsTransport | None = None
        if transport is None:
            self._owned_transport = RequestsTransport(timeout_seconds=config.timeout_seconds)
            transport = self._owned_transport
        self.transport = transport
        self._sleep = sleep

    def close(self) -> None:
        """Close the transport if this client created it; injected ones belong to the caller."""
        if self._owned_transport is not None:
            self._owned_transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def execute[OutputT](
        self,
        description: RequestDescription,
        output_type: type[OutputT],
        policy: RetryPolicy | None = None,
    ) -> OutputT:
        resolved = self.resolve_policy(policy)
        prepared = self.prepare(description, resolved)
        return execute(self.transport, prepared, resolved, output_type, sleep=self._sleep)

    def send[OutputT](
        self,
        request: StripeRequest[OutputT],
        policy: RetryPolicy | None = None,
    ) -> OutputT:
        """Send a resource request and return its deserialised response."""
        return self.execute(request.build(), request.output_type, policy)


class AsyncStripeClient(_ClientBase):
    """Async client: each call runs as one task and suspends while waiting."""

    def __init__(
        self,
        *,
        config: ClientConfig,
        transport: AsyncTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(config=config)
        self._owned_transport: HttpxTransport | None = None
        if transport is None:
            self._owned_transport = HttpxTransport(timeout_seconds=config.timeout_seconds)
            transport = self._owned_transport
        self.transport = transport
        self._sleep = sleep

    async def aclose(self) -> None:
        """Close the transport if this client created it; injected ones belong to the caller."""
        if self._owned_transport is not None:
            await self._owned_transport.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def execute[OutputT](
        self,
        description: RequestDescription,
        output_type: type[OutputT],
        policy: RetryPolicy | None = None,
    ) -> OutputT:
        resolved = self.resolve_policy(policy)
        prepared = self.prepare(description, resolved)
        return await execute_async(
            self.transport, prepared, resolved, output_type, sleep=self._sleep
        )

    async def send[OutputT](
        self,
        request: StripeRequest[OutputT],
        policy: RetryPolicy | None = None,
    ) -> OutputT:
        """Send a resource request and return its deserialised response."""
        return await self.execute(request.build(), request.output_type, policy)
