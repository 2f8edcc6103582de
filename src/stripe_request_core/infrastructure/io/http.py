"""HTTP transport implementations.

Usage example:
    import httpx
    import requests

    from stripe_request_core.infrastructure.io.http import HttpxTransport, RequestsTransport

    blocking = RequestsTransport(session=requests.Session(), timeout_seconds=80.0)
    async_transport = HttpxTransport(client=httpx.AsyncClient(timeout=80.0))
"""

from __future__ import annotations

from typing import override

import httpx
import requests

from ...exceptions import TransportError
from ...protocols import AsyncTransport, BlockingTransport
from ...types import PreparedRequest, TransportResponse


def _describe(error: Exception) -> str:
    return f"{type(error).__name__}: {error}"


class RequestsTransport(BlockingTransport):
    """Blocking transport backed by a shared `requests.Session`.

    The session owns connection pooling; this class only sends and never mutates it.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout_seconds: float = 80.0,
    ) -> None:
        self._session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    @override
    def send(self, request: PreparedRequest) -> TransportResponse:
        try:
            response = self._session.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=self.timeout_seconds,
            )
            body = response.content
        except requests.RequestException as exc:
            raise TransportError(_describe(exc)) from exc
        return TransportResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=body,
        )

    def close(self) -> None:
        self._session.close()


class HttpxTransport(AsyncTransport):
    """Async transport backed by a shared `httpx.AsyncClient`."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 80.0,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))

    @override
    async def send(self, request: PreparedRequest) -> TransportResponse:
        try:
            response = await self._client.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                content=request.body,
            )
        except httpx.RequestError as exc:
            raise TransportError(_describe(exc)) from exc
        return TransportResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
