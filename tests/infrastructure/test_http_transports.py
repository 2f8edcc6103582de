"""Tests for HTTP transport implementations."""

from unittest.mock import MagicMock

import httpx
import pytest
import requests

from stripe_request_core.exceptions import TransportError
from stripe_request_core.infrastructure import HttpxTransport, RequestsTransport
from stripe_request_core.types import PreparedRequest, StripeMethod


def _prepared() -> PreparedRequest:
    return PreparedRequest(
        method=StripeMethod.POST,
        url="https://api.stripe.test/v1/refunds",
        headers={"Authorization": "Bearer sk_test_123", "Idempotency-Key": "idem-1"},
        body=b"charge=ch_123",
    )


class TestRequestsTransport:
    """Tests for the requests-backed blocking transport."""

    def test_sends_method_url_headers_and_body(self) -> None:
        """The prepared request is passed through to the session unchanged."""
        mock_session = MagicMock(spec=requests.Session)
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.headers = {"Request-Id": "req_1"}
        mock_response.content = b'{"id": "re_1"}'
        mock_session.request.return_value = mock_response

        transport = RequestsTransport(session=mock_session, timeout_seconds=12.0)
        response = transport.send(_prepared())

        mock_session.request.assert_called_once_with(
            "POST",
            "https://api.stripe.test/v1/refunds",
            headers={"Authorization": "Bearer sk_test_123", "Idempotency-Key": "idem-1"},
            data=b"charge=ch_123",
            timeout=12.0,
        )
        assert response.status == 200
        assert response.body == b'{"id": "re_1"}'
        assert response.header("request-id") == "req_1"

    def test_error_statuses_are_returned_not_raised(self) -> None:
        mock_session = MagicMock(spec=requests.Session)
        mock_response = MagicMock()
        mock_response.status_code = 500
        mock_response.headers = {"Stripe-Should-Retry": "true"}
        mock_response.content = b'{"error": {"type": "api_error"}}'
        mock_session.request.return_value = mock_response

        response = RequestsTransport(session=mock_session).send(_prepared())

        assert response.status == 500
        assert response.header("Stripe-Should-Retry") == "true"

    @pytest.mark.parametrize(
        "failure",
        [
            requests.ConnectionError("connection refused"),
            requests.Timeout("read timed out"),
        ],
    )
    def test_request_exceptions_become_transport_errors(
        self, failure: requests.RequestException
    ) -> None:
        mock_session = MagicMock(spec=requests.Session)
        mock_session.request.side_effect = failure

        with pytest.raises(TransportError) as exc_info:
            RequestsTransport(session=mock_session).send(_prepared())

        assert exc_info.value.__cause__ is failure
        assert type(failure).__name__ in exc_info.value.detail

    def test_close_closes_session(self) -> None:
        mock_session = MagicMock(spec=requests.Session)
        RequestsTransport(session=mock_session).close()
        mock_session.close.assert_called_once()


class TestHttpxTransport:
    """Tests for the httpx-backed async transport."""

    @pytest.mark.asyncio
    async def test_sends_request_and_reads_response(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                402,
                headers={"Stripe-Should-Retry": "false"},
                content=b'{"error": {"type": "card_error"}}',
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(client=client)
        response = await transport.send(_prepared())
        await transport.aclose()

        assert response.status == 402
        assert response.header("stripe-should-retry") == "false"
        assert response.body == b'{"error": {"type": "card_error"}}'
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "https://api.stripe.test/v1/refunds"
        assert seen[0].headers["Idempotency-Key"] == "idem-1"
        assert seen[0].content == b"charge=ch_123"

    @pytest.mark.asyncio
    async def test_transport_failures_become_transport_errors(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(TransportError, match="ConnectError"):
            await transport.send(_prepared())

        await transport.aclose()

    @pytest.mark.asyncio
    async def test_corrupt_content_encoding_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                content=b"not gzip",
            )

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

        with pytest.raises(TransportError, match="DecodingError") as exc_info:
            await transport.send(_prepared())

        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)
        await transport.aclose()
