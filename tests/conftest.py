"""Pytest fixtures shared by the test suite.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket
from collections.abc import Iterator

import pytest

from stripe_request_core.config import ClientConfig
from tests.fakes import SleepRecorder
from tests.support.errors import NetworkIsolationError


def _blocked_socket_connect(self: socket.socket, *args: object, **kwargs: object) -> None:
    raise NetworkIsolationError(repr(args))


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Block all network access in tests.

    Tests that need HTTP should use FakeTransport, FakeAsyncTransport, a
    MagicMock session, or httpx.MockTransport.
    """
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)
    yield


@pytest.fixture
def client_config() -> ClientConfig:
    """Config with zero backoff so retry tests never sleep for real."""
    return ClientConfig(
        api_key="sk_test_123",
        api_base="https://api.stripe.test",
        api_version="2024-06-20",
        max_attempts=3,
        backoff_factor=0.0,
    )


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
