"""Protocol definitions for dependency injection.

The executor depends only on these capabilities, so it can run against `requests`,
`httpx`, or a scripted fake in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from .types import PreparedRequest, RequestDescription, TransportResponse


@runtime_checkable
class BlockingTransport(Protocol):
    """Abstract blocking HTTP transport, safe to share between calls."""

    def send(self, request: PreparedRequest) -> TransportResponse:
        """Send one request and return the full response.

        Raises:
            TransportError: If no response was received (connection, DNS, timeout).
        """
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Abstract asynchronous HTTP transport, safe to share between tasks."""

    async def send(self, request: PreparedRequest) -> TransportResponse:
        """Send one request and return the full response.

        Raises:
            TransportError: If no response was received (connection, DNS, timeout).
        """
        ...


@runtime_checkable
class StripeRequest[OutputT](Protocol):
    """A resource request builder: knows its HTTP shape and its response type."""

    @property
    def output_type(self) -> type[OutputT]:
        """Type the success body is deserialised into."""
        ...

    def build(self) -> RequestDescription:
        """Return the method, path and parameters for this call."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading config files."""

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...

    def read_text(self, path: Path) -> str:
        """Read text file."""
        ...
