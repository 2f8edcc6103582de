"""Concrete infrastructure implementations."""

from .io.filesystem import LocalFileSystem
from .io.http import HttpxTransport, RequestsTransport

__all__ = [
    "HttpxTransport",
    "LocalFileSystem",
    "RequestsTransport",
]
