"""Exports for test fakes."""

from .filesystem import InMemoryFileSystem
from .http import (
    AsyncSleepRecorder,
    FakeAsyncTransport,
    FakeTransport,
    SleepRecorder,
    json_response,
    stripe_error_response,
)

__all__ = [
    "AsyncSleepRecorder",
    "FakeAsyncTransport",
    "FakeTransport",
    "InMemoryFileSystem",
    "SleepRecorder",
    "json_response",
    "stripe_error_response",
]
