"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from .cli import CliDependencies, create_app
from .config import ClientConfig
from .infrastructure import LocalFileSystem, RequestsTransport
from .protocols import BlockingTransport


def _build_transport(config: ClientConfig) -> BlockingTransport:
    return RequestsTransport(timeout_seconds=config.timeout_seconds)


def build_cli_dependencies(*, config: ClientConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Client configuration; transports are built per command from the
            effective config so file and flag overrides apply to timeouts.
    """
    _ = config
    return CliDependencies(fs=LocalFileSystem(), build_transport=_build_transport)


app = create_app(build_cli_dependencies)
