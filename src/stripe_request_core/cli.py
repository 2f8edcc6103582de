"""CLI for the Stripe request core.

Commands:
- request: Send one raw API request through the retrying executor
- version: Print the installed package version
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich import print_json

from . import __version__
from .client import StripeClient
from .config import ClientConfig
from .config_file import load_client_config_file
from .domain.retry_policy import Once, RetryPolicy
from .exceptions import ApiError, StripeError
from .protocols import BlockingTransport, FileSystem
from .types import RequestDescription, StripeMethod


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: ClientConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    build_transport: Callable[[ClientConfig], BlockingTransport]


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: ClientConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, *, config: ClientConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class UnsupportedMethodError(typer.BadParameter):
    """Raised when the HTTP method is not one Stripe accepts."""

    def __init__(self, method: str) -> None:
        allowed = ", ".join(m.value for m in StripeMethod)
        super().__init__(f"Unsupported method {method!r}; expected one of {allowed}.")


class InvalidParamError(typer.BadParameter):
    """Raised when a --param value is not in key=value form."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Expected key=value, got {value!r}.")


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the stripe-request entry point.")


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _parse_method(method: str) -> StripeMethod:
    try:
        return StripeMethod(method.strip().upper())
    except ValueError as exc:
        raise UnsupportedMethodError(method) from exc


def _parse_params(values: list[str] | None) -> dict[str, object]:
    params: dict[str, object] = {}
    for value in values or []:
        key, sep, item = value.partition("=")
        if not sep or not key.strip():
            raise InvalidParamError(value)
        params[key.strip()] = item
    return params


def _report_error(error: StripeError) -> None:
    if isinstance(error, ApiError):
        rprint(f"[red]✗ Stripe API error[/red] (HTTP {error.http_status})")
        rprint(f"  Type: {error.raw_type or error.error_type}")
        rprint(f"  Code: {error.raw_code or '-'}")
        rprint(f"  Message: {error.message or '-'}")
        if error.request_log_url:
            rprint(f"  Log: {error.request_log_url}")
        return
    rprint(f"[red]✗ {type(error).__name__}:[/red] {error}")


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Send Stripe API requests with idempotent retries.",
    )

    @app.callback()
    def main(ctx: typer.Context) -> None:
        """Initialise CLI context."""
        ctx.obj = CliContext(config=ClientConfig.from_env(), deps_builder=deps_builder)

    @app.command()
    def request(
        ctx: typer.Context,
        method: Annotated[str, typer.Argument(help="HTTP method: GET, POST or DELETE")],
        path: Annotated[str, typer.Argument(help="Resource path under /v1, e.g. /refunds")],
        param: Annotated[
            list[str] | None,
            typer.Option("--param", "-d", help="Parameter as key=value (repeatable)"),
        ] = None,
        idempotency_key: Annotated[
            str | None,
            typer.Option("--idempotency-key", help="Idempotency key reused across retries"),
        ] = None,
        max_attempts: Annotated[
            int | None,
            typer.Option("--max-attempts", min=1, help="Override STRIPE_MAX_ATTEMPTS"),
        ] = None,
        once: Annotated[
            bool,
            typer.Option("--once", help="Send exactly one attempt"),
        ] = False,
        account: Annotated[
            str | None,
            typer.Option("--account", help="Connected account id (Stripe-Account header)"),
        ] = None,
        api_key: Annotated[
            str | None,
            typer.Option("--api-key", help="Override STRIPE_SECRET_KEY"),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option("--config", help="Path to a client TOML config file"),
        ] = None,
    ) -> None:
        """Send one request and print the JSON response."""
        state = _get_context(ctx)
        stripe_method = _parse_method(method)
        params = _parse_params(param)

        config = state.config
        deps = state.build_dependencies(config=config)
        try:
            if config_path is not None:
                config = config.with_file_overrides(
                    load_client_config_file(path=config_path, fs=deps.fs)
                )
            config = config.with_overrides(
                api_key=api_key,
                stripe_account=account,
                max_attempts=max_attempts,
            )

            description = RequestDescription(stripe_method, path)
            if params:
                if stripe_method is StripeMethod.POST:
                    description = description.form_params(params)
                else:
                    description = description.query_params(params)
            if idempotency_key:
                description = description.with_idempotency_key(idempotency_key)

            policy: RetryPolicy | None = Once() if once else None
            client = StripeClient(config=config, transport=deps.build_transport(config))
            result = client.execute(description, dict[str, object], policy)
        except StripeError as exc:
            _report_error(exc)
            raise typer.Exit(code=1) from exc

        print_json(json.dumps(result))

    @app.command()
    def version() -> None:
        """Print the installed version."""
        rprint(__version__)

    return app
