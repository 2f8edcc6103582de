"""Tests for CLI wiring and overrides."""

import re
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from stripe_request_core import __version__, cli
from stripe_request_core.cli import CliDependencies
from stripe_request_core.config import ClientConfig
from stripe_request_core.protocols import BlockingTransport
from tests.fakes import FakeTransport, InMemoryFileSystem, json_response, stripe_error_response

runner = CliRunner()
_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE_RE.sub("", text)


def _patch_config(monkeypatch: pytest.MonkeyPatch, config: ClientConfig) -> None:
    def fake_from_env(cls: type[ClientConfig], dotenv_path: str | None = None) -> ClientConfig:
        _ = (cls, dotenv_path)
        return config

    monkeypatch.setattr(cli.ClientConfig, "from_env", classmethod(fake_from_env))


class _Harness:
    """Captures the transport and effective config each command builds."""

    def __init__(self, transport: FakeTransport, fs: InMemoryFileSystem | None = None) -> None:
        self.transport = transport
        self.fs = fs or InMemoryFileSystem()
        self.configs: list[ClientConfig] = []

    def _build_transport(self, config: ClientConfig) -> BlockingTransport:
        self.configs.append(config)
        return self.transport

    def build_dependencies(self, *, config: ClientConfig) -> CliDependencies:
        _ = config
        return CliDependencies(fs=self.fs, build_transport=self._build_transport)

    def app(self) -> typer.Typer:
        return cli.create_app(self.build_dependencies)


@pytest.fixture
def cli_config(monkeypatch: pytest.MonkeyPatch) -> ClientConfig:
    config = ClientConfig(api_key="sk_test_cli", api_base="https://api.stripe.test", backoff_factor=0.0)
    _patch_config(monkeypatch, config)
    return config


def test_version_command_prints_package_version(cli_config: ClientConfig) -> None:
    harness = _Harness(FakeTransport())

    result = runner.invoke(harness.app(), ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_get_request_sends_query_and_prints_json(cli_config: ClientConfig) -> None:
    harness = _Harness(FakeTransport().queue(json_response({"object": "list", "data": []})))

    result = runner.invoke(
        harness.app(), ["request", "get", "/refunds", "-d", "limit=3", "-d", "charge=ch_1"]
    )

    assert result.exit_code == 0, result.stdout
    (request,) = harness.transport.requests
    assert request.url == "https://api.stripe.test/v1/refunds?limit=3&charge=ch_1"
    assert request.body is None
    assert '"object": "list"' in _strip_ansi(result.stdout)


def test_post_request_sends_form_body_and_idempotency_key(cli_config: ClientConfig) -> None:
    harness = _Harness(
        FakeTransport().queue(stripe_error_response(500), json_response({"id": "re_1"}))
    )

    result = runner.invoke(
        harness.app(),
        [
            "request",
            "POST",
            "/refunds",
            "--param",
            "charge=ch_123",
            "--idempotency-key",
            "cli-key-1",
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert len(harness.transport.requests) == 2
    for request in harness.transport.requests:
        assert request.body == b"charge=ch_123"
        assert request.header("Idempotency-Key") == "cli-key-1"


def test_once_flag_sends_single_attempt_and_reports_error(cli_config: ClientConfig) -> None:
    harness = _Harness(
        FakeTransport(repeat_last=True).queue(
            stripe_error_response(500, code="lock_timeout", message="Try again later.")
        )
    )

    result = runner.invoke(harness.app(), ["request", "POST", "/refunds", "--once"])

    assert result.exit_code == 1
    assert len(harness.transport.requests) == 1
    output = _strip_ansi(result.stdout)
    assert "Stripe API error" in output
    assert "HTTP 500" in output
    assert "lock_timeout" in output


def test_overrides_are_applied_to_config(cli_config: ClientConfig) -> None:
    harness = _Harness(FakeTransport().queue(json_response({"object": "balance"})))

    result = runner.invoke(
        harness.app(),
        [
            "request",
            "GET",
            "/balance",
            "--account",
            "acct_7",
            "--max-attempts",
            "5",
            "--api-key",
            "sk_test_override",
        ],
    )

    assert result.exit_code == 0, result.stdout
    (config,) = harness.configs
    assert config.stripe_account == "acct_7"
    assert config.max_attempts == 5
    assert config.api_key == "sk_test_override"
    request = harness.transport.requests[0]
    assert request.header("Stripe-Account") == "acct_7"
    assert request.header("Authorization") == "Bearer sk_test_override"


def test_config_file_overrides_env(cli_config: ClientConfig) -> None:
    fs = InMemoryFileSystem()
    fs.write_text(
        'schema_version = 1\n[client]\napi_version = "2024-06-20"\n', Path("stripe.toml")
    )
    harness = _Harness(FakeTransport().queue(json_response({"object": "balance"})), fs)

    result = runner.invoke(
        harness.app(), ["request", "GET", "/balance", "--config", "stripe.toml"]
    )

    assert result.exit_code == 0, result.stdout
    assert harness.transport.requests[0].header("Stripe-Version") == "2024-06-20"


def test_missing_config_file_is_reported(cli_config: ClientConfig) -> None:
    harness = _Harness(FakeTransport())

    result = runner.invoke(
        harness.app(), ["request", "GET", "/balance", "--config", "missing.toml"]
    )

    assert result.exit_code == 1
    assert "Config file not found" in _strip_ansi(result.stdout)
    assert harness.transport.requests == []


def test_missing_api_key_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_config(monkeypatch, ClientConfig())
    harness = _Harness(FakeTransport())

    result = runner.invoke(harness.app(), ["request", "GET", "/balance"])

    assert result.exit_code == 1
    assert "STRIPE_SECRET_KEY" in _strip_ansi(result.stdout)


def test_unsupported_method_is_a_usage_error(cli_config: ClientConfig) -> None:
    harness = _Harness(FakeTransport())

    result = runner.invoke(harness.app(), ["request", "PATCH", "/refunds"])

    assert result.exit_code == 2
    assert harness.transport.requests == []


def test_malformed_param_is_a_usage_error(cli_config: ClientConfig) -> None:
    harness = _Harness(FakeTransport())

    result = runner.invoke(harness.app(), ["request", "POST", "/refunds", "-d", "no-equals"])

    assert result.exit_code == 2
    assert harness.transport.requests == []
