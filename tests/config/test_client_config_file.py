"""Tests for client config-file parsing and fail-fast validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from stripe_request_core.config_file import load_client_config_file
from stripe_request_core.exceptions import (
    ConfigFileNotFoundError,
    ConfigFileParseError,
    ConfigFileValidationError,
)
from tests.fakes import InMemoryFileSystem

CONFIG_PATH = Path("config/stripe.toml")


def _fs_with(content: str) -> InMemoryFileSystem:
    fs = InMemoryFileSystem()
    fs.write_text(content, CONFIG_PATH)
    return fs


def test_load_client_config_file_parses_valid_toml() -> None:
    fs = _fs_with(
        """
schema_version = 1

[client]
api_base = "https://api.stripe.com/"
api_version = " 2024-06-20 "
stripe_account = "acct_1"
max_attempts = 4
backoff_factor = 0.25
backoff_max_seconds = 2
timeout_seconds = 30
""".strip()
    )

    parsed = load_client_config_file(path=CONFIG_PATH, fs=fs)

    assert parsed.api_base == "https://api.stripe.com"
    assert parsed.api_version == "2024-06-20"
    assert parsed.stripe_account == "acct_1"
    assert parsed.max_attempts == 4
    assert parsed.backoff_factor == 0.25
    assert parsed.backoff_max_seconds == 2.0
    assert parsed.timeout_seconds == 30.0
    assert parsed.user_agent is None


def test_empty_client_section_is_allowed() -> None:
    parsed = load_client_config_file(path=CONFIG_PATH, fs=_fs_with("schema_version = 1\n[client]\n"))
    assert parsed.api_base is None
    assert parsed.max_attempts is None


def test_missing_file_raises() -> None:
    with pytest.raises(ConfigFileNotFoundError, match="config/stripe.toml"):
        load_client_config_file(path=CONFIG_PATH, fs=InMemoryFileSystem())


def test_invalid_toml_raises_parse_error() -> None:
    with pytest.raises(ConfigFileParseError):
        load_client_config_file(path=CONFIG_PATH, fs=_fs_with("schema_version = = 1"))


@pytest.mark.parametrize(
    "content",
    [
        "schema_version = 2\n[client]\n",
        "[client]\n",
        "schema_version = 1\n[client]\napi_key = 'sk_live_nope'\n",
        "schema_version = 1\n[client]\napi_base = 'ftp://example.com'\n",
        "schema_version = 1\n[client]\nmax_attempts = 0\n",
        "schema_version = 1\n[client]\nbackoff_factor = -1.0\n",
        "schema_version = 1\n[client]\napi_version = '  '\n",
    ],
)
def test_invalid_values_raise_validation_error(content: str) -> None:
    with pytest.raises(ConfigFileValidationError):
        load_client_config_file(path=CONFIG_PATH, fs=_fs_with(content))
