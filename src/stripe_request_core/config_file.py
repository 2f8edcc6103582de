"""Typed parsing and validation for client config files.

Expected layout:

    schema_version = 1

    [client]
    api_base = "https://api.stripe.com"
    api_version = "2024-06-20"
    max_attempts = 4
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ClientConfigFile:
    """Validated client config values loaded from a TOML file."""

    api_base: str | None = None
    api_version: str | None = None
    stripe_account: str | None = None
    user_agent: str | None = None
    max_attempts: int | None = None
    backoff_factor: float | None = None
    backoff_max_seconds: float | None = None
    timeout_seconds: float | None = None


class _ClientSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_base: str | None = None
    api_version: str | None = None
    stripe_account: str | None = None
    user_agent: str | None = None
    max_attempts: int | None = None
    backoff_factor: float | None = None
    backoff_max_seconds: float | None = None
    timeout_seconds: float | None = None

    @field_validator("api_base")
    @classmethod
    def _validate_api_base(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip().rstrip("/")
        if not text.startswith(("http://", "https://")):
            raise ValueError
        return text

    @field_validator("api_version", "stripe_account", "user_agent")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator("max_attempts")
    @classmethod
    def _validate_positive_int(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value < 1:
            raise ValueError
        return value

    @field_validator("backoff_factor", "backoff_max_seconds", "timeout_seconds")
    @classmethod
    def _validate_non_negative(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value < 0.0:
            raise ValueError
        return value


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    client: _ClientSectionModel

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_client_config_file(*, path: Path, fs: FileSystem) -> ClientConfigFile:
    """Load and validate a client TOML config file.

    The secret key is not read from files; it comes from the environment.
    """
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    section = model.client
    return ClientConfigFile(
        api_base=section.api_base,
        api_version=section.api_version,
        stripe_account=section.stripe_account,
        user_agent=section.user_agent,
        max_attempts=section.max_attempts,
        backoff_factor=section.backoff_factor,
        backoff_max_seconds=section.backoff_max_seconds,
        timeout_seconds=section.timeout_seconds,
    )
