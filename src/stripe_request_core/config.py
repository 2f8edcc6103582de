"""Centralised, injectable configuration for Stripe clients."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from .config_file import ClientConfigFile
from .domain.retry_policy import Once, RetryPolicy, RetryUpTo

DEFAULT_API_BASE = "https://api.stripe.com"
DEFAULT_USER_AGENT = "stripe-request-core"


class PositiveIntegerEnvVarError(ValueError):
    """Raised when an environment variable must be a positive integer."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive integer.")


class NonNegativeNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a non-negative number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a non-negative number.")


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration shared by the blocking and async clients.

    Load from environment with `ClientConfig.from_env()` or construct directly for testing.
    """

    api_key: str = ""
    api_base: str = DEFAULT_API_BASE
    api_version: str | None = None
    stripe_account: str | None = None
    user_agent: str = DEFAULT_USER_AGENT

    # Retry and transport
    max_attempts: int = 3
    backoff_factor: float = 0.5
    backoff_max_seconds: float = 8.0
    timeout_seconds: float = 80.0

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.
        """
        load_dotenv(dotenv_path)

        return cls(
            api_key=os.getenv("STRIPE_SECRET_KEY", "").strip(),
            api_base=os.getenv("STRIPE_API_BASE", DEFAULT_API_BASE).strip() or DEFAULT_API_BASE,
            api_version=os.getenv("STRIPE_API_VERSION", "").strip() or None,
            stripe_account=os.getenv("STRIPE_ACCOUNT", "").strip() or None,
            user_agent=os.getenv("STRIPE_USER_AGENT", DEFAULT_USER_AGENT).strip()
            or DEFAULT_USER_AGENT,
            max_attempts=_parse_positive_int(
                os.getenv("STRIPE_MAX_ATTEMPTS", "3"), env_name="STRIPE_MAX_ATTEMPTS"
            ),
            backoff_factor=_parse_non_negative_float(
                os.getenv("STRIPE_BACKOFF_FACTOR", "0.5"), env_name="STRIPE_BACKOFF_FACTOR"
            ),
            backoff_max_seconds=_parse_non_negative_float(
                os.getenv("STRIPE_BACKOFF_MAX_SECONDS", "8"),
                env_name="STRIPE_BACKOFF_MAX_SECONDS",
            ),
            timeout_seconds=_parse_non_negative_float(
                os.getenv("STRIPE_TIMEOUT_SECONDS", "80"), env_name="STRIPE_TIMEOUT_SECONDS"
            ),
        )

    def with_overrides(
        self,
        *,
        api_key: str | None = None,
        api_base: str | None = None,
        stripe_account: str | None = None,
        max_attempts: int | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            api_key=self.api_key if api_key is None else api_key.strip(),
            api_base=self.api_base if api_base is None else api_base.strip(),
            stripe_account=self.stripe_account if stripe_account is None else stripe_account,
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
        )

    def with_file_overrides(self, file_config: ClientConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            api_base=self.api_base if file_config.api_base is None else file_config.api_base,
            api_version=self.api_version
            if file_config.api_version is None
            else file_config.api_version,
            stripe_account=self.stripe_account
            if file_config.stripe_account is None
            else file_config.stripe_account,
            user_agent=self.user_agent
            if file_config.user_agent is None
            else file_config.user_agent,
            max_attempts=self.max_attempts
            if file_config.max_attempts is None
            else file_config.max_attempts,
            backoff_factor=self.backoff_factor
            if file_config.backoff_factor is None
            else file_config.backoff_factor,
            backoff_max_seconds=self.backoff_max_seconds
            if file_config.backoff_max_seconds is None
            else file_config.backoff_max_seconds,
            timeout_seconds=self.timeout_seconds
            if file_config.timeout_seconds is None
            else file_config.timeout_seconds,
        )

    @property
    def versioned_base(self) -> str:
        """API base including the `/v1` prefix every resource path sits under."""
        return self.api_base.rstrip("/") + "/v1"

    def retry_policy(self) -> RetryPolicy:
        """Default policy for calls that do not pass one explicitly."""
        if self.max_attempts <= 1:
            return Once()
        return RetryUpTo(
            max_attempts=self.max_attempts,
            backoff_factor=self.backoff_factor,
            max_backoff_seconds=self.backoff_max_seconds,
        )


def _parse_positive_int(value: str, *, env_name: str) -> int:
    """Parse a positive integer from an environment variable."""
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise PositiveIntegerEnvVarError(env_name) from exc
    if parsed < 1:
        raise PositiveIntegerEnvVarError(env_name)
    return parsed


def _parse_non_negative_float(value: str, *, env_name: str) -> float:
    """Parse a non-negative number from an environment variable."""
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise NonNegativeNumberEnvVarError(env_name) from exc
    if parsed < 0:
        raise NonNegativeNumberEnvVarError(env_name)
    return parsed
