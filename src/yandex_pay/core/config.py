"""
Configuration management for the Yandex Pay SDK.

Handles loading configuration from environment variables and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from yandex_pay.core.exceptions import ConfigurationError
from yandex_pay.core.types import API_HOSTS, JWKS_URLS, Environment

# Provider-imposed ceiling for a single API request
MAX_REQUEST_TIMEOUT = 10.0


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {name} is not set")
    return value


@dataclass(frozen=True)
class Config:
    """SDK configuration."""

    api_key: str
    environment: Environment = Environment.PRODUCTION
    # Overrides the environment's host when set
    host: str | None = None
    request_timeout: float = MAX_REQUEST_TIMEOUT

    # Webhooks
    webhook_secret: str | None = None
    verify_webhooks: bool = True
    verify_expiration: bool = True

    # JWKS key fetching
    jwks_cache_ttl: float = 3600.0
    jwks_connect_timeout: float = 5.0
    jwks_read_timeout: float = 10.0

    # Caller-level retries for REST calls
    max_retries: int = 5
    retry_wait: float = 5.0

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError("api_key is required")
        if not isinstance(self.environment, Environment):
            object.__setattr__(self, "environment", Environment.from_string(self.environment))
        if not 0 < self.request_timeout <= MAX_REQUEST_TIMEOUT:
            raise ConfigurationError(
                f"request_timeout must be in (0, {MAX_REQUEST_TIMEOUT}] seconds, "
                f"got {self.request_timeout}"
            )
        if self.jwks_cache_ttl <= 0:
            raise ConfigurationError("jwks_cache_ttl must be positive")
        if self.max_retries < 1:
            raise ConfigurationError("max_retries must be at least 1")

    @property
    def base_url(self) -> str:
        """API host used for REST calls."""
        return self.host or API_HOSTS[self.environment]

    @property
    def jwks_url(self) -> str:
        """Endpoint publishing the webhook signing keys."""
        return JWKS_URLS[self.environment]

    @classmethod
    def from_env(cls, **overrides: Any) -> Config:
        """Load configuration from environment variables."""
        api_key = overrides.pop("api_key", None) or _get_env_var(
            "YANDEX_PAY_API_KEY", required=True
        )

        environment = overrides.pop("environment", None) or _get_env_var(
            "YANDEX_PAY_ENVIRONMENT", default="production"
        )
        if isinstance(environment, str):
            environment = Environment.from_string(environment)

        host = overrides.pop("host", None) or _get_env_var("YANDEX_PAY_HOST")
        webhook_secret = overrides.pop("webhook_secret", None) or _get_env_var(
            "YANDEX_PAY_WEBHOOK_SECRET"
        )
        log_level = overrides.pop("log_level", None) or _get_env_var(
            "YANDEX_PAY_LOG_LEVEL", default="INFO"
        )

        timeout = overrides.pop("request_timeout", None)
        if timeout is None:
            timeout = float(_get_env_var("YANDEX_PAY_TIMEOUT", default=str(MAX_REQUEST_TIMEOUT)))  # type: ignore[arg-type]

        return cls(
            api_key=api_key,  # type: ignore[arg-type]
            environment=environment,
            host=host,
            request_timeout=timeout,
            webhook_secret=webhook_secret,
            log_level=log_level,  # type: ignore[arg-type]
            **overrides,
        )

    def with_updates(self, **updates: Any) -> Config:
        """Create a new Config with updated values."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update(updates)
        return Config(**current)

    def masked_api_key(self) -> str:
        """Return API key with most characters masked for safe logging."""
        if len(self.api_key) <= 8:
            return "****"
        return self.api_key[:4] + "..." + self.api_key[-4:]
