"""
Configuration management for OmniVault.

Handles loading configuration from environment variables (optionally via a
.env file) and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Any

from dotenv import load_dotenv

from omnivault.core.exceptions import ConfigurationError, ValidationError
from omnivault.utils.amounts import to_amount

ENV_PREFIX = "OMNIVAULT_"


def _get_env_var(name: str, default: str | None = None, required: bool = False) -> str | None:
    """Get environment variable with optional default."""
    value = os.environ.get(name, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {name} is not set")
    return value


def _positive_amount(name: str, value: Any) -> Decimal:
    try:
        amount = to_amount(value, field=name)
    except ValidationError as e:
        raise ConfigurationError(e.message, details={"field": name}) from None
    if amount.is_zero():
        raise ConfigurationError(f"{name} must be greater than zero", details={"field": name})
    return amount


@dataclass(frozen=True)
class VaultConfig:
    """Vault configuration. Capacity and withdrawal limit are fixed for the vault's lifetime."""

    capacity: Decimal
    withdrawal_limit: Decimal
    storage_backend: str = "memory"
    log_level: str = "INFO"
    # Journal connection for the redis storage backend
    redis_url: str | None = None
    # Payout endpoint for HttpReleaser
    payout_url: str | None = None
    http_timeout: float = 30.0  # seconds

    def __post_init__(self) -> None:
        # Frozen: normalized values go through object.__setattr__
        object.__setattr__(self, "capacity", _positive_amount("capacity", self.capacity))
        object.__setattr__(
            self,
            "withdrawal_limit",
            _positive_amount("withdrawal_limit", self.withdrawal_limit),
        )
        if self.http_timeout <= 0:
            raise ConfigurationError("http_timeout must be greater than zero")

    @classmethod
    def from_env(cls, dotenv_path: str | None = None, **overrides: Any) -> VaultConfig:
        """
        Load configuration from environment variables.

        Values from a .env file never override variables already set in the
        process environment; explicit ``overrides`` win over both.

        Args:
            dotenv_path: Path to a .env file (searched upwards if None)
            **overrides: Field values taking precedence over the environment
        """
        load_dotenv(dotenv_path, override=False)

        def pick(name: str, default: str | None = None, required: bool = False) -> Any:
            if overrides.get(name) is not None:
                return overrides[name]
            return _get_env_var(f"{ENV_PREFIX}{name.upper()}", default=default, required=required)

        timeout_raw = pick("http_timeout", default=str(cls.http_timeout))
        try:
            http_timeout = float(timeout_raw)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"{ENV_PREFIX}HTTP_TIMEOUT is not a number: {timeout_raw!r}"
            ) from None

        return cls(
            capacity=pick("capacity", required=True),
            withdrawal_limit=pick("withdrawal_limit", required=True),
            storage_backend=pick("storage_backend", default=cls.storage_backend),
            log_level=pick("log_level", default=cls.log_level),
            redis_url=pick("redis_url"),
            payout_url=pick("payout_url"),
            http_timeout=http_timeout,
        )

    def with_updates(self, **updates: Any) -> VaultConfig:
        """Create a new VaultConfig with updated values."""
        known = {f.name for f in fields(self)}
        unknown = set(updates) - known
        if unknown:
            raise ConfigurationError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        return replace(self, **updates)
