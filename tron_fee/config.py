"""Runtime configuration for the fee estimator.

Settings come from the environment (optionally a ``.env`` file) and are
built once at startup into a frozen :class:`NodeConfig`.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .exceptions import ConfigurationError
from .types import ProviderKind

__all__ = ["NodeConfig", "detect_provider", "DEFAULT_FULL_NODE", "DEFAULT_USDT"]

DEFAULT_FULL_NODE = "https://mainnet.tron.tronql.com/"
DEFAULT_USDT = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
DEFAULT_TIMEOUT = 30.0

# Env variable that holds the API key, per provider
_KEY_ENV = {
    ProviderKind.TRONQL: "TRONQL_API_KEY",
    ProviderKind.TRONGRID: "TRON_API_KEY",
}
_PROVIDER_LABEL = {
    ProviderKind.TRONQL: "TronQL",
    ProviderKind.TRONGRID: "TronGrid",
}


def _as_bool(value: str | None, default: bool = False) -> bool:
    """Parse a truthy/falsey string into a boolean."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _secret(value: str | None) -> SecretStr | None:
    return SecretStr(value) if value else None


def _provider(name: str) -> ProviderKind:
    try:
        return ProviderKind(name)
    except ValueError as e:
        choices = ", ".join(p.value for p in ProviderKind)
        raise ConfigurationError("TRON_PROVIDER", name, f"one of {choices}") from e


def _timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError("TRON_TIMEOUT", raw, "seconds as a number") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError("TRON_TIMEOUT", raw, "a positive number of seconds")
    return value


def detect_provider(full_node: str) -> ProviderKind:
    """Guess the provider from the endpoint URL."""
    url = full_node.lower()
    if "tronql" in url:
        return ProviderKind.TRONQL
    if "trongrid" in url:
        return ProviderKind.TRONGRID
    return ProviderKind.GENERIC


class NodeConfig(BaseModel):
    """Node endpoint, credentials and estimator switches."""

    model_config = ConfigDict(frozen=True)

    full_node: str = Field(DEFAULT_FULL_NODE, description="Full node base URL")
    provider: ProviderKind = Field(ProviderKind.GENERIC, description="Node provider")
    tronql_api_key: SecretStr | None = None
    trongrid_api_key: SecretStr | None = None
    private_key: SecretStr | None = None
    default_token: str = Field(DEFAULT_USDT, description="Default TRC20 contract")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Per-call timeout (s)")
    supports_dry_run: bool = Field(True, description="Node serves wallet/estimateenergy")
    probe: bool = Field(True, description="Check connectivity before estimating")
    log_level: str = "WARNING"

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        dotenv_path: str | Path | None = None,
    ) -> NodeConfig:
        """Build the config from ``env`` (defaults to ``os.environ`` + ``.env``).

        ``TRON_PROVIDER`` wins over URL detection when set.

        Raises:
            ConfigurationError: If ``TRON_PROVIDER`` or ``TRON_TIMEOUT`` is unusable.
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ

        full_node = env.get("TRON_FULL_NODE") or DEFAULT_FULL_NODE
        provider_name = (env.get("TRON_PROVIDER") or "").strip().lower()
        provider = _provider(provider_name) if provider_name else detect_provider(full_node)

        return cls(
            full_node=full_node,
            provider=provider,
            tronql_api_key=_secret(env.get("TRONQL_API_KEY")),
            trongrid_api_key=_secret(env.get("TRON_API_KEY")),
            private_key=_secret(env.get("PRIVATE_KEY")),
            default_token=env.get("DEFAULT_USDT") or DEFAULT_USDT,
            timeout=_timeout(env.get("TRON_TIMEOUT")),
            supports_dry_run=_as_bool(env.get("TRON_DRY_RUN"), True),
            probe=_as_bool(env.get("TRON_PROBE"), True),
            log_level=(env.get("LOG_LEVEL") or "WARNING").upper(),
        )

    @property
    def api_key(self) -> SecretStr | None:
        """The key that belongs to the configured provider."""
        if self.provider == ProviderKind.TRONQL:
            return self.tronql_api_key
        if self.provider == ProviderKind.TRONGRID:
            return self.trongrid_api_key
        return None

    @property
    def provider_label(self) -> str | None:
        return _PROVIDER_LABEL.get(self.provider)

    def auth_headers(self) -> dict[str, str]:
        """HTTP headers carrying the provider API key, if any."""
        key = self.api_key
        if key is None:
            return {}
        if self.provider == ProviderKind.TRONQL:
            return {"Authorization": key.get_secret_value()}
        return {"TRON-PRO-API-KEY": key.get_secret_value()}

    def api_key_hint(self) -> str | None:
        """What to set when the provider complains about the API key."""
        name = _KEY_ENV.get(self.provider)
        return f"Set {name} in .env." if name else None
