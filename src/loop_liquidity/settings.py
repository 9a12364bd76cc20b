"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    DEFAULT_DASHBOARD_API_URL,
    DEFAULT_MAINNET_RPC_URL,
    DEFAULT_SEPOLIA_RPC_URL,
    DEFAULT_WALLET_URL,
    MAINNET_TOKENS,
    SEPOLIA_TOKENS,
)
from .transactions.poller import PollPolicy

load_dotenv()

CONFIG_ENV_VAR = "LOOP_LIQUIDITY_CONFIG"
SECRET_FIELDS = frozenset({"wallet_bridge_token"})


class Network(str, Enum):
    MAINNET = "mainnet"
    SEPOLIA = "sepolia"


NETWORK_RPC_DEFAULTS = {
    Network.MAINNET: DEFAULT_MAINNET_RPC_URL,
    Network.SEPOLIA: DEFAULT_SEPOLIA_RPC_URL,
}


class LoopSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with LOOP_LIQUIDITY_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- endpoints ---
    network: Network = Network.MAINNET
    rpc_url: str | None = None
    wallet_url: str | None = DEFAULT_WALLET_URL
    wallet_bridge_token: SecretStr | None = None
    dashboard_api_url: str = DEFAULT_DASHBOARD_API_URL

    # --- local state ---
    session_file: Path = Field(
        default_factory=lambda: Path.home() / ".config" / "loop-liquidity" / "session.json"
    )

    # --- confirmation polling ---
    poll_interval: float = Field(default=5.0, ge=0)
    poll_backoff_factor: float = Field(default=1.0, ge=1.0)
    poll_max_interval: float = Field(default=60.0, ge=0)
    poll_max_attempts: int | None = Field(
        default=120,
        ge=0,
        description="Receipt queries before giving up. 0 or unset polls until finality.",
    )
    poll_timeout_seconds: float | None = Field(default=None, ge=0)

    # --- RPC settings ---
    rpc_timeout: float = 10.0

    # --- balances ---
    token_addresses: dict[str, str] = Field(default_factory=dict)
    balance_decimals: int = 18
    balance_display_places: int = 4

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LOOP_LIQUIDITY_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("wallet_bridge_token", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @model_validator(mode="after")
    def validate_poll_interval_ordering(self) -> "LoopSettings":
        """The backoff cap cannot be below the base interval."""
        if self.poll_max_interval < self.poll_interval:
            raise ValueError(
                f"poll_max_interval ({self.poll_max_interval}) "
                f"must be at least poll_interval ({self.poll_interval})"
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get(CONFIG_ENV_VAR)
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("loop-liquidity.toml")
                    user_config = (
                        Path.home() / ".config" / "loop-liquidity" / "config.toml"
                    )
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [loop_liquidity]
                body = data.get("loop_liquidity", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a JSON-friendly dict with secrets redacted."""
        data = self.model_dump(mode="json")
        if self.wallet_bridge_token:
            data["wallet_bridge_token"] = "***redacted***"
        return data

    @property
    def rpc_url_resolved(self) -> str:
        """Configured node RPC, or the public default for the network."""
        return self.rpc_url or NETWORK_RPC_DEFAULTS[self.network]

    @property
    def tokens(self) -> dict[str, str]:
        """Token symbol -> address for balance reads, with overrides applied."""
        defaults = {
            Network.MAINNET: MAINNET_TOKENS,
            Network.SEPOLIA: SEPOLIA_TOKENS,
        }[self.network]
        return {**defaults, **self.token_addresses}

    @property
    def poll_policy(self) -> PollPolicy:
        return PollPolicy(
            interval=self.poll_interval,
            backoff_factor=self.poll_backoff_factor,
            max_interval=self.poll_max_interval,
            max_attempts=self.poll_max_attempts or None,
            timeout=self.poll_timeout_seconds or None,
        )
