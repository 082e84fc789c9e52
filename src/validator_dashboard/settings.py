"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    COINGECKO_API_URL,
    COSMOS_CHAINS,
    ETH_RPC_URLS,
    NEAR_RPC_URLS,
    NEUTRON_DEFAULT_REWARD_QUOTE_USD,
    SOLANA_RPC_URLS,
    SUI_RPC_URLS,
)

load_dotenv()

CONFIG_ENV_VAR = "VALIDATOR_DASHBOARD_CONFIG"
SECRET_FIELDS = ("etherscan_api_key", "coingecko_api_key")

DEFAULT_RPC_URLS: dict[str, list[str]] = {
    "solana": SOLANA_RPC_URLS,
    "sui": SUI_RPC_URLS,
    "near": NEAR_RPC_URLS,
    "chainlink": ETH_RPC_URLS,
}


class DashboardSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with VALIDATOR_DASHBOARD_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- keys (optional; absence means reduced capability, not an error) ---
    etherscan_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "etherscan_api_key",
            "VALIDATOR_DASHBOARD_ETHERSCAN_API_KEY",
            "ETHERSCAN_API_KEY",
        ),
    )
    coingecko_api_key: SecretStr | None = None

    # --- endpoints ---
    coingecko_base_url: str = COINGECKO_API_URL
    rpc_overrides: dict[str, list[str]] = Field(default_factory=dict)
    lcd_overrides: dict[str, str] = Field(default_factory=dict)

    # --- timeouts ---
    adapter_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for one network's snapshot fetch.",
    )
    request_timeout_seconds: float = Field(default=8.0, gt=0)
    global_timeout_seconds: float | None = 60.0

    # --- cache ---
    cache_ttl_seconds: float = Field(default=300.0, ge=0)

    # --- revenue ---
    neutron_reward_quote_usd: float = Field(
        default=NEUTRON_DEFAULT_REWARD_QUOTE_USD, ge=0
    )

    # --- registry ---
    registry_path: Path | None = None
    networks: list[str] = Field(default_factory=list)

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="VALIDATOR_DASHBOARD_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator(*SECRET_FIELDS, mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr; blank strings count as unset."""
        if v is None or isinstance(v, SecretStr):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        return SecretStr(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

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
                    local_config = Path("validator-dashboard.toml")
                    user_config = (
                        Path.home() / ".config" / "validator-dashboard" / "config.toml"
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
                    data = tomllib.load(f)  # supports top-level or [validator_dashboard]
                body = data.get("validator_dashboard", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables."
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
        """Return the config as a JSON-ready dict with secrets redacted."""
        data = self.model_dump(mode="json")
        for key in SECRET_FIELDS:
            if getattr(self, key):
                data[key] = "***redacted***"
        return data

    @property
    def has_etherscan_key(self) -> bool:
        return self.etherscan_api_key is not None

    def rpc_urls(self, network_id: str) -> list[str]:
        """RPC endpoints for a JSON-RPC network, overrides first."""
        override = self.rpc_overrides.get(network_id)
        if override:
            return list(override)
        return list(DEFAULT_RPC_URLS.get(network_id, []))

    def lcd_url(self, network_id: str) -> str | None:
        """LCD/REST base URL for a Cosmos-SDK chain, without trailing slash."""
        url = self.lcd_overrides.get(network_id)
        if url is None:
            chain = COSMOS_CHAINS.get(network_id)
            url = chain["lcd"] if chain else None
        return url.rstrip("/") if url else None
