"""
Configuration Management Module

Settings come from, highest priority first:
    1. explicit values (CLI flags, passed as keyword overrides)
    2. environment variables / .env file (e.g. COINMARKETCAP_API_KEY)
    3. TOML config file ($XDG_CONFIG_HOME/cryptoprice/config.toml or --config)
    4. defaults below

Uses Pydantic Settings for validation and type conversion.

Example config.toml:
    request_timeout = 5

    [defaults]
    provider = "cmc"
    currency = "EUR"

    [coinmarketcap]
    api_key = "..."

Top-level keys named after the fields (default_currency, coinmarketcap_api_key, ...)
work too and win over the tables.
"""
import os
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import (BaseSettings, PydanticBaseSettingsSource,
                               SettingsConfigDict, TomlConfigSettingsSource)

from cryptoprice.providers.core import ConfigError
from cryptoprice.schemas import ProviderId

APP_NAME = "cryptoprice"
DEFAULT_PROVIDER = ProviderId.COINGECKO
DEFAULT_CURRENCY = "USD"


# (table, key) in the config file -> Settings field
TOML_SECTION_KEYS: dict[tuple[str, str], str] = {
    ("defaults", "provider"): "default_provider",
    ("defaults", "currency"): "default_currency",
    ("coinmarketcap", "api_key"): "coinmarketcap_api_key",
}


class SectionedTomlSource(TomlConfigSettingsSource):
    """TOML source that also reads the [defaults] and [coinmarketcap] tables."""

    def _read_file(self, file_path: Path) -> dict[str, Any]:
        data = super()._read_file(file_path)
        for (table, key), field in TOML_SECTION_KEYS.items():
            section = data.get(table)
            if isinstance(section, dict) and key in section:
                data.setdefault(field, section[key])
        return data


def default_config_path() -> Path:
    """$XDG_CONFIG_HOME/cryptoprice/config.toml (falls back to ~/.config)."""
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME / "config.toml"


class Settings(BaseSettings):
    """
    Application Settings

    Attributes:
        default_provider: Provider used when --provider is not given
        default_currency: Quote currency used when --currency is not given
        coinmarketcap_api_key: CoinMarketCap Pro API key (COINMARKETCAP_API_KEY)
        request_timeout: Per-request timeout in seconds for each provider call
        invocation_timeout: Optional bound for the whole lookup, in seconds
        coingecko_base_url: CoinGecko API root
        coinmarketcap_base_url: CoinMarketCap API root
        frankfurter_base_url: Frankfurter API root (calc mode)
        log_level: Log level when no -v flag is given
    """

    # ============================================
    # Lookup defaults
    # ============================================

    default_provider: ProviderId = Field(
        default=DEFAULT_PROVIDER,
        description="Provider used when none is given on the command line",
    )

    default_currency: str = Field(
        default=DEFAULT_CURRENCY,
        description="Quote currency used when none is given on the command line",
    )

    # ============================================
    # Credentials
    # ============================================

    coinmarketcap_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("coinmarketcap_api_key", "COINMARKETCAP_API_KEY"),
        description="CoinMarketCap API key (required for the cmc provider)",
    )

    # ============================================
    # HTTP
    # ============================================

    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    invocation_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Overall lookup timeout in seconds (unset = no bound)",
    )

    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coinmarketcap_base_url: str = "https://pro-api.coinmarketcap.com/v1"
    frankfurter_base_url: str = "https://api.frankfurter.dev/v1"

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_prefix="CRYPTOPRICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("default_provider", mode="before")
    @classmethod
    def _parse_provider(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, ProviderId):
            return ProviderId.parse(value)
        return value

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("coinmarketcap_api_key")
    @classmethod
    def _blank_key_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            SectionedTomlSource(settings_cls),
        )

    def credentials(self) -> dict[ProviderId, str | None]:
        """API keys per provider, as handed to the resolver."""
        return {
            ProviderId.COINGECKO: None,
            ProviderId.COINMARKETCAP: self.coinmarketcap_api_key,
        }


def load_settings(config_path: Path | None = None, **overrides: Any) -> Settings:
    """Build Settings from overrides, environment, .env and the TOML file.

    Args:
        config_path: Explicit TOML file; must exist. Defaults to the XDG path,
            which is optional.
        **overrides: Field values from the command line; None values are ignored.

    Raises:
        ConfigError: the explicit file is missing or a value is invalid.
    """
    if config_path is not None and not config_path.is_file():
        raise ConfigError(f"config file not found: {config_path}")
    path = config_path or default_config_path()

    file_settings = type(
        "FileSettings",
        (Settings,),
        {"model_config": SettingsConfigDict(toml_file=path), "__module__": __name__},
    )
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return file_settings(**values)
    except (ValidationError, ValueError) as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc
