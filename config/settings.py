import os

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Same default location the Solana CLI reads and writes
DEFAULT_SOLANA_CONFIG_FILE = "~/.config/solana/cli/config.yml"

# loguru built-in levels
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def solana_config_path() -> str:
    """Path of the Solana CLI config file (SOLANA_CONFIG_FILE overrides the default)."""
    return os.path.expanduser(os.getenv("SOLANA_CONFIG_FILE", DEFAULT_SOLANA_CONFIG_FILE))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Solana CLI config (json_rpc_url / keypair_path / commitment come from config.yml)
    json_rpc_url: str = "http://localhost:8899"
    keypair_path: str = "~/.config/solana/id.json"
    commitment: str = "confirmed"

    # Helius (DAS API); --api-key overrides the key
    helius_api_key: str = ""
    helius_rpc_url: str = ""  # empty = mainnet endpoint built from the key

    # Jupiter price feed
    jupiter_price_url: str = "https://api.jup.ag/price/v2"
    jupiter_api_key: str = ""

    # HTTP / transaction confirmation
    http_timeout_sec: float = 15.0
    confirm_timeout_sec: float = 60.0
    confirm_poll_interval_sec: float = 1.0

    # Logging
    log_level: str = "WARNING"
    log_file: str = ""  # empty = stderr only
    log_json: bool = False

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # env and .env win over the CLI config file; a missing file is skipped
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=solana_config_path()),
            file_secret_settings,
        )

    @property
    def keypair_file(self) -> str:
        return os.path.expanduser(self.keypair_path)

