from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.kucoin.com"


@dataclass(frozen=True)
class Credentials:
    """API key material used to sign private requests."""

    api_key: str
    api_secret: str = field(repr=False)
    api_passphrase: str = field(repr=False)
    key_version: str = "2"


@dataclass(frozen=True)
class KucoinConfig:
    """Immutable client configuration, built once and passed explicitly."""

    credentials: Credentials
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 10.0
    clock_timeout: float = 3.0
    retry_attempts: int = 1


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Credentials
    kc_api_key: str = Field(default="")
    kc_api_secret: str = Field(default="")
    kc_api_passphrase: str = Field(default="")
    kc_api_key_version: str = Field(default="2")

    # Endpoint
    kc_api_endpoint: str = Field(default="")

    # HTTP
    kc_request_timeout: float = Field(default=10.0, gt=0)
    kc_clock_timeout: float = Field(default=3.0, gt=0)
    kc_retry_attempts: int = Field(default=1, ge=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    def to_config(self) -> KucoinConfig:
        """Freeze these settings into a KucoinConfig."""
        return KucoinConfig(
            credentials=Credentials(
                api_key=self.kc_api_key,
                api_secret=self.kc_api_secret,
                api_passphrase=self.kc_api_passphrase,
                key_version=self.kc_api_key_version,
            ),
            base_url=(self.kc_api_endpoint or DEFAULT_BASE_URL).rstrip("/"),
            request_timeout=self.kc_request_timeout,
            clock_timeout=self.kc_clock_timeout,
            retry_attempts=self.kc_retry_attempts,
        )


def load_settings(config_path: str | None = None) -> Settings:
    """
    Load settings from the environment, optionally overlaid by a YAML file.

    Keys in the YAML file use the same names as the Settings fields and take
    precedence over environment variables.
    """
    if not config_path:
        return Settings()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return Settings(**{key.lower(): value for key, value in overrides.items()})


def load_config(config_path: str | None = None) -> KucoinConfig:
    """Build the process-wide KucoinConfig. Call once at start-up."""
    return load_settings(config_path).to_config()
