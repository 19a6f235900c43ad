"""Application configuration."""

import os
import tomllib
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
MAX_PORT = 65535

DEFAULT_COLUMNS = [
    "obverse-photo",
    "reverse-photo",
    "trade-name",
    "components",
    "description",
    "remaining",
    "prescription",
    "dosage",
    "replenish",
]


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""


class Settings(BaseSettings):
    """Application settings loaded from a TOML file and the environment."""

    listen_addr: str = "127.0.0.1:8080"
    base_url: str
    data_path: str = "data.json"
    images_path: str = "images"
    auth_tokens: list[str] = []
    column_profiles: dict[str, list[str]] = {}
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="PILLRESERVES_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def columns_for(self, profile: str | None) -> list[str]:
        """Return the display columns of a named profile or the defaults."""
        if profile and profile in self.column_profiles:
            return list(self.column_profiles[profile])
        return list(DEFAULT_COLUMNS)


def load_settings(config_path: str | Path) -> Settings:
    """Build settings from a TOML file; file values win over the environment."""
    path = Path(config_path)
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"failed to open config file {str(path)!r}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"failed to parse config file {str(path)!r}: {exc}") from exc
    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config file {str(path)!r}: {exc}") from exc


def parse_listen_addr(raw: str) -> tuple[str, int]:
    """Split ``host:port`` (IPv6 hosts in brackets) into its parts."""
    host, separator, port_text = raw.strip().rpartition(":")
    if not separator or not host or not port_text.isdigit():
        raise ValueError(f"invalid listen address {raw!r}")
    port = int(port_text)
    if port > MAX_PORT:
        raise ValueError(f"invalid port in listen address {raw!r}")
    return host.removeprefix("[").removesuffix("]"), port
