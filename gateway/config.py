"""Application configuration via pydantic-settings.

Values come from (highest priority first) init kwargs, ``GATEWAY_*``
environment variables (``__`` separates nested keys, e.g.
``GATEWAY_STORE__CAPACITY=500``), a ``.env`` file, and the YAML config file.
"""

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
    YamlConfigSettingsSource,
)

from gateway.errors import ConfigError

DEFAULT_CONFIG_PATH = "gateway.yaml"

_ENV_REF = re.compile(r"\$\{(\w+)\}|\$(\w+)")
_DURATION = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}


def _expand_env(value: str) -> str:
    """Replace $VAR / ${VAR} with environment values; unset vars become empty."""
    return _ENV_REF.sub(lambda m: os.environ.get(m.group(1) or m.group(2), ""), value)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    # API key (optional): if set, required on /admin routes
    api_key: str = ""
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:3001"]


class AgentConfig(BaseModel):
    # Empty URL selects the logging stub client
    url: str = ""
    timeout: float = Field(30.0, ge=0)

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        """Accept plain seconds or duration strings such as "10s", "500ms", "2m"."""
        if isinstance(value, str):
            match = _DURATION.match(value)
            if not match:
                raise ValueError(f"invalid duration: {value!r}")
            return float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        return value


class ChannelConfig(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    auth: str = ""


class SkillsConfig(BaseModel):
    dirs: list[str] = []
    allowlist: list[str] = []


class StoreConfig(BaseModel):
    type: Literal["memory"] = "memory"
    capacity: int = Field(1000, gt=0)


class LoggingConfig(BaseModel):
    level: str = "info"
    format: str = "json"


class WebhooksConfig(BaseModel):
    # slowapi limit string applied per client address
    rate_limit: str = "120/minute"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        yaml_file=DEFAULT_CONFIG_PATH,
    )

    server: ServerConfig = ServerConfig()
    agent: AgentConfig = AgentConfig()
    channels: list[ChannelConfig] = []
    skills: SkillsConfig = SkillsConfig()
    store: StoreConfig = StoreConfig()
    logging: LoggingConfig = LoggingConfig()
    webhooks: WebhooksConfig = WebhooksConfig()

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
            YamlConfigSettingsSource(settings_cls),
        )

    @model_validator(mode="after")
    def _expand_and_check(self) -> "Settings":
        # Secrets can live in the environment instead of the YAML file
        self.server.api_key = _expand_env(self.server.api_key)
        self.agent.url = _expand_env(self.agent.url)
        for channel in self.channels:
            channel.auth = _expand_env(channel.auth)

        seen: set[str] = set()
        for channel in self.channels:
            if channel.name in seen:
                raise ValueError(f"duplicate channel name: {channel.name}")
            seen.add(channel.name)
        return self


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file plus environment overrides.

    An explicitly requested file must exist; when no path is given,
    ``GATEWAY_CONFIG`` or ``gateway.yaml`` is used if present.
    """
    explicit = path is not None or bool(os.environ.get("GATEWAY_CONFIG"))
    config_path = Path(path or os.environ.get("GATEWAY_CONFIG") or DEFAULT_CONFIG_PATH)
    if explicit and not config_path.is_file():
        raise ConfigError(f"reading config {config_path}: file not found")

    class FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=config_path)

    try:
        return FileSettings()
    except yaml.YAMLError as e:
        raise ConfigError(f"parsing config {config_path}: {e}") from e
    except (ValidationError, SettingsError) as e:
        raise ConfigError(f"validating config {config_path}: {e}") from e
