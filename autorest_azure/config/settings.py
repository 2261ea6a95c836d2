import os
import sys
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autorest_azure.core.logging import get_logger, setup_logging


__all__ = [
    "ConfigurationError",
    "HTTPSettings",
    "LoggingSettings",
    "PollingSettings",
    "Settings",
    "get_settings",
]


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


class PollingSettings(BaseModel):
    """Long-running operation polling settings."""

    model_config = ConfigDict(validate_assignment=True)

    delay: float = Field(
        default=60.0,
        ge=0,
        description="Seconds between polls when the service sends no Retry-After header",
    )


class HTTPSettings(BaseModel):
    """HTTP client configuration settings."""

    model_config = ConfigDict(validate_assignment=True)

    timeout_connect: float = Field(default=5.0, description="Connect timeout in seconds")

    timeout_read: float = Field(default=60.0, description="Read timeout in seconds")

    max_connections: int = Field(default=100, ge=1)

    max_keepalive_connections: int = Field(default=20, ge=0)

    verify: bool | str = Field(
        default=True,
        description="SSL verification (True/False or path to CA bundle)",
    )

    user_agent: str = Field(default="autorest-azure")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(validate_assignment=True)

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    format: str = Field(
        default="auto",
        description="Output format: 'console', 'json', or 'auto' (json when stderr is not a TTY)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        upper_v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower_v = v.lower()
        valid_formats = ["auto", "console", "json"]
        if lower_v not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return lower_v

    @property
    def json_logs(self) -> bool:
        """Whether events should be rendered as JSON lines."""
        if self.format == "auto":
            return not sys.stderr.isatty()
        return self.format == "json"


class Settings(BaseSettings):
    """
    Configuration settings for autorest-azure clients.

    Settings are loaded from environment variables, .env files and an optional
    TOML file. Precedence: explicit overrides > environment > TOML > defaults.
    Nested values use a double underscore, e.g. ``POLLING__DELAY=5``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    polling: PollingSettings = Field(
        default_factory=PollingSettings,
        description="Long-running operation polling settings",
    )

    http: HTTPSettings = Field(
        default_factory=HTTPSettings,
        description="HTTP client configuration settings",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    def configure_logging(self) -> None:
        """Apply the logging section to structlog."""
        setup_logging(json_logs=self.logging.json_logs, log_level_name=self.logging.level)

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings from an optional TOML file plus keyword overrides."""
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_toml_config(config_path)
            get_logger(__name__).info("config_file_loaded", path=str(config_path))

        settings = cls()

        for key, value in config_data.items():
            if not hasattr(settings, key) or not isinstance(value, dict):
                continue
            nested_obj = getattr(settings, key)
            for nested_key, nested_value in value.items():
                env_key = f"{key.upper()}__{nested_key.upper()}"
                if os.getenv(env_key) is None:
                    setattr(nested_obj, nested_key, nested_value)

        def _apply_overrides(target: Any, overrides: dict[str, Any]) -> None:
            for k, v in overrides.items():
                sub = getattr(target, k, None)
                if isinstance(v, dict) and isinstance(sub, BaseModel):
                    _apply_overrides(sub, v)
                else:
                    setattr(target, k, v)

        if kwargs:
            _apply_overrides(settings, kwargs)

        return settings


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    try:
        return Settings.from_config()
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
