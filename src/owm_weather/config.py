"""Typed settings loader for the OpenWeatherMap client."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .redaction import sanitize_text

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openweather_api_key: str = Field(alias="OPENWEATHER_API_KEY", repr=False)
    openweather_base_url: str = Field(default=DEFAULT_BASE_URL, alias="OPENWEATHER_BASE_URL")
    weather_timeout_seconds: float = Field(default=10.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_default_location: str | None = Field(
        default=None, alias="WEATHER_DEFAULT_LOCATION"
    )

    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    weather_raw_payload_dir: Path = Field(
        default=Path("./data/raw/weather"),
        alias="WEATHER_RAW_PAYLOAD_DIR",
    )
    weather_journal_raw_payloads: bool = Field(
        default=False, alias="WEATHER_JOURNAL_RAW_PAYLOADS"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("weather_default_location", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat an empty env-string location as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        """Reject settings the client cannot work with."""
        if not self.openweather_api_key.strip():
            raise ValueError("OPENWEATHER_API_KEY must not be empty.")
        if not self.openweather_base_url.startswith(("https://", "http://")):
            raise ValueError("OPENWEATHER_BASE_URL must be an http(s) URL.")
        if "?" in self.openweather_base_url:
            raise ValueError("OPENWEATHER_BASE_URL must not include a query string.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for journaling (no credentials)."""
        return {
            "base_url": self.openweather_base_url,
            "timeout_seconds": self.weather_timeout_seconds,
            "default_location": self.weather_default_location,
            "raw_journaling": self.weather_journal_raw_payloads,
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {sanitize_text(str(exc))}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    settings.journal_dir.mkdir(parents=True, exist_ok=True)
    if settings.weather_journal_raw_payloads:
        settings.weather_raw_payload_dir.mkdir(parents=True, exist_ok=True)
    return settings
