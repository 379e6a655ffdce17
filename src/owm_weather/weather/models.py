"""Typed models for OpenWeatherMap current-weather responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Conditions(BaseModel):
    """Current conditions reduced to a summary and a Celsius temperature."""

    model_config = ConfigDict(frozen=True)

    summary: str
    temperature_celsius: float


class WeatherEntry(BaseModel):
    """One element of the provider's `weather` array."""

    id: int | None = None
    main: str = Field(strict=True, min_length=1)
    description: str | None = None
    icon: str | None = None


class MainReadings(BaseModel):
    """The provider's `main` block; `temp` is Celsius when `units=metric`."""

    temp: float = Field(strict=True, allow_inf_nan=False)
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    humidity: float | None = None


class CurrentWeatherPayload(BaseModel):
    """Subset of the `/data/2.5/weather` response validated by the parser."""

    weather: list[WeatherEntry] = Field(min_length=1)
    main: MainReadings
    name: str | None = None


class ConditionsFetchResult(BaseModel):
    """Parsed conditions plus the raw response they were read from."""

    provider: str
    location: str
    source_url: str
    retrieval_timestamp: datetime
    conditions: Conditions
    raw_payload: dict[str, Any]
