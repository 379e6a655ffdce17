"""OpenWeatherMap current-weather integration."""

from .models import Conditions, ConditionsFetchResult, CurrentWeatherPayload
from .openweather import DEFAULT_BASE_URL, OpenWeatherProvider, format_url, parse_json

__all__ = [
    "DEFAULT_BASE_URL",
    "Conditions",
    "ConditionsFetchResult",
    "CurrentWeatherPayload",
    "OpenWeatherProvider",
    "format_url",
    "parse_json",
]
