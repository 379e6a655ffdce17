"""Minimal OpenWeatherMap current-conditions client."""

from .exceptions import WeatherParseError, WeatherProviderError
from .weather import Conditions, OpenWeatherProvider, format_url, parse_json

__all__ = [
    "Conditions",
    "OpenWeatherProvider",
    "WeatherParseError",
    "WeatherProviderError",
    "format_url",
    "parse_json",
]
