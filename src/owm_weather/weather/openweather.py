"""OpenWeatherMap (api.openweathermap.org) current-weather client."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import IO, Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from ..config import DEFAULT_BASE_URL, Settings
from ..exceptions import WeatherParseError, WeatherProviderError
from ..redaction import sanitize_text
from .models import Conditions, ConditionsFetchResult, CurrentWeatherPayload

__all__ = [
    "DEFAULT_BASE_URL",
    "OpenWeatherProvider",
    "conditions_from_document",
    "format_url",
    "load_document",
    "parse_json",
]


def format_url(location: str, token: str, *, base_url: str = DEFAULT_BASE_URL) -> str:
    """Build the current-weather request URL for `location`.

    Metric units are always requested so `main.temp` comes back in Celsius.
    Values are percent-encoded but otherwise not validated: an empty location
    or token still yields a URL and the provider rejects it (400 / 401).
    """
    query = urlencode(
        {"q": location, "units": "metric", "appid": token},
        quote_via=quote,
        safe=",",
    )
    return f"{base_url}?{query}"


def parse_json(reader: IO[bytes] | IO[str]) -> Conditions:
    """Decode one current-weather JSON document from `reader`.

    The stream is read to completion. Raises WeatherParseError for empty,
    truncated or malformed JSON, for undecodable text, and for documents
    missing the summary (`weather[0].main`) or a finite numeric temperature
    (`main.temp`).
    """
    try:
        data = reader.read()
    except UnicodeDecodeError as exc:
        raise WeatherParseError(
            f"Malformed current-weather response: not valid {exc.encoding} ({exc.reason})"
        ) from exc
    return conditions_from_document(load_document(data))


def load_document(data: str | bytes) -> Any:
    """Decode raw response text; the result is validated by `conditions_from_document`."""
    try:
        return json.loads(data)
    except ValueError as exc:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        raise WeatherParseError(f"Malformed current-weather response: {exc}") from exc


def conditions_from_document(document: Any) -> Conditions:
    """Validate an already-decoded response document and reduce it to Conditions."""
    try:
        payload = CurrentWeatherPayload.model_validate(document)
    except ValidationError as exc:
        raise WeatherParseError(_describe_validation_error(exc)) from exc
    return Conditions(
        summary=payload.weather[0].main,
        temperature_celsius=payload.main.temp,
    )


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if not location:
        return f"Current-weather response is not a JSON object: {first.get('msg')}"
    extra = f" (+{exc.error_count() - 1} more)" if exc.error_count() > 1 else ""
    return f"Invalid current-weather payload at '{location}': {first.get('msg')}{extra}"


class OpenWeatherProvider:
    """Fetches current conditions from OpenWeatherMap with a single GET."""

    provider_name = "openweathermap"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._client = httpx.Client(
            timeout=settings.weather_timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def __enter__(self) -> OpenWeatherProvider:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_conditions(self, location: str) -> ConditionsFetchResult:
        """Request and parse current conditions for a place name."""
        if not location.strip():
            raise WeatherProviderError("Location must not be empty.")

        url = format_url(
            location,
            self.settings.openweather_api_key,
            base_url=self.settings.openweather_base_url,
        )
        safe_url = sanitize_text(url)
        self.logger.info(
            "Fetching current conditions for %r", location, extra={"location": location}
        )
        self.logger.debug("GET %s", safe_url, extra={"location": location})

        response = self._get(url, safe_url)
        document = load_document(response.content)
        conditions = conditions_from_document(document)
        return ConditionsFetchResult(
            provider=self.provider_name,
            location=location,
            source_url=safe_url,
            retrieval_timestamp=datetime.now(UTC),
            conditions=conditions,
            raw_payload=document,
        )

    def _get(self, url: str, safe_url: str) -> httpx.Response:
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise WeatherProviderError(
                f"OpenWeatherMap request failed with status {status} "
                f"at {safe_url}: {self._error_message(exc.response)}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherProviderError(
                f"OpenWeatherMap request failed at {safe_url}: "
                f"{type(exc).__name__}: {sanitize_text(str(exc))}"
            ) from exc
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        # Error bodies look like {"cod": 401, "message": "Invalid API key. ..."}.
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return sanitize_text(body["message"])
        return sanitize_text(response.text[:300])
