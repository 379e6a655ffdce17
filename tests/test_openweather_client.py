"""URL formatting and response parsing for the OpenWeatherMap client."""

from __future__ import annotations

import io
import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from owm_weather import Conditions, WeatherParseError, format_url, parse_json

FIXTURES = Path(__file__).parent / "fixtures"
LONDON_JSON = FIXTURES / "london.json"


def _london_payload() -> dict[str, Any]:
    return json.loads(LONDON_JSON.read_text(encoding="utf-8"))


def _stream(payload: Any) -> io.BytesIO:
    return io.BytesIO(json.dumps(payload).encode("utf-8"))


# ---------------------------------------------------------------------------
# format_url
# ---------------------------------------------------------------------------


def test_format_url_london() -> None:
    got = format_url("London", "dummy_token")
    assert got == (
        "https://api.openweathermap.org/data/2.5/weather"
        "?q=London&units=metric&appid=dummy_token"
    )


def test_format_url_is_deterministic() -> None:
    assert format_url("Paris,FR", "abc") == format_url("Paris,FR", "abc")


def test_format_url_percent_encodes_location() -> None:
    got = format_url("São Paulo,BR", "tok&en")
    assert "q=S%C3%A3o%20Paulo,BR" in got
    assert got.endswith("&appid=tok%26en")


def test_format_url_empty_inputs_still_produce_url() -> None:
    got = format_url("", "")
    assert got == "https://api.openweathermap.org/data/2.5/weather?q=&units=metric&appid="


def test_format_url_custom_base_url() -> None:
    got = format_url("London", "t", base_url="http://localhost:8080/data/2.5/weather")
    assert got == "http://localhost:8080/data/2.5/weather?q=London&units=metric&appid=t"


# ---------------------------------------------------------------------------
# parse_json
# ---------------------------------------------------------------------------


def test_parse_json_london_fixture() -> None:
    with LONDON_JSON.open("rb") as fh:
        got = parse_json(fh)
    assert got == Conditions(summary="Drizzle", temperature_celsius=7.17)


def test_parse_json_accepts_text_stream() -> None:
    with LONDON_JSON.open("r", encoding="utf-8") as fh:
        got = parse_json(fh)
    assert got.summary == "Drizzle"
    assert got.temperature_celsius == 7.17


def test_parse_json_same_bytes_give_equal_conditions() -> None:
    data = LONDON_JSON.read_bytes()
    assert parse_json(io.BytesIO(data)) == parse_json(io.BytesIO(data))


def test_parse_json_consumes_stream() -> None:
    stream = io.BytesIO(LONDON_JSON.read_bytes())
    parse_json(stream)
    assert stream.read() == b""


def test_parse_json_uses_first_weather_entry() -> None:
    payload = _london_payload()
    payload["weather"].append({"id": 701, "main": "Mist", "description": "mist"})
    assert parse_json(_stream(payload)).summary == "Drizzle"


def test_parse_json_integer_temperature_becomes_float() -> None:
    payload = _london_payload()
    payload["main"]["temp"] = 12
    got = parse_json(_stream(payload))
    assert got.temperature_celsius == 12.0
    assert isinstance(got.temperature_celsius, float)


def test_parse_json_concurrent_calls_are_independent() -> None:
    data = LONDON_JSON.read_bytes()
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: parse_json(io.BytesIO(data)), range(8)))
    assert all(result == results[0] for result in results)


def _without(path: tuple[str, ...]) -> dict[str, Any]:
    payload = _london_payload()
    target = payload
    for key in path[:-1]:
        target = target[key]
    del target[path[-1]]
    return payload


@pytest.mark.parametrize(
    "raw",
    [
        pytest.param(b"", id="empty"),
        pytest.param(LONDON_JSON.read_bytes()[:40], id="truncated"),
        pytest.param(b"not json at all", id="garbage"),
        pytest.param(b"[]", id="array-document"),
        pytest.param(b"null", id="null-document"),
    ],
)
def test_parse_json_rejects_malformed_input(raw: bytes) -> None:
    with pytest.raises(WeatherParseError):
        parse_json(io.BytesIO(raw))


@pytest.mark.parametrize(
    "payload",
    [
        pytest.param(_without(("weather",)), id="missing-weather"),
        pytest.param(_without(("main",)), id="missing-main"),
        pytest.param(_without(("main", "temp")), id="missing-temp"),
        pytest.param({**_london_payload(), "weather": []}, id="empty-weather-list"),
        pytest.param({**_london_payload(), "weather": [{"id": 300}]}, id="missing-summary"),
        pytest.param({**_london_payload(), "weather": [{"main": ""}]}, id="blank-summary"),
        pytest.param(
            {**_london_payload(), "main": {"temp": "warm"}}, id="non-numeric-temp"
        ),
    ],
)
def test_parse_json_rejects_schema_mismatch(payload: dict[str, Any]) -> None:
    with pytest.raises(WeatherParseError):
        parse_json(_stream(payload))


@pytest.mark.parametrize(
    "temp",
    [
        pytest.param("true", id="boolean"),
        pytest.param('"7.17"', id="numeric-string"),
        pytest.param("NaN", id="nan"),
        pytest.param("Infinity", id="infinity"),
        pytest.param("-Infinity", id="negative-infinity"),
        pytest.param("null", id="null"),
    ],
)
def test_parse_json_rejects_non_finite_or_non_numeric_temperature(temp: str) -> None:
    raw = ('{"weather": [{"main": "Drizzle"}], "main": {"temp": %s}}' % temp).encode()
    with pytest.raises(WeatherParseError, match="main.temp"):
        parse_json(io.BytesIO(raw))


def test_parse_json_rejects_non_string_summary() -> None:
    raw = b'{"weather": [{"main": 300}], "main": {"temp": 7.17}}'
    with pytest.raises(WeatherParseError, match="weather.0.main"):
        parse_json(io.BytesIO(raw))


def test_parse_json_text_stream_with_invalid_utf8_raises_parse_error() -> None:
    raw = b'{"weather": [{"main": "\xff"}], "main": {"temp": 7.17}}'
    stream = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8")
    with pytest.raises(WeatherParseError, match="utf-8") as exc_info:
        parse_json(stream)
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_parse_json_binary_stream_with_invalid_utf8_raises_parse_error() -> None:
    raw = b'{"weather": [{"main": "\xff"}], "main": {"temp": 7.17}}'
    with pytest.raises(WeatherParseError):
        parse_json(io.BytesIO(raw))


def test_parse_error_names_missing_field() -> None:
    with pytest.raises(WeatherParseError, match="main.temp") as exc_info:
        parse_json(_stream(_without(("main", "temp"))))
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_parse_error_for_truncated_json_is_labelled_malformed() -> None:
    with pytest.raises(WeatherParseError, match="Malformed current-weather response"):
        parse_json(io.BytesIO(b'{"weather": [{"main": "Drizzle"}'))


def test_conditions_are_immutable() -> None:
    conditions = Conditions(summary="Drizzle", temperature_celsius=7.17)
    with pytest.raises(ValidationError):
        conditions.summary = "Rain"  # type: ignore[misc]
