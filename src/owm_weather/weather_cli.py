"""CLI: fetch current OpenWeatherMap conditions for a place and print them."""

from __future__ import annotations

import argparse
import sys
import uuid

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import ConfigError, JournalError, WeatherParseError, WeatherProviderError
from .journal import JournalWriter
from .log_setup import setup_logger
from .weather.models import ConditionsFetchResult
from .weather.openweather import OpenWeatherProvider


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show current weather conditions from OpenWeatherMap."
    )
    parser.add_argument(
        "location",
        nargs="?",
        default=None,
        help="Place name, e.g. 'London' or 'London,UK'. Defaults to WEATHER_DEFAULT_LOCATION.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print conditions as JSON instead of a table.",
    )
    return parser.parse_args(argv)


def _resolve_location(args: argparse.Namespace, settings: Settings) -> str | None:
    location = args.location if args.location is not None else settings.weather_default_location
    if location is None or not location.strip():
        return None
    return location.strip()


def _print_conditions(console: Console, result: ConditionsFetchResult, as_json: bool) -> None:
    conditions = result.conditions
    if as_json:
        console.print_json(data={"location": result.location, **conditions.model_dump()})
        return

    table = Table(title="Current Conditions")
    table.add_column("Location", overflow="fold")
    table.add_column("Summary")
    table.add_column("Temp (C)", justify="right")
    table.add_row(result.location, conditions.summary, f"{conditions.temperature_celsius:g}")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Run the current-conditions lookup."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()
    session_id = uuid.uuid4().hex[:12]
    context = {"session_id": session_id}

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc, extra=context)
        return 2
    setup_logger(settings.log_level)

    location = _resolve_location(args, settings)
    if location is None:
        logger.error(
            "Missing location: pass LOCATION or set WEATHER_DEFAULT_LOCATION.", extra=context
        )
        return 2
    context["location"] = location

    try:
        journal = JournalWriter(
            journal_dir=settings.journal_dir,
            raw_payload_dir=settings.weather_raw_payload_dir,
            session_id=session_id,
        )
        journal.write_event("weather_startup", settings=settings.safe_summary())
    except JournalError as exc:
        logger.error("Failed to initialize weather journal: %s", exc, extra=context)
        return 3

    exit_code = 0
    try:
        journal.write_event("weather_request_start", location=location)
        with OpenWeatherProvider(settings=settings, logger=logger) as provider:
            result = provider.fetch_conditions(location)

        raw_path: str | None = None
        if settings.weather_journal_raw_payloads:
            raw_path = str(journal.write_raw_response(location, result.raw_payload))
        journal.write_event(
            "weather_request_success",
            provider=result.provider,
            location=result.location,
            source_url=result.source_url,
            raw_path=raw_path,
            **result.conditions.model_dump(),
        )
        _print_conditions(console, result, as_json=args.json)
    except (WeatherProviderError, WeatherParseError, JournalError) as exc:
        exit_code = 4
        status_code = getattr(exc, "status_code", None)
        logger.error(
            "Weather lookup failure: %s", exc, extra={**context, "status_code": status_code}
        )
        try:
            journal.write_event(
                "weather_request_failure",
                error=str(exc),
                error_type=type(exc).__name__,
                status_code=status_code,
            )
        except JournalError:
            logger.error("Failed to write weather_request_failure event.", extra=context)
    except Exception as exc:  # pragma: no cover - last-resort catch for CLI runtime
        exit_code = 99
        logger.exception("Unexpected weather CLI failure: %s", exc, extra=context)
        try:
            journal.write_event(
                "weather_request_failure_unhandled",
                error=str(exc),
                error_type=type(exc).__name__,
            )
        except JournalError:
            logger.error("Failed to write weather_request_failure_unhandled event.", extra=context)
    finally:
        try:
            journal.write_event("weather_shutdown", exit_code=exit_code)
        except JournalError:
            logger.error("Failed to write weather_shutdown event.", extra=context)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
