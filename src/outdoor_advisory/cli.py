"""Command-line interface for outdoor activity advisories."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime

from outdoor_advisory.advisory.service import AdvisoryService
from outdoor_advisory.config import Settings, get_settings
from outdoor_advisory.exceptions import AdvisoryError
from outdoor_advisory.models.location import Coordinate
from outdoor_advisory.providers.weatherapi import WeatherApiClient

logger = logging.getLogger(__name__)


def _coordinate(value: str) -> Coordinate:
    try:
        return Coordinate.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _event_time(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 time: {value}") from e
    if parsed.tzinfo is None:
        raise argparse.ArgumentTypeError("Event time must include a UTC offset")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="outdoor-advisory",
        description="Outdoor Activity Advisory - Check the weather for scheduled events",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Advise command
    advise_parser = subparsers.add_parser(
        "advise", help="Get a suitability verdict for an event"
    )
    advise_parser.add_argument(
        "location",
        type=_coordinate,
        help="Location as lat,lon coordinates",
    )
    advise_parser.add_argument(
        "--at",
        dest="event_time",
        type=_event_time,
        required=True,
        help="Event start time (ISO 8601 with offset, e.g. 2025-10-13T14:00:00-04:00)",
    )
    advise_parser.add_argument(
        "--event-id",
        default=None,
        help="Event identifier to include in the verdict",
    )
    advise_parser.add_argument(
        "--activity",
        default=None,
        help="Activity profile name",
    )

    # Forecast command
    forecast_parser = subparsers.add_parser(
        "forecast", help="Get the forecast bundle for a location"
    )
    forecast_parser.add_argument(
        "location",
        type=_coordinate,
        help="Location as lat,lon coordinates",
    )

    return parser


def _build_service(settings: Settings) -> AdvisoryService:
    """Create the advisory service for the configured provider."""
    client = WeatherApiClient(
        api_key=settings.weatherapi_api_key,
        user_agent=settings.user_agent,
        forecast_days=settings.weatherapi_forecast_days,
        timeout=settings.provider_timeout_seconds,
        base_url=settings.weatherapi_base_url,
    )
    return AdvisoryService.from_config(client, settings.advisory_config())


async def _run(args: argparse.Namespace, settings: Settings) -> str:
    async with _build_service(settings) as service:
        if args.command == "advise":
            verdict = await service.advise(
                args.event_id, args.event_time, args.location, args.activity
            )
            return verdict.model_dump_json(indent=2)

        bundle = await service.cache.get(args.location)
        return bundle.model_dump_json(indent=2)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.provider_configured:
        logger.warning("WEATHERAPI_API_KEY is not set; forecasts cannot be fetched")

    try:
        output = asyncio.run(_run(args, settings))
    except AdvisoryError as e:
        logger.error(f"Advisory unavailable: {e}")
        print(f"advisory unavailable: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
