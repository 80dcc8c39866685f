"""Command-line entry point: python -m transits."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, date, datetime, time

from transitwire.config import get_settings
from transitwire.log import configure_logging

from transits.errors import UpstreamFetchError
from transits.natal import calculate_natal_chart
from transits.service import TransitService

logger = logging.getLogger("transits")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid number '{value}'") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive number of days, got {number}")
    return number


def _parse_time(value: str) -> time:
    try:
        return time.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid time '{value}', expected HH:MM") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="transits", description="Transit calendar and personal impacts")
    sub = parser.add_subparsers(dest="command", required=True)

    upcoming = sub.add_parser("upcoming", help="List upcoming transit events")
    upcoming.add_argument("--start", type=_parse_date, default=None, help="First day (default: today, UTC)")
    upcoming.add_argument("--days", type=_positive_int, default=None, help="Window length in days")

    impacts = sub.add_parser("impacts", help="Read upcoming transits against a birth chart")
    impacts.add_argument("--start", type=_parse_date, default=None)
    impacts.add_argument("--days", type=_positive_int, default=None)
    impacts.add_argument("--limit", type=int, default=None)
    impacts.add_argument("--birth-date", type=_parse_date, required=True)
    impacts.add_argument("--birth-time", type=_parse_time, default=None)
    impacts.add_argument("--lat", type=float, required=True)
    impacts.add_argument("--lon", type=float, required=True)
    impacts.add_argument("--tz", default="UTC")
    impacts.add_argument("--include-lunar", action="store_true")
    return parser


async def run(args: argparse.Namespace, service: TransitService) -> list[dict]:
    start = args.start or datetime.now(UTC).date()
    transits = await service.get_upcoming_transits(start, args.days)
    if args.command == "upcoming":
        return [event.model_dump(mode="json") for event in transits]

    chart = calculate_natal_chart(args.birth_date, args.birth_time, args.lat, args.lon, args.tz)
    impacts = await service.get_personal_transit_impacts(
        transits,
        chart,
        limit=args.limit,
        include_lunar=args.include_lunar,
    )
    return [impact.model_dump(mode="json") for impact in impacts]


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    service = TransitService.from_settings(settings)
    try:
        payload = asyncio.run(run(args, service))
    except UpstreamFetchError as exc:
        logger.error("%s", exc)
        return 1
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
