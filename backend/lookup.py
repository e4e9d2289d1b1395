#!/usr/bin/env python3
"""
Look up street cleaning near an address or on a street.

Usage:
    python lookup.py --address "123 Valencia St"
    python lookup.py --lng -122.4216 --lat 37.7648 --date 2025-08-12 --hour 9
    python lookup.py --street "Van Ness Avenue" --date 2025-08-12 --hour 9.5 --json

Without --date/--hour the result lists sweeping that runs today within
~100 m. With either, every rule within ~880 m (and on --street) is shown
with whether it is in force at that date and hour, active rules first.
"""
import argparse
import asyncio
import json
import logging
import sys
from datetime import date, datetime
from typing import List, Optional

from engine import ScheduleQuery, StatusGroup, run_query, feature_collection
from engine.activity import is_active_now
from engine.formatting import approx_meters, format_window
from fetchers import NominatimGeocoder, GeocodeResult
from pipeline import load_segments

logger = logging.getLogger(__name__)


async def geocode_address(address: str) -> Optional[GeocodeResult]:
    async with NominatimGeocoder() as geocoder:
        return await geocoder.geocode(address)


def describe_group(group, now_hour: Optional[int] = None) -> str:
    """One human-readable line per result group"""
    segment = group.segment
    parts = [group.display_name, format_window(segment.from_hour, segment.to_hour)]

    if isinstance(group, StatusGroup):
        parts.append("NO PARKING" if group.is_active else "ok to park")
    else:
        parts.append(group.display_limits)
        if now_hour is not None and is_active_now(segment, now_hour):
            parts.append("sweeping now")

    if group.distance is not None:
        parts.append(f"~{approx_meters(group.distance)} meters away")
    return " | ".join(parts)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SF street cleaning lookup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    location = parser.add_mutually_exclusive_group()
    location.add_argument("--address", "-a", help="Address in San Francisco to geocode")
    location.add_argument("--lng", type=float, help="Longitude (use with --lat)")
    parser.add_argument("--lat", type=float, help="Latitude (use with --lng)")
    parser.add_argument("--street", "-s", help="Street name, e.g. 'Market St'")
    parser.add_argument("--date", "-d", type=date.fromisoformat, help="Target date YYYY-MM-DD")
    parser.add_argument("--hour", type=float, help="Target hour 0-23 (fractions are floored)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--geojson", action="store_true", help="Print results as a GeoJSON FeatureCollection")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if (args.lng is None) != (args.lat is None):
        logger.error("--lng and --lat must be given together")
        return 2

    coordinates = None
    if args.address:
        result = asyncio.run(geocode_address(args.address))
        if result is None:
            logger.error(f"Address not found in San Francisco: {args.address}")
            return 1
        coordinates = result.coordinates
        print(f"Location: {result.display_name}")
    elif args.lng is not None:
        coordinates = (args.lng, args.lat)

    segments = load_segments()
    query = ScheduleQuery(
        coordinates=coordinates,
        street_name=args.street,
        target_date=args.date,
        target_hour=args.hour,
    )
    now = datetime.now()
    groups = run_query(segments, query, now=now)

    if args.geojson:
        print(json.dumps(feature_collection(groups), indent=2))
    elif args.json:
        print(json.dumps([g.to_dict() for g in groups], indent=2))
    elif not groups:
        print("No street cleaning found for this search.")
    else:
        now_hour = None if query.is_timed else now.hour
        for group in groups:
            print(describe_group(group, now_hour))

    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    sys.exit(main())
