"""Entry point for the direct GraphQL client."""

import argparse
import os
import sys
import traceback

from .core.config import ScraperConfig, get_credentials
from .core.exceptions import HailTraceError
from .core.scraper import timestamp_ms
from .storage.json_storage import JSONStorage
from .utils.http_client import HailTraceAPI, default_date_range, hail_size, significant_events


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='hailtrace-api',
        description='Query HailTrace weather events through the GraphQL API',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hailtrace-api
  hailtrace-api --start 2024-01-01 --min-hail 1.0
  hailtrace-api --limit 500 --output storms.json
        """
    )
    parser.add_argument('--start', type=str, help='Start date YYYY-MM-DD (default: 1 year ago)')
    parser.add_argument('--end', type=str, help='End date YYYY-MM-DD (default: today)')
    parser.add_argument('--min-hail', type=float, help='Only events with hail >= this size (inches)')
    parser.add_argument('--limit', type=int, default=100, help='Max events to fetch (default: 100)')
    parser.add_argument('--page', type=int, default=0, help='First page to fetch (default: 0)')
    parser.add_argument('--output', '-o', type=str, help='Output file (default: auto-generated)')
    parser.add_argument('--debug', action='store_true', help='Print tracebacks on failure')
    return parser


def print_latest(event):
    print("\n📍 Latest weather event:")
    if not event:
        print("   none")
        return
    print(f"   Date: {event.get('eventDate')}")
    print(f"   Types: {', '.join(event.get('types') or [])}")
    print(f"   Hail: {hail_size(event) or 'N/A'}\"")
    print(f"   Wind: {event.get('maxMeteorologistWindSpeedMPH') or 'N/A'} mph")


def print_summary(export):
    print("\n📋 Storm Event Summary:")
    print("─" * 60)
    print("\nMonthly Summary:")
    for month, stats in export['summary']['byMonth'].items():
        print(f"  {month}: {stats['count']} events, max hail: {stats['maxHail']}\", "
              f"max wind: {stats['maxWind']} mph")


def print_significant(events):
    significant = significant_events(events)
    if not significant:
        return
    print(f"\n🔴 Significant Events (hail >= 1\"): {len(significant)}")
    for event in significant[:10]:
        wind = event.get('maxMeteorologistWindSpeedMPH')
        wind_text = f", {wind} mph wind" if wind else ''
        print(f"  {event.get('eventDate')}: {hail_size(event)}\" hail{wind_text}")
    if len(significant) > 10:
        print(f"  ... and {len(significant) - 10} more")


def output_path(config: ScraperConfig, filename: str = None) -> str:
    filename = filename or f"hailtrace-events-{timestamp_ms()}.json"
    if os.path.isabs(filename):
        return filename
    return config.output_path(filename)


def main(argv=None):
    args = build_parser().parse_args(argv)

    dates = default_date_range()
    start_date = args.start or dates['startDate']
    end_date = args.end or dates['endDate']

    config = ScraperConfig(debug=args.debug)

    try:
        api = HailTraceAPI(config)
        api.login(get_credentials())

        print_latest(api.get_latest_weather_event())

        print(f"\n📊 Fetching events from {start_date} to {end_date}...")
        events = api.get_all_events(
            start_date, end_date,
            min_hail=args.min_hail, limit=args.limit, start_page=args.page,
        )

        if not events:
            print("No events found for the specified criteria.")
            return

        print(f"\n✅ Retrieved {len(events)} events")

        export = api.build_export(events, {
            'startDate': start_date,
            'endDate': end_date,
            'minHail': args.min_hail,
            'limit': args.limit,
        })
        print_summary(export)
        print_significant(events)

        JSONStorage.save(export, output_path(config, args.output))

    except HailTraceError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        if args.debug:
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
