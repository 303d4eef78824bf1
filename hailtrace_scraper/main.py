"""Main entry point for the HailTrace browser scraper."""

import argparse
import asyncio
import sys
import traceback

from .core.config import ScraperConfig, get_credentials
from .core.exceptions import ConfigurationError
from .core.scraper import HailTraceScraper, timestamp_ms


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='hailtrace-scraper',
        description='Log into HailTrace and extract storm history for a location',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  HAILTRACE_EMAIL           HailTrace login email
  HAILTRACE_PASSWORD        HailTrace password
  HAILTRACE_HEADLESS        Set to 'false' to see the browser (default: headless)
  HAILTRACE_OUTPUT_DIR      Output directory (default: ./hailtrace-exports)

Examples:
  hailtrace-scraper --address "123 Main St, Arlington, VA"
  hailtrace-scraper --lat 38.9730 --lng -77.5144 --download
  hailtrace-scraper --territory DMV
  hailtrace-scraper --address "123 Main St" --debug
  HAILTRACE_HEADLESS=false hailtrace-scraper --address "123 Main St" --slow
        """
    )

    parser.add_argument('--address', '-a', type=str, help='Search by street address')
    parser.add_argument('--lat', type=float, help='Latitude for a coordinate search')
    parser.add_argument('--lng', type=float, help='Longitude for a coordinate search')
    parser.add_argument('--territory', '-t', type=str, help='Saved territory to select (DMV, PA, ...)')
    parser.add_argument('--download', '-d', action='store_true', help='Download the PDF report')
    parser.add_argument('--debug', action='store_true',
                        help='Dump page structure and captured API traffic')
    parser.add_argument('--slow', action='store_true', help='Stretch every fixed delay (x3)')
    parser.add_argument('--places', action='store_true',
                        help='Tick "Search for places" before an address search')
    parser.add_argument('--output-dir', type=str, help='Directory for screenshots and results')
    parser.add_argument('--headful', action='store_true', help='Show the browser window')

    return parser


def build_config(args) -> ScraperConfig:
    config = ScraperConfig(
        debug=args.debug,
        slow_mode=args.slow,
        enable_places_search=args.places,
    )
    if args.output_dir:
        config.output_dir = args.output_dir
    if args.headful:
        config.browser.headless = False
    return config


async def run(args, config: ScraperConfig, credentials) -> int:
    """Drive one session. Returns the process exit code."""
    async with HailTraceScraper(config, credentials) as scraper:
        try:
            await scraper.login()

            if args.debug:
                await scraper.screenshot('debug-post-login.png')

            result = None

            if args.address:
                result = await scraper.search_address(args.address)
                if args.debug:
                    print("\n📍 Debug: Page structure after search")
                    await scraper.debug_page_structure()
            elif args.lat is not None and args.lng is not None:
                result = await scraper.search_coordinates(args.lat, args.lng)
            elif args.territory:
                result = await scraper.search_territory(args.territory)
            else:
                await scraper.open_dashboard()
                if args.debug:
                    await scraper.debug_page_structure()
                print("ℹ️ No search parameters provided. Use --address, --lat/--lng or --territory")
                print("   Tip: Use --debug to analyze the page structure")

            if args.debug:
                scraper.dump_api_calls()

            if result is not None:
                print("\n📋 Extracted Data:")
                print(result.to_json())
                scraper.save_result(result)

                if args.download:
                    await scraper.download_report()

                await scraper.screenshot(f"hailtrace-{timestamp_ms()}.png")

            print("\n✅ HailTrace automation completed successfully")
            return 0

        except Exception as e:
            print(f"❌ Error: {e}", file=sys.stderr)
            if args.debug:
                traceback.print_exc()
            await scraper.screenshot('hailtrace-error.png')
            return 1


def main(argv=None):
    """Parse arguments, check credentials, run the session and exit."""
    args = build_parser().parse_args(argv)

    if (args.lat is None) != (args.lng is None):
        print("⚠ Both --lat and --lng are required for a coordinate search", file=sys.stderr)
        sys.exit(2)

    config = build_config(args)
    if not config.validate():
        print("⚠ Warning: Configuration validation failed, continuing anyway...")

    try:
        credentials = get_credentials()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    try:
        exit_code = asyncio.run(run(args, config, credentials))
    except Exception as e:
        # Browser launch failures happen before run() can screenshot
        print(f"❌ Error: {e}", file=sys.stderr)
        if args.debug:
            traceback.print_exc()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
