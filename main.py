"""
Lunch menu finder for kvartersmenyn.se

Entry point for the command-line application.
Fetches today's lunch listings for the configured areas and filters them
by restaurant name, menu text or both.
"""
import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional

from config import (
    ConfigError,
    Options,
    Settings,
    default_cache_dir,
    default_config_path,
    load_settings,
    configured_areas,
    merge_options,
    save_config,
)
from models import AreaConfig, Query
from services.cache import HtmlCache
from services.formatter import print_listing
from services.listing_source import ListingSource, area_label, looks_like_url, parse_area_url, parse_day, today
from services.menu_parser import MenuParseError, parse_restaurants
from services.query_filter import filter_restaurants
from utils.http_client import FetchError, HttpClient

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

YES_ANSWERS = ("y", "yes", "j", "ja")


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging to stderr so listings on stdout stay clean."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.CRITICAL)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kvartersmenyn",
        description="Show lunch menus from kvartersmenyn.se, filtered by name and menu.",
    )
    parser.add_argument("-c", "--city", default="", help="City segment used in the kvartersmenyn URL (can be set in config)")
    parser.add_argument("-a", "--area", action="append", default=[], help="Area slug from kvartersmenyn, e.g. garda_161 (repeat or comma-separated)")
    parser.add_argument("-n", "--name", default="", help="Filter by restaurant name (fuzzy, case-insensitive)")
    parser.add_argument("-m", "--menu", default="", help="Filter by menu text (fuzzy, case-insensitive)")
    parser.add_argument("-s", "--search", default="", help="Filter both name and menu (fuzzy, case-insensitive)")
    parser.add_argument("-d", "--day", default="", help="Day of week to fetch (mon, tue, wed, thu, fri, sat, sun or 1-7)")
    parser.add_argument("-C", "--cache-dir", default="", help="Directory for cached HTML (can be set in config)")
    parser.add_argument("-t", "--cache-ttl", default="", help="How long to reuse cached HTML (e.g. 6h, 2h)")
    parser.add_argument("-f", "--config", default=default_config_path(), help="Path to YAML config (default: %(default)s)")
    parser.add_argument("-i", "--init-config", action="store_true", help="Run the interactive config setup and exit")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config: WARNING)")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def split_areas(values: List[str]) -> List[str]:
    """Flatten repeated and comma-separated --area values."""
    areas = []
    for value in values:
        areas.extend(part.strip() for part in value.split(",") if part.strip())
    return areas


def prompt_and_save_config(
    path: str,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Settings:
    """
    Ask for kvartersmenyn URLs and a cache TTL, then write the config file.

    Areas in the default city are stored without a city of their own.
    """
    areas: List[AreaConfig] = []
    default_city = ""

    def add_area(city: str, area: str) -> None:
        nonlocal default_city
        if not default_city:
            default_city = city
        if city == default_city:
            areas.append(AreaConfig(area=area))
        else:
            areas.append(AreaConfig(city=city, area=area))

    def add_from_url(url: str) -> bool:
        nonlocal default_city
        parsed = parse_area_url(url)
        if parsed is None:
            output_fn("Could not parse the URL. Please try again.")
            return False
        city, area = parsed
        if not area:
            default_city = city
            area = input_fn(f"Enter area slug for {city} (empty for whole city): ").strip()
        add_area(city, area)
        return True

    while True:
        line = input_fn(
            "Enter kvartersmenyn URL (city or area), e.g. "
            "https://www.kvartersmenyn.se/index.php/goteborg/area/garda_161: "
        ).strip()
        if add_from_url(line):
            break

    while True:
        more = input_fn("Add another area? (y/N): ").strip().lower()
        if more not in YES_ANSWERS:
            break

        while True:
            line = input_fn("Enter area slug or kvartersmenyn URL: ").strip()
            if looks_like_url(line):
                if add_from_url(line):
                    break
                continue
            if not default_city:
                output_fn("Please provide a kvartersmenyn URL first to set the city.")
                continue
            add_area(default_city, line)
            break

    ttl = input_fn("Cache TTL, e.g. 6h or 90m (default 6h): ").strip() or "6h"
    settings = Settings(
        city=default_city,
        areas=areas,
        cache_dir=default_cache_dir() or ".cache",
        cache_ttl=ttl,
    )

    try:
        saved = save_config(path, settings)
        output_fn(f"Saved config to {saved}")
    except ConfigError as e:
        output_fn(f"Warning: could not write config: {e}")

    return settings


async def show_listings(options: Options, settings: Settings) -> None:
    """
    Fetch, parse, filter and print listings for every configured area.

    Areas are processed one at a time, in configuration order.
    """
    query = Query(name=options.name, menu=options.menu, search=options.search)
    http_client = HttpClient(timeout_seconds=settings.request_timeout_seconds)
    source = ListingSource(http_client, HtmlCache(options.cache_dir), settings.base_url)

    try:
        for area in options.areas:
            try:
                data, info = await source.load(area, options.day, options.cache_ttl)
            except FetchError as e:
                raise FetchError(f"could not fetch data for {area_label(area)}: {e}", e.status) from e

            try:
                restaurants = parse_restaurants(data)
            except MenuParseError as e:
                raise MenuParseError(f"could not parse page for {area_label(area)}: {e}") from e

            print_listing(info, query, filter_restaurants(restaurants, query))
    finally:
        await http_client.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    area_flags = split_areas(args.area)

    config_error = None
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        config_error = e
        settings = None

    setup_logging(args.log_level or (settings.log_level if settings else "WARNING"))
    if config_error is not None:
        logger.warning(str(config_error))

    if args.init_config:
        prompt_and_save_config(args.config)
        return 0

    if (settings is None or not configured_areas(settings)) and not (area_flags or args.city.strip()):
        print("No valid config found. We need at least one kvartersmenyn URL and (optional) cache TTL.")
        prompt_and_save_config(args.config)
        return 0
    settings = settings or Settings()

    try:
        options = merge_options(
            settings,
            city=args.city,
            areas=area_flags,
            name=args.name,
            menu=args.menu,
            search=args.search,
            cache_dir=args.cache_dir,
            cache_ttl=args.cache_ttl,
        )
    except ConfigError as e:
        logger.error(str(e))
        return 2

    if args.day:
        day = parse_day(args.day)
        if day is None:
            logger.error(f"invalid --day value: {args.day!r} (use mon/tue/... or 1-7)")
            return 2
        options.day = day
    else:
        options.day = today()

    try:
        asyncio.run(asyncio.wait_for(show_listings(options, settings), timeout=settings.run_timeout_seconds))
    except asyncio.TimeoutError:
        logger.error(f"timed out after {settings.run_timeout_seconds:.0f}s")
        return 1
    except (FetchError, MenuParseError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
