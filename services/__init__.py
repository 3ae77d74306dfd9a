from .menu_parser import MenuParser, MenuParseError, menu_parser, parse_restaurants
from .menu_matcher import fuzz_threshold, matches, matches_name, matches_text
from .query_filter import QueryFilter, filter_restaurants, include
from .cache import HtmlCache
from .listing_source import ListingSource, build_url, parse_area_url, parse_day

__all__ = [
    # Extraction
    "MenuParser",
    "MenuParseError",
    "menu_parser",
    "parse_restaurants",
    # Matching
    "fuzz_threshold",
    "matches",
    "matches_name",
    "matches_text",
    "QueryFilter",
    "filter_restaurants",
    "include",
    # Page loading
    "HtmlCache",
    "ListingSource",
    "build_url",
    "parse_area_url",
    "parse_day",
]
