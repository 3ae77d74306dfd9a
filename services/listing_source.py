"""
Listing page discovery: URL building, day handling and cached fetching.
"""
import logging
from datetime import date
from typing import Optional, Tuple

from models import AreaConfig, SourceInfo
from services.cache import HtmlCache
from utils.http_client import HttpClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.kvartersmenyn.se/index.php"

DAY_ALIASES = {
    1: ("1", "mon", "monday"),
    2: ("2", "tue", "tues", "tuesday"),
    3: ("3", "wed", "weds", "wednesday"),
    4: ("4", "thu", "thur", "thurs", "thursday"),
    5: ("5", "fri", "friday"),
    6: ("6", "sat", "saturday"),
    7: ("7", "sun", "sunday"),
}
DAY_LABELS = {day: aliases[1] for day, aliases in DAY_ALIASES.items()}

# Fragments that mark user input as a URL rather than an area slug
URL_HINTS = (
    "kvartersmenyn.se/",
    "http://",
    "https://",
    "index.php/",
    "area/",
    "city/",
)


def parse_day(value: str) -> Optional[int]:
    """Parse "mon".."sun", full day names or "1".."7" into an ISO weekday."""
    value = (value or "").strip().lower()
    if not value:
        return None
    for day, aliases in DAY_ALIASES.items():
        if value in aliases:
            return day
    return None


def today() -> int:
    return date.today().isoweekday()


def day_label(day: int) -> str:
    return DAY_LABELS.get(day, "")


def is_numeric_city(city: str) -> bool:
    return city.isdigit() and city.isascii()


def build_url(area: AreaConfig, day: int, base_url: str = DEFAULT_BASE_URL) -> str:
    """Build the listing URL for a city or a city area."""
    base_url = base_url.rstrip("/")
    if is_numeric_city(area.city):
        prefix = f"{base_url}/find/_/city/{area.city}"
    else:
        prefix = f"{base_url}/{area.city}"

    if area.area:
        return f"{prefix}/area/{area.area}/day/{day}"
    return f"{prefix}/day/{day}"


def area_label(area: AreaConfig) -> str:
    if not area.area:
        return area.city
    return f"{area.city}/{area.area}"


def area_label_with_day(area: AreaConfig, day: int) -> str:
    label = area_label(area)
    if day_label(day):
        return f"{label} (day {day_label(day)})"
    return label


def cache_key(area: AreaConfig, day: int) -> str:
    return f"{area.area or 'all'}_day{day}"


def looks_like_url(value: str) -> bool:
    return any(hint in value for hint in URL_HINTS)


def parse_area_url(raw: str) -> Optional[Tuple[str, str]]:
    """
    Extract (city, area) from a kvartersmenyn URL.

    Accepts e.g. https://www.kvartersmenyn.se/index.php/goteborg/area/garda_161
    or .../find/_/city/19/area/centrum_1. Area is empty for whole-city URLs.
    """
    raw = (raw or "").strip()
    if not raw:
        return None

    for scheme in ("https://", "http://"):
        if raw.startswith(scheme):
            raw = raw[len(scheme):]
    for marker in ("kvartersmenyn.se/", "index.php/"):
        idx = raw.find(marker)
        if idx >= 0:
            raw = raw[idx + len(marker):]

    parts = raw.split("/")
    city = ""
    area = ""
    for i, part in enumerate(parts[:-1]):
        if part == "city":
            city = parts[i + 1]
        elif part == "area":
            area = parts[i + 1]
    if not city:
        city = parts[0]

    if not city:
        return None
    return city, area


class ListingSource:
    """Loads listing pages from the HTML cache or the live site."""

    def __init__(self, http_client: HttpClient, cache: HtmlCache, base_url: str = DEFAULT_BASE_URL):
        self.http_client = http_client
        self.cache = cache
        self.base_url = base_url

    async def load(self, area: AreaConfig, day: int, ttl) -> Tuple[bytes, SourceInfo]:
        """
        Get the listing page for an area and day.

        Raises:
            FetchError: when the page is not cached and cannot be fetched
        """
        label = area_label_with_day(area, day)
        key = cache_key(area, day)

        cached = await self.cache.get(area.city, key, ttl)
        if cached is not None:
            data, modified = cached
            logger.info(f"Using cached listing for {label}")
            return data, SourceInfo(label=label, source="cache", cache_updated=modified)

        url = build_url(area, day, self.base_url)
        logger.info(f"Fetching {url}")
        data = await self.http_client.get_bytes(url)

        updated = await self.cache.set(area.city, key, data)
        return data, SourceInfo(label=label, source="live", cache_updated=updated)
