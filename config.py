"""
Configuration module - loads settings from the YAML config file, .env and environment
"""
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models import AreaConfig

logger = logging.getLogger(__name__)

APP_NAME = "kvartersmenyn"
DEFAULT_CACHE_TTL = timedelta(hours=6)

_DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1, "ms": 0.001}


class ConfigError(Exception):
    """Raised for unusable configuration or conflicting flags."""


class Settings(BaseSettings):
    """Application settings from config file, environment variables and .env."""

    model_config = SettingsConfigDict(
        env_prefix="KVARTERSMENYN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Listing targets
    city: str = Field(default="")
    area: str = Field(default="")
    areas: List[AreaConfig] = Field(default_factory=list)

    # Cache
    cache_dir: str = Field(default="")
    cache_ttl: str = Field(default="")

    # HTTP
    base_url: str = Field(default="https://www.kvartersmenyn.se/index.php")
    request_timeout_seconds: float = Field(default=12.0)
    run_timeout_seconds: float = Field(default=15.0)

    log_level: str = Field(default="WARNING")

    @field_validator("cache_ttl", mode="before")
    @classmethod
    def ttl_as_text(cls, value):
        # YAML reads bare hours like `cache_ttl: 6` as a number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


@dataclass
class Options:
    """Effective options for one run after merging flags and config."""
    areas: List[AreaConfig] = field(default_factory=list)
    name: str = ""
    menu: str = ""
    search: str = ""
    day: int = 0
    cache_dir: str = ""
    cache_ttl: timedelta = DEFAULT_CACHE_TTL


def _platform_dir(kind: str) -> str:
    """Platform-appropriate base directory for "cache" or "config" files."""
    home = os.path.expanduser("~")
    if home == "~":
        home = ""

    if sys.platform == "darwin":
        if not home:
            return ""
        sub = "Caches" if kind == "cache" else "Application Support"
        return os.path.join(home, "Library", sub, APP_NAME)

    if sys.platform.startswith("win"):
        if kind == "cache":
            base = os.environ.get("LOCALAPPDATA") or os.environ.get("TEMP", "")
            if not base and home:
                base = os.path.join(home, "AppData", "Local", "Temp")
            return os.path.join(base, APP_NAME, "Cache") if base else ""
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA", "")
        if not base and home:
            base = os.path.join(home, "AppData", "Roaming")
        return os.path.join(base, APP_NAME) if base else ""

    env_var, fallback = ("XDG_CACHE_HOME", ".cache") if kind == "cache" else ("XDG_CONFIG_HOME", ".config")
    base = os.environ.get(env_var, "")
    if not base and home:
        base = os.path.join(home, fallback)
    return os.path.join(base, APP_NAME) if base else ""


def default_cache_dir() -> str:
    return _platform_dir("cache")


def default_config_path() -> str:
    base = _platform_dir("config")
    return os.path.join(base, "config.yaml") if base else ""


def expand_home(path: str) -> str:
    if path.startswith("~/"):
        return os.path.expanduser(path)
    return path


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings, reading the YAML config file when it exists.

    A missing file is not an error: defaults and environment apply.
    """
    if not path:
        return Settings()

    path = expand_home(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.debug(f"No config file at {path}")
        return Settings()
    except OSError as e:
        raise ConfigError(f"could not read config ({path}): {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse config ({path}): {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"could not parse config ({path}): expected a mapping")

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config ({path}): {e}") from e


def save_config(path: Optional[str], settings: Settings) -> str:
    """Write city, areas and cache settings to the YAML config file."""
    path = path or default_config_path()
    if not path:
        raise ConfigError("no config path available")

    path = expand_home(path)
    data = {}
    if settings.city:
        data["city"] = settings.city
    if settings.area:
        data["area"] = settings.area
    if settings.areas:
        data["areas"] = [area.model_dump(exclude_defaults=True) for area in settings.areas]
    data["cache_dir"] = settings.cache_dir
    data["cache_ttl"] = settings.cache_ttl

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"could not write config ({path}): {e}") from e

    logger.info(f"Saved config to {path}")
    return path


def parse_cache_ttl(value: str) -> Optional[timedelta]:
    """
    Parse a cache TTL like "6h", "90m", "1h30m" or bare hours "6".

    Returns None when the value is not a valid duration.
    """
    value = (value or "").strip()
    if not value:
        return None
    if value.isdigit():
        return timedelta(hours=int(value))

    pos = 0
    seconds = 0.0
    for match in _DURATION_RE.finditer(value):
        if match.start() != pos:
            return None
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(value):
        return None
    return timedelta(seconds=seconds)


def configured_areas(settings: Settings) -> List[AreaConfig]:
    """Areas from config; entries without a city inherit the top-level city."""
    default_city = settings.city.strip()
    areas = []
    for entry in settings.areas:
        city = entry.city.strip() or default_city
        if not city:
            continue
        areas.append(AreaConfig(city=city, area=entry.area.strip()))

    if not areas and default_city:
        areas.append(AreaConfig(city=default_city, area=settings.area.strip()))
    return areas


def make_areas(city: str, slugs: List[str]) -> List[AreaConfig]:
    city = city.strip()
    return [AreaConfig(city=city, area=slug.strip()) for slug in slugs if slug.strip()]


def first_non_empty(*values: Optional[str]) -> str:
    for value in values:
        if value and value.strip():
            return value
    return ""


def merge_options(
    settings: Settings,
    city: str = "",
    areas: Optional[List[str]] = None,
    name: str = "",
    menu: str = "",
    search: str = "",
    cache_dir: str = "",
    cache_ttl: str = "",
) -> Options:
    """
    Merge command-line values over config settings.

    Raises:
        ConfigError: if no listing target is available or flags are invalid
    """
    options = Options(
        name=name.strip(),
        menu=menu.strip(),
        search=search.strip(),
        cache_dir=expand_home(first_non_empty(cache_dir, settings.cache_dir, default_cache_dir())),
    )

    if areas:
        if not city.strip():
            raise ConfigError("city must be provided when using --area")
        options.areas = make_areas(city, areas)
    elif city.strip():
        options.areas = [AreaConfig(city=city.strip())]
    else:
        options.areas = configured_areas(settings)

    if not options.areas:
        raise ConfigError("city and area must be provided via flags or config")

    ttl = parse_cache_ttl(first_non_empty(cache_ttl, settings.cache_ttl))
    if ttl is not None:
        options.cache_ttl = ttl
    elif cache_ttl:
        raise ConfigError(f"invalid --cache-ttl {cache_ttl!r} (use e.g. 6h, 1h, 48h)")
    else:
        if settings.cache_ttl:
            logger.warning(f"Invalid cache_ttl {settings.cache_ttl!r} in config, using 6h")
        options.cache_ttl = DEFAULT_CACHE_TTL

    return options
