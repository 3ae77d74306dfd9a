"""
Terminal output for lunch listings.
"""
import os
from typing import Callable, List, Optional, Sequence

from models import Query, Restaurant, SourceInfo

DEFAULT_WIDTH = 80
MIN_WIDTH = 40


def terminal_width() -> int:
    value = os.environ.get("COLUMNS", "").strip()
    if value.isdigit() and int(value) >= MIN_WIDTH:
        return int(value)
    return DEFAULT_WIDTH


def wrap_line(line: str, width: int) -> List[str]:
    """Wrap a line at word boundaries, keeping its leading indent on every row."""
    if width <= 0 or len(line) <= width:
        return [line]

    words = line.split()
    if not words:
        return [line]

    indent = " " * (len(line) - len(line.lstrip(" ")))
    lines = []
    current = indent
    for word in words:
        if current == indent:
            current += word
        elif len(current) + 1 + len(word) > width:
            lines.append(current)
            current = indent + word
        else:
            current += " " + word
    if current.strip():
        lines.append(current)
    return lines


def format_source(info: SourceInfo) -> str:
    source = info.source or "live"
    if info.cache_updated is None:
        return source
    return f"{source} (cache updated {info.cache_updated:%Y-%m-%d %H:%M})"


def format_header(info: SourceInfo, query: Query) -> List[str]:
    return [
        f"Lunch menus — {info.label}",
        f"Query: {query.describe()}",
        f"Source: {format_source(info)}",
        "",
    ]


def format_restaurant(restaurant: Restaurant) -> List[str]:
    lines = [f"{restaurant.name} — {restaurant.price}"]
    if restaurant.address:
        lines.append(f"  {restaurant.address}")
    if restaurant.phone:
        lines.append(f"  Tel: {restaurant.phone}")
    if restaurant.link:
        lines.append(f"  Link: {restaurant.link}")
    if restaurant.menu_lines:
        lines.append("  Menu:")
        lines.extend(f"    - {line}" for line in restaurant.menu_lines)
    lines.append("")
    return lines


def no_results_message(query: Query) -> str:
    if query.is_empty:
        return "No lunch menus found."
    return f"No matches for {query.describe()}."


def render_listing(
    info: SourceInfo,
    query: Query,
    restaurants: Sequence[Restaurant],
    width: Optional[int] = None,
) -> List[str]:
    """Render a full listing (header plus restaurants) as wrapped lines."""
    width = width or terminal_width()
    lines = format_header(info, query)
    if not restaurants:
        lines.append(no_results_message(query))
    for restaurant in restaurants:
        lines.extend(format_restaurant(restaurant))

    wrapped = []
    for line in lines:
        wrapped.extend(wrap_line(line, width))
    return wrapped


def print_listing(
    info: SourceInfo,
    query: Query,
    restaurants: Sequence[Restaurant],
    write: Callable[[str], None] = print,
) -> None:
    for line in render_listing(info, query, restaurants):
        write(line)
