"""
Restaurant filtering by name, menu and combined search queries.

A combined search matches a restaurant when either its name or its menu
matches. Separate --name and --menu filters must both match.
"""
import logging
from typing import List, Sequence

from models import Query, Restaurant
from services.menu_matcher import fuzz_threshold, matches_name, matches_text
from utils.text_utils import normalize_token

logger = logging.getLogger(__name__)


class QueryFilter:
    """Decides which restaurants satisfy a Query."""

    def __init__(self, query: Query):
        self.query = query
        self.name_query = query.effective_name if query.search else query.name
        self.menu_query = query.effective_menu if query.search else query.menu

        self.max_menu = fuzz_threshold(len(normalize_token(self.menu_query)))
        if query.search:
            self.max_name = fuzz_threshold(len(normalize_token(self.name_query)))
        else:
            # Standalone name filter scales by the raw query length
            self.max_name = fuzz_threshold(len(self.name_query))

    def include(self, restaurant: Restaurant) -> bool:
        """Check whether a single restaurant passes the filter."""
        matched_name = bool(self.name_query) and matches_name(
            restaurant.name, self.name_query, self.max_name
        )
        matched_menu = bool(self.menu_query) and matches_text(
            restaurant.menu_text, self.menu_query, self.max_menu
        )

        if self.query.search:
            return matched_name or matched_menu

        if self.name_query and not matched_name:
            return False
        if self.menu_query and not matched_menu:
            return False
        return True

    def apply(self, restaurants: Sequence[Restaurant]) -> List[Restaurant]:
        """Return matching restaurants in their original order."""
        filtered = [r for r in restaurants if self.include(r)]
        logger.debug(f"{len(filtered)}/{len(restaurants)} restaurants match {self.query.describe()}")
        return filtered


def include(restaurant: Restaurant, query: Query) -> bool:
    """Check whether a restaurant matches the query."""
    return QueryFilter(query).include(restaurant)


def filter_restaurants(restaurants: Sequence[Restaurant], query: Query) -> List[Restaurant]:
    """
    Filter restaurants by query.

    Returns the input unchanged (as a list) when no query is set.
    """
    if query.is_empty:
        return list(restaurants)
    return QueryFilter(query).apply(restaurants)
