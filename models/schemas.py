"""
Data models for the lunch menu finder.
"""
from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Restaurant(BaseModel):
    """Restaurant listing extracted from a lunch menu page."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    price: str = ""
    address: str = ""
    phone: str = ""
    link: str = ""
    menu_lines: Tuple[str, ...] = ()

    @property
    def menu_text(self) -> str:
        """Menu lines joined into a single searchable string."""
        return " ".join(self.menu_lines)


class Query(BaseModel):
    """User search request: name filter, menu filter and combined search."""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    menu: str = ""
    search: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.menu or self.search)

    @property
    def effective_name(self) -> str:
        """Name query, defaulting to the combined search."""
        return self.name or self.search

    @property
    def effective_menu(self) -> str:
        """Menu query, defaulting to the combined search."""
        return self.menu or self.search

    def describe(self) -> str:
        """Human readable description used in listing headers."""
        if self.search:
            return f'search: "{self.search}" (name+menu)'
        if self.name and self.menu:
            return f'name: "{self.name}", menu: "{self.menu}"'
        if self.name:
            return f'name: "{self.name}"'
        if self.menu:
            return f'menu: "{self.menu}"'
        return "no filters"


class AreaConfig(BaseModel):
    """One listing target: a whole city or a specific area in it."""
    city: str = ""
    area: str = ""


class SourceInfo(BaseModel):
    """Where a listing document came from."""
    label: str
    source: str = "live"  # "live" or "cache"
    cache_updated: Optional[datetime] = None
