"""
Lunch listing HTML parsing.

A kvartersmenyn listing page holds one ``div.row.t_lunch`` card per
restaurant. Each card is turned into a Restaurant record.
"""
import logging
import re
from typing import BinaryIO, List, Optional, TextIO, Tuple, Union

from bs4 import BeautifulSoup, NavigableString, Tag, UnicodeDammit
from bs4.element import PreformattedString
from bs4.exceptions import ParserRejectedMarkup

from models import Restaurant
from utils.text_utils import normalize_spaces

logger = logging.getLogger(__name__)

# Card selectors
BLOCK_SELECTOR = "div.row.t_lunch"
NAME_SELECTOR = "div.name h5.t_lunch a"
PRICE_SELECTOR = ".price-rl .price"
MENU_SELECTOR = "div.rest-menu p.t_lunch"
ADDRESS_SELECTOR = ".divider p"

ADDRESS_LABELS = ("ADRESS:", "ADDRESS:")
PHONE_MARKER_RE = re.compile(r"TEL:", re.IGNORECASE)

# Control characters never found in HTML text; stripped from markup
_BINARY_RE = re.compile(r"[\x00-\x08\x0e-\x1f]")
_TAG_RE = re.compile(r"<\s*[!/?a-zA-Z]")

Document = Union[bytes, str, BinaryIO, TextIO]


class MenuParseError(Exception):
    """Raised when a document cannot be interpreted as HTML at all."""


class MenuParser:
    """Service for turning listing pages into Restaurant records."""

    def __init__(self, parser: str = "lxml"):
        self.parser = parser

    def parse_restaurants(self, document: Document) -> List[Restaurant]:
        """
        Parse a listing page into restaurants, preserving page order.

        Args:
            document: Raw HTML as bytes/str or a readable stream

        Returns:
            List of restaurants (empty for a page without listings)

        Raises:
            MenuParseError: if the document is not markup
        """
        soup = self._load(document)
        if soup is None:
            return []

        restaurants = []
        for block in soup.select(BLOCK_SELECTOR):
            restaurant = self._parse_block(block)
            if restaurant is not None:
                restaurants.append(restaurant)

        logger.debug(f"Parsed {len(restaurants)} restaurants")
        return restaurants

    def _load(self, document: Document) -> Optional[BeautifulSoup]:
        """Read and decode the document, then build the parse tree."""
        if hasattr(document, "read"):
            try:
                document = document.read()
            except OSError as e:
                raise MenuParseError(f"could not read document: {e}") from e

        if isinstance(document, bytes):
            markup = UnicodeDammit(document, ["utf-8", "windows-1252"]).unicode_markup
            if markup is None:
                raise MenuParseError("could not decode document")
        elif isinstance(document, str):
            markup = document
        else:
            raise MenuParseError(f"unsupported document type: {type(document).__name__}")

        if not markup.strip():
            return None

        if not _TAG_RE.search(markup):
            if _BINARY_RE.search(markup):
                raise MenuParseError("document contains binary data")
            raise MenuParseError("document contains no markup")
        markup = _BINARY_RE.sub("", markup)

        try:
            return BeautifulSoup(markup, self.parser)
        except ParserRejectedMarkup as e:
            raise MenuParseError(f"could not parse document: {e}") from e

    def _parse_block(self, block: Tag) -> Optional[Restaurant]:
        """Build a restaurant from one card, or None when it has no name."""
        name_el = block.select_one(NAME_SELECTOR)
        name = name_el.get_text().strip() if name_el is not None else ""
        if not name:
            logger.debug("Skipping listing block without a name")
            return None

        price = normalize_spaces(self._first_text(block, PRICE_SELECTOR))
        menu_lines = extract_menu_lines(block.select_one(MENU_SELECTOR))
        address, phone = split_address_and_phone(
            normalize_spaces(self._first_text(block, ADDRESS_SELECTOR))
        )
        link = name_el.get("href") or ""

        return Restaurant(
            name=name,
            price=price,
            address=address,
            phone=phone,
            link=link,
            menu_lines=tuple(menu_lines),
        )

    @staticmethod
    def _first_text(block: Tag, selector: str) -> str:
        element = block.select_one(selector)
        return element.get_text() if element is not None else ""


def extract_menu_lines(element: Optional[Tag]) -> List[str]:
    """
    Split a menu paragraph into lines.

    ``<br>`` marks a line break; other nested elements are inlined.
    """
    if element is None:
        return []

    text = text_with_breaks(element)
    if not text:
        return []

    lines = []
    for line in text.split("\n"):
        line = normalize_spaces(line)
        if line:
            lines.append(line)
    return lines


def text_with_breaks(element: Tag) -> str:
    """Extract element text keeping <br> as newlines."""
    parts: List[str] = []
    _write_node(parts, element)
    return "".join(parts).strip()


def _write_node(parts: List[str], node) -> None:
    for child in node.children:
        if isinstance(child, NavigableString):
            # Comments, CDATA and doctypes are not page text
            if not isinstance(child, PreformattedString):
                parts.append(str(child))
        elif isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
            else:
                _write_node(parts, child)


def split_address_and_phone(line: str) -> Tuple[str, str]:
    """
    Split "ADRESS: Storgatan 1 TEL: 031-123456" into address and phone.

    Without a TEL: marker the whole line is the address.
    """
    for label in ADDRESS_LABELS:
        if line.startswith(label):
            line = line[len(label):]
            break
    line = line.strip()

    phone = ""
    match = PHONE_MARKER_RE.search(line)
    if match:
        phone = normalize_spaces(line[match.end():])
        line = line[:match.start()].strip()

    return line, phone


# Global service instance
menu_parser = MenuParser()


def parse_restaurants(document: Document) -> List[Restaurant]:
    """Parse a listing page with the default parser."""
    return menu_parser.parse_restaurants(document)
