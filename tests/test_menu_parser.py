"""Tests for listing page parsing."""

import io

import pytest
from bs4 import BeautifulSoup

from conftest import make_card, make_page
from models import Restaurant
from services.menu_parser import (
    MenuParseError,
    MenuParser,
    extract_menu_lines,
    parse_restaurants,
    split_address_and_phone,
)


class TestParseRestaurants:
    """Tests for turning listing pages into restaurants."""

    def test_extracts_full_card(self):
        """Test all fields of a complete card."""
        restaurants = parse_restaurants(make_page(make_card()))

        assert restaurants == [
            Restaurant(
                name="Café Linné",
                price="95 kr",
                address="Storgatan 1",
                phone="031-123456",
                link="https://www.kvartersmenyn.se/rest/123",
                menu_lines=("Fish soup", "Salad bar"),
            )
        ]

    def test_skips_cards_without_name_and_keeps_order(self, listing_page):
        """Test that nameless cards are dropped and page order is kept."""
        restaurants = parse_restaurants(listing_page)

        assert [r.name for r in restaurants] == ["Café Linné", "Pizzeria Napoli"]

    def test_missing_href_gives_empty_link(self, listing_page):
        """Test that a name link without href yields an empty link."""
        napoli = parse_restaurants(listing_page)[1]

        assert napoli.link == ""

    def test_price_nbsp_and_address_without_phone(self, listing_page):
        """Test price whitespace cleanup and address without TEL marker."""
        napoli = parse_restaurants(listing_page)[1]

        assert napoli.price == "110 kr"
        assert napoli.address == "Kungsgatan 5"
        assert napoli.phone == ""

    def test_menu_lines_inline_elements_and_blank_lines(self, listing_page):
        """Test that nested tags are inlined and blank lines dropped."""
        napoli = parse_restaurants(listing_page)[1]

        assert napoli.menu_lines == ("Pizza Margherita", "Ullevi-burgare med pommes")

    def test_card_without_optional_sections(self):
        """Test a card that only has a name."""
        html = make_page(
            '<div class="row t_lunch"><div class="name"><h5 class="t_lunch">'
            '<a href="/r/1">Solo</a></h5></div></div>'
        )

        restaurants = parse_restaurants(html)

        assert restaurants == [Restaurant(name="Solo", link="/r/1")]

    def test_accepts_bytes_and_streams(self):
        """Test bytes and file-like input."""
        html = make_page(make_card()).encode("utf-8")

        from_bytes = parse_restaurants(html)
        from_stream = parse_restaurants(io.BytesIO(html))

        assert from_bytes == from_stream
        assert from_bytes[0].name == "Café Linné"

    def test_latin1_bytes_are_decoded(self):
        """Test pages served in a legacy encoding."""
        html = make_page(make_card(name="Kött & Fisk")).encode("windows-1252")

        restaurants = parse_restaurants(html)

        assert restaurants[0].name == "Kött & Fisk"

    def test_empty_documents(self):
        """Test that empty but well-formed pages yield no restaurants."""
        assert parse_restaurants("") == []
        assert parse_restaurants(b"   \n") == []
        assert parse_restaurants("<html><body></body></html>") == []

    def test_page_without_cards(self):
        """Test an unrelated HTML page."""
        assert parse_restaurants("<html><body><p>Stängt idag</p></body></html>") == []

    def test_binary_garbage_raises(self):
        """Test that binary data is rejected."""
        with pytest.raises(MenuParseError):
            parse_restaurants(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x01")

    def test_stray_control_byte_keeps_other_cards(self):
        """Test that a control character inside one card does not fail the page."""
        page = make_page(
            make_card(),
            make_card(name="Pizzeria Napoli", menu_html="Pizza\x1b Margherita\x00"),
        )

        restaurants = parse_restaurants(page.encode("utf-8"))

        assert [r.name for r in restaurants] == ["Café Linné", "Pizzeria Napoli"]
        assert restaurants[1].menu_lines == ("Pizza Margherita",)

    def test_plain_text_raises(self):
        """Test that text without any markup is rejected."""
        with pytest.raises(MenuParseError):
            parse_restaurants("just some words, no tags")

    def test_unreadable_stream_raises(self):
        """Test that read errors surface as parse failures."""

        class BrokenStream:
            def read(self):
                raise OSError("disk gone")

        with pytest.raises(MenuParseError):
            parse_restaurants(BrokenStream())

    def test_html_parser_backend(self):
        """Test the parser works with the stdlib HTML backend too."""
        restaurants = MenuParser(parser="html.parser").parse_restaurants(make_page(make_card()))

        assert restaurants[0].menu_lines == ("Fish soup", "Salad bar")


class TestExtractMenuLines:
    """Tests for menu text extraction."""

    def _paragraph(self, inner: str):
        return BeautifulSoup(f"<p>{inner}</p>", "lxml").p

    def test_missing_element(self):
        assert extract_menu_lines(None) == []

    def test_comments_are_ignored(self):
        """Test that HTML comments are not part of the menu."""
        p = self._paragraph("Dagens<!-- dold --> fisk<br>Soppa")

        assert extract_menu_lines(p) == ["Dagens fisk", "Soppa"]

    def test_whitespace_collapsed_per_line(self):
        p = self._paragraph("  Pasta   carbonara <br>\t<br> Sallad&nbsp;&nbsp;bar ")

        assert extract_menu_lines(p) == ["Pasta carbonara", "Sallad bar"]

    def test_empty_paragraph(self):
        assert extract_menu_lines(self._paragraph("<br><br>")) == []


class TestSplitAddressAndPhone:
    """Tests for the composite address field."""

    def test_label_and_phone(self):
        assert split_address_and_phone("ADRESS: Storgatan 1 TEL: 031-123456") == (
            "Storgatan 1",
            "031-123456",
        )

    def test_phone_marker_case_insensitive(self):
        assert split_address_and_phone("Storgatan 1 tel:  031 12 34 56") == (
            "Storgatan 1",
            "031 12 34 56",
        )

    def test_label_is_case_sensitive(self):
        """Test that only the upper-case label is stripped."""
        assert split_address_and_phone("adress: Storgatan 1") == ("adress: Storgatan 1", "")

    def test_no_marker(self):
        assert split_address_and_phone("ADRESS: Storgatan 1") == ("Storgatan 1", "")

    def test_empty(self):
        assert split_address_and_phone("") == ("", "")
