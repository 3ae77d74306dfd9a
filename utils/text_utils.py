"""
Text processing utilities for listing extraction and menu matching.
"""
import re
import unicodedata


_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_text(text: str) -> str:
    """Drop code points that cannot be encoded (lone surrogates from bad input)."""
    if not text:
        return ""
    return text.encode("utf-8", errors="ignore").decode("utf-8")


def normalize_spaces(text: str) -> str:
    """
    Collapse whitespace for display text.

    - Convert non-breaking spaces to regular spaces
    - Replace runs of whitespace with a single space
    - Remove leading/trailing whitespace
    """
    if not text:
        return ""

    text = text.replace("\u00a0", " ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_token(text: str) -> str:
    """
    Normalize text into a search token.

    Lowercases the text and keeps only letters and digits. Letters with
    diacritics are kept as they are, so "Linné" becomes "linné".
    """
    text = sanitize_text(text)
    if not text:
        return ""

    return "".join(ch for ch in text.lower() if ch.isalpha() or ch.isdecimal())


def fold_diacritics(text: str) -> str:
    """Lowercase and strip combining marks ("Köttbullar" -> "kottbullar")."""
    text = sanitize_text(text)
    if not text:
        return ""

    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return unicodedata.normalize("NFC", stripped).lower()
