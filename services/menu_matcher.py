"""
Fuzzy matching of restaurant names and menu text.

Matching tries three strategies in order:
1. Case-insensitive substring
2. Substring on normalized tokens (punctuation and spaces removed)
3. Approximate match: query letters appear in order in the field and
   only a few field letters are left over
"""
import logging
from typing import Optional

from rapidfuzz.distance import LCSseq

from utils.text_utils import fold_diacritics, normalize_token, sanitize_text

logger = logging.getLogger(__name__)


def fuzz_threshold(length: int) -> int:
    """Maximum accepted approximate distance for a query of given length."""
    if length <= 3:
        return 1
    if length <= 6:
        return 2
    return 3


def rank_match_fold(query: str, text: str) -> int:
    """
    Rank how well query matches text, ignoring case and diacritics.

    Returns the number of text characters not consumed by the query when
    every query character appears in order in text, otherwise -1.
    """
    if len(text) < len(query):
        return -1

    query = fold_diacritics(query)
    text = fold_diacritics(text)
    if query == text:
        return 0

    # Query is a subsequence of text iff their longest common subsequence is the whole query
    if LCSseq.similarity(query, text) != len(query):
        return -1
    return len(text) - len(query)


def safe_rank_match_fold(query: str, text: str) -> Optional[int]:
    """Rank a single comparison; a failure means no match for this pair only."""
    query = sanitize_text(query)
    text = sanitize_text(text)
    try:
        return rank_match_fold(query, text)
    except (ValueError, TypeError, UnicodeError) as e:
        logger.debug(f"Approximate match failed for {query!r}: {e}")
        return None


def _within_distance(norm_query: str, norm_field: str, max_distance: int) -> bool:
    dist = safe_rank_match_fold(norm_query, norm_field)
    if dist is None:
        return False
    return 0 <= dist <= max_distance


def matches_name(name: str, query: str, max_distance: int) -> bool:
    """
    Check whether a restaurant name matches the query.

    Args:
        name: Restaurant name as displayed
        query: User query
        max_distance: Accepted approximate distance (see fuzz_threshold)
    """
    query_lower = query.lower()
    name_lower = name.lower()
    if query_lower in name_lower:
        return True

    norm_name = normalize_token(name_lower)
    norm_query = normalize_token(query_lower)
    if norm_query and norm_query in norm_name:
        return True

    return _within_distance(norm_query, norm_name, max_distance)


def matches_text(text: str, query: str, max_distance: int) -> bool:
    """Check whether free text (a menu) matches the query."""
    query_lower = query.lower()
    text_lower = text.lower()
    if query_lower in text_lower:
        return True

    norm_text = normalize_token(text_lower)
    norm_query = normalize_token(query_lower)
    if not norm_query:
        return False
    if norm_query in norm_text:
        return True

    return _within_distance(norm_query, norm_text, max_distance)


def matches(field: str, query: str) -> bool:
    """Match a field against a query, scaling tolerance by normalized query length."""
    max_distance = fuzz_threshold(len(normalize_token(query)))
    return matches_text(field, query, max_distance)
