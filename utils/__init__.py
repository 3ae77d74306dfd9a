from .http_client import HttpClient, FetchError
from .text_utils import (
    normalize_spaces,
    normalize_token,
    fold_diacritics,
    sanitize_text,
)

__all__ = [
    "HttpClient",
    "FetchError",
    "normalize_spaces",
    "normalize_token",
    "fold_diacritics",
    "sanitize_text",
]
