"""
Shared validators for input sanitization.
"""

from collections.abc import Iterable
from urllib.parse import urlparse

from food_shared.config.constants import Limits

# Hosts that must never appear in image URLs (SSRF prevention)
BLOCKED_HOSTS = [
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "10.",
    "192.168.",
    "169.254.",
    "[::1]",
    "metadata.google",
]

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp", "mailto", "tel"}


def validate_image_url(url: str) -> str:
    """
    Validate an image URL.

    Raises:
        ValueError: If the URL is malformed, uses a non-HTTP scheme or
            points at an internal host.
    """
    url = url.strip()
    if not url:
        raise ValueError("URL de imagen vacía")

    if len(url) > Limits.MAX_URL_LENGTH:
        raise ValueError(f"URL demasiado larga (máximo {Limits.MAX_URL_LENGTH} caracteres)")

    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES:
        raise ValueError(f"Esquema de URL no permitido: {scheme}")
    if scheme not in ("http", "https"):
        raise ValueError("Solo se permiten URLs HTTP/HTTPS")

    host = parsed.netloc.lower()
    if not host:
        raise ValueError("URL sin host válido")

    for blocked in BLOCKED_HOSTS:
        if host.startswith(blocked):
            raise ValueError("URL interna no permitida")

    return url


def normalize_customizations(customizations: Iterable[str] | None) -> list[str]:
    """
    Canonical form of a cart line's customizations.

    Strips whitespace, drops blanks and duplicates, and sorts, so two
    requests naming the same set in any order produce the same merge key.
    """
    if not customizations:
        return []
    return sorted({value.strip() for value in customizations if value and value.strip()})


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards; escape them so user input is
    matched literally.
    """
    if not value:
        return value

    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: str, max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """Trim, collapse whitespace and cap the length of a search term."""
    return " ".join(term.split())[:max_length]
