"""Small text helpers shared by services and handlers."""
import re

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def slugify(text: str) -> str:
    """
    Turn arbitrary text into a URL slug.

    >>> slugify("My Company, Inc.")
    'my-company-inc'
    """
    slug = text.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _SEPARATORS.sub("-", slug)
    return _EDGE_HYPHENS.sub("", slug)


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters, ending in '...' when shortened."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
