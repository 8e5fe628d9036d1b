"""Input validation helpers — slugs, social links, text summaries."""

from __future__ import annotations

import re
import secrets
from typing import Any
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")
MAX_SLUG_LENGTH = 100
SUMMARY_LENGTH = 200


def validate_slug(slug: str) -> bool:
    """Validate slug format: lowercase alphanumeric with hyphens, 2-100 chars."""
    return bool(SLUG_PATTERN.match(slug)) and 2 <= len(slug) <= MAX_SLUG_LENGTH


def slugify(text: str, max_length: int = 60) -> str:
    """Lowercase, hyphen-separated form of ``text``. May be empty."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())[:max_length]
    return slug.strip("-")


def make_profile_slug(name: str) -> str:
    """Public slug for a new profile: slugified name plus a random suffix."""
    base = slugify(name) or "profile"
    return f"{base}-{secrets.token_hex(3)}"


def is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalise_social_links(value: Any) -> list[str]:
    """Parse a stored or submitted social link collection.

    Accepts None or a list of strings. Returns the trimmed URLs in order with
    duplicates removed. Raises ValueError for anything that is not an absolute
    http(s) URL.
    """
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("social_links must be a list of URLs")

    links: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Invalid social link: {item!r}")
        link = item.strip()
        if not is_http_url(link):
            raise ValueError(f"Invalid social link: {item!r}")
        if link not in links:
            links.append(link)
    return links


def summarise(text: str, length: int = SUMMARY_LENGTH) -> str:
    """Truncated copy of ``text`` for log rows."""
    return text[:length]
