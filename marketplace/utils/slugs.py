"""
Slug helpers shared by categories, mini-subcategories and blog posts.
"""

import re
from typing import Awaitable, Callable

_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-{2,}")


def normalize_slug(value: str) -> str:
    """Trim, lower-case, turn whitespace into dashes and drop anything outside [a-z0-9-]."""
    slug = _WHITESPACE.sub("-", (value or "").strip().lower())
    return _INVALID_CHARS.sub("", slug)


def slugify(value: str) -> str:
    """Slug for free text such as blog titles: like normalize_slug but squeezes dash runs."""
    slug = (value or "").strip().lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = _WHITESPACE.sub("-", slug)
    return _DASHES.sub("-", slug).strip("-")


async def unique_slug(base: str, exists: Callable[[str], Awaitable[bool]]) -> str:
    """
    Return base, or base-2, base-3, ... whichever is free first.

    Args:
        base: Preferred slug
        exists: Coroutine telling whether a candidate is already taken
    """
    candidate = base
    counter = 2
    while await exists(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
