"""Slug helpers: turn free text into URL identifiers and resolve collisions."""
from __future__ import annotations

import re
from typing import Collection, Iterable

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_SEPARATORS = re.compile(r"[\s-]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def generate_slug(text: str | None) -> str:
    """Lowercase, keep [a-z0-9], whitespace and hyphens, and join words with single hyphens.

    >>> generate_slug("Hello, World!")
    'hello-world'
    """
    value = (text or "").lower().strip()
    value = _DISALLOWED.sub("", value)
    value = _SEPARATORS.sub("-", value)
    return _EDGE_HYPHENS.sub("", value)


def generate_unique_slug(base_slug: str, existing_slugs: Iterable[str]) -> str:
    """Return base_slug, or base_slug followed by the first counter (1, 2, ...) not already taken.

    No separator goes between the base and the counter: "foo" -> "foo1".
    """
    taken = existing_slugs if isinstance(existing_slugs, (set, frozenset)) else set(existing_slugs)
    candidate = base_slug
    counter = 1
    while candidate in taken:
        candidate = f"{base_slug}{counter}"
        counter += 1
    return candidate


def create_product_slug(name: str | None, existing_slugs: Collection[str] = ()) -> str:
    return generate_unique_slug(generate_slug(name), existing_slugs)
