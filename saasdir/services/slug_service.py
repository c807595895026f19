"""Slug use cases: build unique product slugs across products and submissions."""

from __future__ import annotations

from saasdir.domain.slugs import generate_slug, generate_unique_slug
from saasdir.repositories.sql_repository import SQLRepository


class SlugService:
    """Resolves slugs against both the products and the submissions tables.

    Store errors propagate to the caller untouched.
    """

    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def existing_slugs(self) -> list[str]:
        return self.repository.list_product_slugs() + self.repository.list_submission_slugs()

    def slug_exists(self, slug: str | None) -> bool:
        candidate = (slug or "").strip()
        if not candidate:
            return False
        return self.repository.product_slug_exists(candidate) or self.repository.submission_slug_exists(candidate)

    def generate_product_slug(self, name: str | None) -> str:
        base = generate_slug(name)
        return generate_unique_slug(base, self.existing_slugs())

    def validate_custom_slug(self, custom_slug: str | None) -> str:
        clean = generate_slug(custom_slug)
        return generate_unique_slug(clean, self.existing_slugs())
