"""
Read-side helpers for the public catalog (categories, products, sitemap).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from saasdir.db.models import Category, Product
from saasdir.repositories.sql_repository import SQLRepository


@dataclass
class SitemapEntry:
    url: str
    last_modified: datetime
    change_frequency: str
    priority: float


class CatalogService:
    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def list_categories(self) -> list[Category]:
        return self.repository.list_categories()

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        return self.repository.get_category_by_slug((slug or "").strip())

    def get_products(
        self,
        category: str | None = None,
        pricing: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """Active products, featured first, then newest."""
        return self.repository.list_products(
            category_name=(category or "").strip() or None,
            pricing=(pricing or "").strip() or None,
            search=(search or "").strip() or None,
        )

    def get_products_for_category(self, category_id: str) -> list[Product]:
        return self.repository.list_products(category_id=category_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        product = self.repository.get_product_by_slug((slug or "").strip())
        if product and product.status != "active":
            return None
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.repository.get_product(product_id)

    def get_related_products(self, product: Product, limit: int = 4) -> list[Product]:
        if not product.category_id:
            return []
        return self.repository.list_related_products(product.category_id, product.id, limit=limit)

    def sitemap_entries(self, base_url: str) -> list[SitemapEntry]:
        base = base_url.rstrip("/")
        now = datetime.now(timezone.utc)
        entries = [
            SitemapEntry(base, now, "daily", 1.0),
            SitemapEntry(f"{base}/categories", now, "daily", 0.8),
            SitemapEntry(f"{base}/submit", now, "monthly", 0.6),
        ]
        for category in self.repository.list_categories():
            entries.append(
                SitemapEntry(f"{base}/categories/{category.slug}", category.updated_at or now, "weekly", 0.7)
            )
        for product in self.repository.list_products():
            if not product.slug:
                continue
            entries.append(
                SitemapEntry(f"{base}/products/{product.slug}", product.updated_at or now, "weekly", 0.6)
            )
        return entries
