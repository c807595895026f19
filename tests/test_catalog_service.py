from __future__ import annotations

from saasdir.services.catalog_service import CatalogService


def test_product_by_slug_hides_inactive(repo, make_product):
    make_product(slug="live")
    make_product(name="Gone", slug="gone", status="inactive")
    svc = CatalogService(repo)
    assert svc.get_product_by_slug("live") is not None
    assert svc.get_product_by_slug("gone") is None
    assert svc.get_product_by_slug("missing") is None


def test_related_products_need_a_category(repo, make_product, category):
    lonely = make_product(name="Lonely", slug="lonely")
    first = make_product(name="First", slug="first", category_id=category.id)
    make_product(name="Second", slug="second", category_id=category.id)
    svc = CatalogService(repo)
    assert svc.get_related_products(lonely) == []
    assert [p.slug for p in svc.get_related_products(first)] == ["second"]


def test_sitemap_lists_static_pages_categories_and_products(repo, make_product, category):
    make_product(slug="acme-ai")
    entries = CatalogService(repo).sitemap_entries("https://dir.example.com/")
    urls = [e.url for e in entries]
    assert urls[:3] == [
        "https://dir.example.com",
        "https://dir.example.com/categories",
        "https://dir.example.com/submit",
    ]
    assert "https://dir.example.com/categories/coding" in urls
    assert "https://dir.example.com/products/acme-ai" in urls
    assert entries[0].priority == 1.0
