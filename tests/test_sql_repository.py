from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from saasdir.db.create_tables import DEFAULT_CATEGORIES, seed_categories


def test_product_slug_is_unique(repo, make_product):
    make_product(slug="same")
    with pytest.raises(IntegrityError):
        make_product(name="Other", slug="same")


def test_submission_slug_is_unique(repo):
    data = {
        "name": "Acme",
        "description": "Ten characters at least.",
        "url": "https://acme.example.com",
        "pricing": "Free",
        "slug": "acme",
    }
    repo.create_submission(data)
    with pytest.raises(IntegrityError):
        repo.create_submission(data)


def test_like_pair_is_unique_and_count_tracks_rows(repo, make_product, make_user):
    product = make_product()
    user = make_user()
    repo.add_like(user.id, product.id)
    with pytest.raises(IntegrityError):
        repo.add_like(user.id, product.id)
    # the failed insert rolled back its counter bump
    assert repo.get_product_like_count(product.id) == 1

    assert repo.remove_like(user.id, product.id) == 1
    assert repo.remove_like(user.id, product.id) == 0
    assert repo.get_product_like_count(product.id) == 0


def test_like_count_missing_product(repo):
    assert repo.get_product_like_count("missing") is None


def test_list_products_filters_and_order(repo, make_product, category):
    make_product(name="Plain", slug="plain", category_id=category.id, category_name="Coding")
    make_product(name="Star", slug="star", featured=True, pricing="Paid")
    make_product(name="Hidden", slug="hidden", status="inactive")

    names = [p.name for p in repo.list_products()]
    assert names[0] == "Star"
    assert "Hidden" not in names
    assert [p.name for p in repo.list_products(pricing="Paid")] == ["Star"]
    assert [p.name for p in repo.list_products(category_name="Coding")] == ["Plain"]
    assert [p.name for p in repo.list_products(search="PLA")] == ["Plain"]


def test_related_products_exclude_self(repo, make_product, category):
    a = make_product(name="A", slug="a", category_id=category.id)
    make_product(name="B", slug="b", category_id=category.id)
    related = repo.list_related_products(category.id, a.id)
    assert [p.name for p in related] == ["B"]


def test_deleting_product_cascades_likes(repo, make_product, make_user):
    from sqlalchemy import delete

    from saasdir.db.models import Like, Product
    from saasdir.db.session import get_session

    product = make_product()
    user = make_user()
    repo.add_like(user.id, product.id)
    with get_session() as session:
        session.execute(delete(Product).where(Product.id == product.id))
        session.commit()
    assert repo.list_liked_product_ids(user.id) == []
    with get_session() as session:
        assert session.query(Like).count() == 0


def test_seed_categories_is_idempotent(repo):
    assert seed_categories() == len(DEFAULT_CATEGORIES)
    assert seed_categories() == 0
    categories = repo.list_categories()
    assert categories[0].name == DEFAULT_CATEGORIES[0]
    assert repo.get_category_by_slug("design-uiux").name == "Design & UI/UX"
