from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from saasdir.core import csrf
from saasdir.db.models import PRICING_OPTIONS
from saasdir.services.catalog_service import CatalogService
from saasdir.services.like_service import LikeService
from saasdir.services.session_service import current_user

router = APIRouter(prefix="", tags=["pages"])
catalog = CatalogService()
likes = LikeService()


@router.get("/", response_class=HTMLResponse)
def home(request: Request, category: str = "", pricing: str = "", q: str = ""):
    user = current_user(request)
    products = catalog.get_products(category=category, pricing=pricing, search=q)
    liked = set(likes.get_user_liked_products(user.id if user else None))
    return csrf.render_protected(
        request,
        "home.html",
        {
            "user": user,
            "categories": catalog.list_categories(),
            "products": products,
            "liked": liked,
            "pricing_options": PRICING_OPTIONS,
            "filters": {"category": category, "pricing": pricing, "q": q},
        },
    )


@router.get("/categories", response_class=HTMLResponse)
def categories(request: Request):
    return csrf.render_protected(
        request,
        "categories.html",
        {"user": current_user(request), "categories": catalog.list_categories()},
    )


@router.get("/categories/{slug}", response_class=HTMLResponse)
def category_detail(slug: str, request: Request):
    category = catalog.get_category_by_slug(slug)
    if not category:
        raise HTTPException(404, "Category not found")
    user = current_user(request)
    return csrf.render_protected(
        request,
        "category.html",
        {
            "user": user,
            "category": category,
            "products": catalog.get_products_for_category(category.id),
            "liked": set(likes.get_user_liked_products(user.id if user else None)),
        },
    )


@router.get("/products/id/{product_id}")
def product_by_id(product_id: str):
    """Old id based product links; permanently redirect to the slug URL."""
    product = catalog.get_product(product_id)
    if not product or product.status != "active" or not product.slug:
        raise HTTPException(404, "Product not found")
    return RedirectResponse(f"/products/{product.slug}", status_code=301)


@router.get("/products/{slug}", response_class=HTMLResponse)
def product_detail(slug: str, request: Request):
    product = catalog.get_product_by_slug(slug)
    if not product:
        raise HTTPException(404, "Product not found")
    user = current_user(request)
    status = likes.get_like_status(product.id, user.id if user else None)
    return csrf.render_protected(
        request,
        "product.html",
        {
            "user": user,
            "product": product,
            "related": catalog.get_related_products(product),
            "like_status": status,
        },
    )


@router.get("/healthz")
def healthz():
    return {"ok": True}
