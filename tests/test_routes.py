from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(db_env):
    from saasdir.app import app

    with TestClient(app) as test_client:
        yield test_client


def _csrf(client: TestClient) -> str:
    if "csrf_token" not in client.cookies:
        client.get("/")
    return client.cookies["csrf_token"]


def _signup(client: TestClient, email="liker@example.com", password="password123"):
    resp = client.post(
        "/auth/signup",
        data={"email": email, "password": password, "next": "/", "csrf_token": _csrf(client)},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert "session" in resp.cookies
    return resp


def test_healthz_and_security_headers(client):
    resp = client.get("/healthz")
    assert resp.json() == {"ok": True}
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert "Content-Security-Policy" in resp.headers


def test_home_lists_active_products(client, make_product, category):
    make_product(name="Acme AI", slug="acme-ai", category_id=category.id, category_name="Coding")
    make_product(name="Hidden Tool", slug="hidden", status="inactive")
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Acme AI" in resp.text
    assert "Hidden Tool" not in resp.text
    assert "csrf_token" in resp.cookies


def test_product_and_category_pages(client, make_product, category):
    make_product(name="Acme AI", slug="acme-ai", category_id=category.id, category_name="Coding")
    assert "Acme AI" in client.get("/products/acme-ai").text
    assert "Acme AI" in client.get("/categories/coding").text
    assert client.get("/products/missing").status_code == 404
    assert client.get("/categories/missing").status_code == 404


def test_product_id_link_redirects_to_slug(client, make_product):
    product = make_product(name="Acme AI", slug="acme-ai")
    hidden = make_product(name="Hidden", slug="hidden", status="pending")

    resp = client.get(f"/products/id/{product.id}", follow_redirects=False)
    assert resp.status_code == 301
    assert resp.headers["location"] == "/products/acme-ai"
    assert client.get(f"/products/id/{hidden.id}", follow_redirects=False).status_code == 404
    assert client.get("/products/id/missing", follow_redirects=False).status_code == 404


def test_like_requires_login(client, make_product):
    product = make_product()
    token = _csrf(client)
    resp = client.post(f"/api/products/{product.id}/like", headers={"X-CSRF-Token": token})
    assert resp.status_code == 401
    assert resp.json() == {
        "success": False,
        "isLiked": False,
        "likeCount": 0,
        "error": "You must be logged in to like products",
    }


def test_like_requires_csrf(client, make_product):
    product = make_product()
    _csrf(client)
    resp = client.post(f"/api/products/{product.id}/like")
    assert resp.status_code == 403


def test_like_toggle_roundtrip(client, make_product):
    product = make_product()
    _signup(client)
    headers = {"X-CSRF-Token": _csrf(client)}

    liked = client.post(f"/api/products/{product.id}/like", headers=headers)
    assert liked.status_code == 200
    assert liked.json() == {"success": True, "isLiked": True, "likeCount": 1}
    assert client.get(f"/api/products/{product.id}/like").json() == {"isLiked": True, "likeCount": 1}
    assert client.get("/api/me/likes").json() == {"productIds": [product.id]}

    unliked = client.post(f"/api/products/{product.id}/like", headers=headers)
    assert unliked.json() == {"success": True, "isLiked": False, "likeCount": 0}
    assert client.get("/api/me/likes").json() == {"productIds": []}


def test_like_status_for_anonymous(client, make_product):
    product = make_product()
    assert client.get(f"/api/products/{product.id}/like").json() == {"isLiked": False, "likeCount": 0}
    assert client.get("/api/me/likes").json() == {"productIds": []}


def test_slug_check(client, make_product):
    make_product(slug="acme-ai")
    assert client.get("/slug/check", params={"value": "Fresh Name"}).json() == {"slug": "fresh-name", "available": True}
    assert client.get("/slug/check", params={"name": "Acme AI"}).json() == {"slug": "acme-ai1", "available": False}
    assert client.get("/slug/check", params={"value": "!!!"}).json() == {"slug": "", "available": False}


def test_submit_flow(client, repo, category):
    form = {
        "name": "Acme AI",
        "description": "Writes release notes from your commits.",
        "url": "acme.example.com",
        "category": "Coding",
        "pricing": "Free",
        "csrf_token": _csrf(client),
    }
    resp = client.post("/submit", data=form)
    assert resp.status_code == 200
    assert "Thanks" in resp.text
    [submission] = repo.list_submissions()
    assert submission.status == "pending"
    assert submission.url == "https://acme.example.com"
    assert submission.slug == "acme-ai"


def test_submit_validation_error_rerenders_form(client, repo):
    form = {
        "name": "Acme AI",
        "description": "short",
        "url": "https://acme.example.com",
        "category": "Coding",
        "pricing": "Free",
        "csrf_token": _csrf(client),
    }
    resp = client.post("/submit", data=form)
    assert resp.status_code == 400
    assert "Description must be at least 10 characters" in resp.text
    assert repo.list_submissions() == []


def test_login_logout_and_profile(client):
    assert client.get("/profile", follow_redirects=False).status_code == 303
    _signup(client, "me@example.com")
    assert "me@example.com" in client.get("/profile").text

    client.post("/auth/logout", data={"csrf_token": _csrf(client), "next": "/"})
    assert client.get("/profile", follow_redirects=False).status_code == 303

    bad = client.post(
        "/auth/login",
        data={"email": "me@example.com", "password": "wrong-pass", "csrf_token": _csrf(client)},
        follow_redirects=False,
    )
    assert "error=" in bad.headers["location"]
    good = client.post(
        "/auth/login",
        data={"email": "me@example.com", "password": "password123", "csrf_token": _csrf(client)},
        follow_redirects=False,
    )
    assert good.headers["location"] == "/"


def test_robots_and_sitemap(client, make_product):
    make_product(slug="acme-ai")
    robots = client.get("/robots.txt").text
    assert "Disallow: /admin/" in robots
    assert "Sitemap: https://cursorfor.xyz/sitemap.xml" in robots
    sitemap = client.get("/sitemap.xml")
    assert sitemap.headers["content-type"].startswith("application/xml")
    assert "<loc>https://cursorfor.xyz/products/acme-ai</loc>" in sitemap.text
