from __future__ import annotations

import html

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from saasdir.core.config import get_settings
from saasdir.services.catalog_service import CatalogService

router = APIRouter(prefix="", tags=["seo"])
catalog = CatalogService()

DISALLOWED = ("/admin/", "/api/", "/private/")


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    base = get_settings().public_base_url
    lines = ["User-agent: *", "Allow: /"]
    lines += [f"Disallow: {path}" for path in DISALLOWED]
    lines += ["", f"Sitemap: {base}/sitemap.xml", ""]
    return PlainTextResponse("\n".join(lines))


@router.get("/sitemap.xml")
def sitemap():
    entries = catalog.sitemap_entries(get_settings().public_base_url)
    rows = []
    for entry in entries:
        rows.append(
            "  <url>"
            f"<loc>{html.escape(entry.url)}</loc>"
            f"<lastmod>{entry.last_modified.date().isoformat()}</lastmod>"
            f"<changefreq>{entry.change_frequency}</changefreq>"
            f"<priority>{entry.priority:.1f}</priority>"
            "</url>"
        )
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(rows)
        + "\n</urlset>\n"
    )
    return Response(body, media_type="application/xml")
