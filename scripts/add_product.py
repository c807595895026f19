#!/usr/bin/env python3
"""
Publish a product directly in the database, skipping the moderation queue.

Usage:
  python scripts/add_product.py --name "Acme AI" --url https://acme.ai \
      --description "Writes your release notes for you." --category Writing --pricing Freemium [--featured]
"""
from __future__ import annotations

import argparse
import sys

from saasdir.core.config import get_settings
from saasdir.core.errors import ValidationError
from saasdir.domain.submissions import validate_description, validate_name, validate_pricing, validate_url
from saasdir.repositories.sql_repository import SQLRepository
from saasdir.services.slug_service import SlugService


def main() -> None:
    ap = argparse.ArgumentParser(description="Add an active product to the directory")
    ap.add_argument("--name", required=True, help="Product name (1-100 chars)")
    ap.add_argument("--url", required=True, help="Product website")
    ap.add_argument("--description", required=True, help="Description (10-500 chars)")
    ap.add_argument("--category", required=True, help="Category name (e.g. Coding)")
    ap.add_argument("--pricing", required=True, help="Free, Freemium or Paid")
    ap.add_argument("--slug", help="Custom slug (default: derived from the name)")
    ap.add_argument("--logo-url", help="Public URL of the logo")
    ap.add_argument("--featured", action="store_true", help="Pin the product to the top of listings")
    args = ap.parse_args()

    repo = SQLRepository()
    slugs = SlugService(repo)
    try:
        name = validate_name(args.name)
        description = validate_description(args.description)
        url = validate_url(args.url, get_settings().blocked_hosts)
        pricing = validate_pricing(args.pricing)
    except ValidationError as exc:
        raise SystemExit(f"Invalid {exc.field or 'input'}: {exc.message}")

    category = repo.get_category_by_name(args.category.strip())
    if not category:
        print(f"Warning: category '{args.category}' does not exist; the product will not be linked to one")
    slug = slugs.validate_custom_slug(args.slug) if args.slug else slugs.generate_product_slug(name)
    if not slug:
        raise SystemExit("Could not derive a slug; pass --slug")

    product = repo.create_product(
        {
            "name": name,
            "description": description,
            "url": url,
            "category_id": category.id if category else None,
            "category_name": category.name if category else args.category.strip(),
            "pricing": pricing,
            "logo_url": (args.logo_url or "").strip() or None,
            "featured": args.featured,
            "status": "active",
            "slug": slug,
        }
    )
    print("OK: product created")
    print(f"  ID: {product.id}")
    print(f"  Slug: {product.slug}")
    print(f"  URL: {get_settings().public_base_url}/products/{product.slug}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
