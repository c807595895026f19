"""Validation rules for product submissions (public form and admin edits)."""
from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urlsplit

from saasdir.core.errors import ValidationError
from saasdir.db.models import PRICING_OPTIONS

NAME_MAX = 100
DESCRIPTION_MIN = 10
DESCRIPTION_MAX = 500
OTHER_CATEGORY = "Other"

BLOCKED_HOSTNAMES = {"localhost", "localhost.localdomain", "0.0.0.0", "metadata.google.internal"}
BLOCKED_SUFFIXES = (".localhost", ".local", ".internal", ".lan")


@dataclass
class SubmissionForm:
    name: str = ""
    description: str = ""
    url: str = ""
    category: str = ""
    custom_category: str = ""
    pricing: str = ""
    slug: str = ""
    email: str = ""


@dataclass
class CleanSubmission:
    name: str
    description: str
    url: str
    category_name: str
    pricing: str
    custom_slug: Optional[str] = None
    email: Optional[str] = None


def normalize_url(value: str | None) -> str:
    """Trim and prepend https:// when the user typed a bare host."""
    url = (value or "").strip()
    if url and not url.startswith("http://") and not url.startswith("https://"):
        url = f"https://{url}"
    return url


def is_blocked_host(hostname: str, extra_blocked: Iterable[str] = ()) -> bool:
    host = (hostname or "").strip().rstrip(".").lower()
    if not host:
        return True
    if host in BLOCKED_HOSTNAMES or host in set(extra_blocked):
        return True
    if host.endswith(BLOCKED_SUFFIXES):
        return True
    try:
        ip = ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved or ip.is_multicast or ip.is_unspecified


def validate_url(value: str | None, extra_blocked: Iterable[str] = ()) -> str:
    url = normalize_url(value)
    if not url:
        raise ValidationError("URL is required", field="url")
    try:
        parts = urlsplit(url)
        hostname = parts.hostname or ""
    except ValueError as exc:
        raise ValidationError("Please enter a valid URL", field="url") from exc
    if parts.scheme not in ("http", "https") or not hostname or " " in url:
        raise ValidationError("Please enter a valid URL", field="url")
    if "." not in hostname and ":" not in hostname:
        raise ValidationError("Please enter a valid URL", field="url")
    if is_blocked_host(hostname, extra_blocked):
        raise ValidationError("This URL is not allowed", field="url")
    return url


def validate_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError("Product name is required", field="name")
    if len(name) > NAME_MAX:
        raise ValidationError(f"Product name must be less than {NAME_MAX} characters", field="name")
    return name


def validate_description(value: str | None) -> str:
    description = (value or "").strip()
    if len(description) < DESCRIPTION_MIN:
        raise ValidationError(f"Description must be at least {DESCRIPTION_MIN} characters", field="description")
    if len(description) > DESCRIPTION_MAX:
        raise ValidationError(f"Description must be less than {DESCRIPTION_MAX} characters", field="description")
    return description


def validate_pricing(value: str | None) -> str:
    pricing = (value or "").strip()
    for option in PRICING_OPTIONS:
        if pricing.lower() == option.lower():
            return option
    raise ValidationError("Please select a pricing option", field="pricing")


def resolve_category(category: str | None, custom_category: str | None = None) -> str:
    chosen = (category or "").strip()
    if chosen == OTHER_CATEGORY:
        chosen = (custom_category or "").strip()
    if not chosen:
        raise ValidationError("Please select or enter a category", field="category")
    return chosen


def validate_submission(form: SubmissionForm, extra_blocked: Iterable[str] = ()) -> CleanSubmission:
    """Check every field of the public form; the first failure wins."""
    return CleanSubmission(
        name=validate_name(form.name),
        description=validate_description(form.description),
        url=validate_url(form.url, extra_blocked),
        category_name=resolve_category(form.category, form.custom_category),
        pricing=validate_pricing(form.pricing),
        custom_slug=(form.slug or "").strip() or None,
        email=(form.email or "").strip() or None,
    )
