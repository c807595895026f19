"""
Utility helpers shared across routers/services/templates.
"""

from typing import Optional

from .config import get_settings

PRICING_BADGES = {
    "free": "badge badge-free",
    "freemium": "badge badge-freemium",
    "paid": "badge badge-paid",
}


def absolute_url(path: str, base: Optional[str] = None) -> str:
    """
    Turn a relative path into an absolute URL using PUBLIC_BASE_URL.
    """
    settings = get_settings()
    base_url = (base or settings.public_base_url).rstrip("/")
    if not path:
        return base_url + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path


def truncate_text(text: str | None, max_length: int) -> str:
    value = text or ""
    if len(value) <= max_length:
        return value
    return value[:max_length].strip() + "..."


def pricing_badge_class(pricing: str | None) -> str:
    return PRICING_BADGES.get((pricing or "").lower(), "badge")
