from __future__ import annotations

from fastapi import APIRouter, Request

from saasdir.domain.slugs import generate_slug
from saasdir.services.slug_service import SlugService

router = APIRouter(prefix="/slug", tags=["slug"])


def _get_slug_service(request: Request) -> SlugService:
    svc = getattr(getattr(request.app, "state", None), "slug_service", None)
    if not svc:
        raise RuntimeError("SlugService is not configured")
    return svc


@router.get("/check")
def slug_check(request: Request, value: str = "", name: str = ""):
    """Preview the slug a submission would receive.

    `value` is a custom slug typed by the user; `name` is used when it is empty.
    """
    svc = _get_slug_service(request)
    requested = generate_slug(value or name)
    if not requested:
        return {"slug": "", "available": False}
    resolved = svc.validate_custom_slug(requested)
    return {"slug": resolved, "available": resolved == requested}
