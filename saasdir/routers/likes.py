from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from saasdir.core import csrf
from saasdir.domain.likes import LOGIN_REQUIRED
from saasdir.services.like_service import LikeService
from saasdir.services.session_service import current_user_id

router = APIRouter(prefix="/api", tags=["likes"])
like_service = LikeService()


@router.post("/products/{product_id}/like")
def toggle_like(product_id: str, request: Request):
    csrf.validate_csrf(request, None)
    result = like_service.toggle_like(product_id, current_user_id(request))
    status_code = 200
    if not result.success:
        status_code = 401 if result.error == LOGIN_REQUIRED else 500
    return JSONResponse(result.as_dict(), status_code=status_code)


@router.get("/products/{product_id}/like")
def like_status(product_id: str, request: Request):
    return like_service.get_like_status(product_id, current_user_id(request)).as_dict()


@router.get("/me/likes")
def my_likes(request: Request):
    return {"productIds": like_service.get_user_liked_products(current_user_id(request))}
