from __future__ import annotations

from urllib.parse import quote_plus, urlparse

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from saasdir.core import csrf
from saasdir.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    RegistrationError,
)
from saasdir.services.catalog_service import CatalogService
from saasdir.services.like_service import LikeService
from saasdir.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    current_user,
    set_session_cookie,
)

router = APIRouter(prefix="", tags=["auth"])
auth_service = AuthService()
catalog = CatalogService()
likes = LikeService()


def _safe_next(value: str | None) -> str:
    dest = (value or "").strip()
    if not dest.startswith("/") or dest.startswith("//"):
        return "/"
    return dest


def _login_redirect(response_dest: str, token: str, request: Request) -> RedirectResponse:
    resp = RedirectResponse(response_dest, status_code=303)
    set_session_cookie(resp, token)
    csrf.set_csrf_cookie(resp, csrf.ensure_csrf_token(request))
    return resp


@router.get("/auth/login", response_class=HTMLResponse)
def login_page(request: Request, next: str = "/", error: str = ""):
    return csrf.render_protected(
        request,
        "login.html",
        {"user": current_user(request), "next": _safe_next(next), "error": error, "mode": "login"},
    )


@router.post("/auth/login")
def do_login(request: Request, email: str = Form(""), password: str = Form(""), next: str = Form("/"), csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    dest = _safe_next(next)
    try:
        outcome = auth_service.login(email, password)
    except InvalidCredentialsError as exc:
        return RedirectResponse(f"/auth/login?next={quote_plus(dest)}&error={quote_plus(exc.message)}", status_code=303)
    return _login_redirect(dest, outcome.session_token, request)


@router.get("/auth/signup", response_class=HTMLResponse)
def signup_page(request: Request, next: str = "/", error: str = ""):
    return csrf.render_protected(
        request,
        "login.html",
        {"user": current_user(request), "next": _safe_next(next), "error": error, "mode": "signup"},
    )


@router.post("/auth/signup")
def do_signup(request: Request, email: str = Form(""), password: str = Form(""), next: str = Form("/"), csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    dest = _safe_next(next)
    try:
        outcome = auth_service.signup(email, password)
    except (RegistrationError, AccountExistsError) as exc:
        return RedirectResponse(f"/auth/signup?next={quote_plus(dest)}&error={quote_plus(exc.message)}", status_code=303)
    return _login_redirect(dest, outcome.session_token, request)


@router.post("/auth/logout")
def logout(request: Request, next: str = Form(None), csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    auth_service.logout(request.cookies.get(SESSION_COOKIE_NAME))
    dest = (next or "").strip()
    if not dest:
        dest = urlparse(request.headers.get("referer") or "").path or "/"
    resp = RedirectResponse(_safe_next(dest), status_code=303)
    clear_session_cookie(resp)
    return resp


@router.get("/profile", response_class=HTMLResponse)
def profile(request: Request, saved: str = "", error: str = ""):
    user = current_user(request)
    if not user:
        return RedirectResponse("/auth/login?next=/profile", status_code=303)
    liked_ids = likes.get_user_liked_products(user.id)
    liked_products = [p for p in (catalog.get_product(pid) for pid in liked_ids) if p]
    return csrf.render_protected(
        request,
        "profile.html",
        {"user": user, "liked_products": liked_products, "saved": saved, "error": error},
    )


@router.post("/profile/password")
def change_password(
    request: Request,
    current_password: str = Form(""),
    new_password: str = Form(""),
    confirm_password: str = Form(""),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    user = current_user(request)
    if not user:
        return RedirectResponse("/auth/login?next=/profile", status_code=303)
    if new_password != confirm_password:
        return RedirectResponse(f"/profile?error={quote_plus('Passwords do not match')}", status_code=303)
    try:
        auth_service.change_password(user.id, current_password, new_password)
    except (InvalidCredentialsError, RegistrationError) as exc:
        return RedirectResponse(f"/profile?error={quote_plus(exc.message)}", status_code=303)
    return RedirectResponse("/profile?saved=1", status_code=303)
