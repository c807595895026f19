import hashlib
import os
import pathlib
import shutil

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from saasdir.admin_app import app as admin_app
from saasdir.core.config import PACKAGE_DIR, get_settings
from saasdir.core.logging import setup_logging
from saasdir.core.utils import absolute_url, pricing_badge_class, truncate_text
from saasdir.routers import auth as auth_router
from saasdir.routers import likes as likes_router
from saasdir.routers import pages as pages_router
from saasdir.routers import seo as seo_router
from saasdir.routers import slug as slug_router
from saasdir.routers import submit as submit_router
from saasdir.services.slug_service import SlugService


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data: https:; "
            "style-src 'self' 'unsafe-inline' https://unpkg.com; "
            "script-src 'self'; "
            "connect-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


setup_logging()
settings = get_settings()

app = FastAPI(title="AI SaaS Directory")

WEB = os.path.join(PACKAGE_DIR, "web")
UPLOADS = settings.uploads_dir
os.makedirs(UPLOADS, exist_ok=True)


class CachedStaticFiles(StaticFiles):
    def set_headers(self, scope, resp, path, stat_result):
        # fingerprinted assets never change under the same name
        resp.headers["Cache-Control"] = "public, max-age=31536000, immutable"


app.mount("/static", CachedStaticFiles(directory=WEB), name="static")
app.mount("/uploads", StaticFiles(directory=UPLOADS), name="uploads")
templates = Jinja2Templates(directory=os.path.join(PACKAGE_DIR, "templates"))

allowed_cors = {settings.public_base_url}
if settings.app_env != "prod":
    allowed_cors.update(
        {
            "http://localhost:8000",
            "http://127.0.0.1:8000",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        }
    )
allowed_cors = {origin for origin in allowed_cors if origin}
if allowed_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(allowed_cors),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")


def _fingerprint_asset(rel_path: str) -> str:
    """
    Copy an asset under a short content hash: "site.css" -> "site.<hash8>.css".
    Returns the versioned file name (without /static).
    """
    src = pathlib.Path(WEB) / rel_path
    if not src.exists():
        return rel_path.replace("\\", "/")
    data = src.read_bytes()
    h = hashlib.sha1(data).hexdigest()[:8]
    dst_name = f"{src.stem}.{h}{src.suffix}"
    dst = src.with_name(dst_name)
    if not dst.exists():
        shutil.copy2(src, dst)
    return dst_name


try:
    _css_fp = _fingerprint_asset("site.css")
    _js_fp = _fingerprint_asset("like.js")
except OSError:
    _css_fp, _js_fp = "site.css", "like.js"

templates.env.globals.update(
    css_href=f"/static/{_css_fp}",
    like_js_href=f"/static/{_js_fp}",
    truncate_text=truncate_text,
    pricing_badge_class=pricing_badge_class,
    absolute_url=absolute_url,
)
app.state.templates = templates
app.state.slug_service = SlugService()


@app.get("/favicon.ico")
def favicon():
    ico_path = os.path.join(WEB, "favicon.ico")
    if os.path.exists(ico_path):
        return FileResponse(ico_path, media_type="image/x-icon")
    return Response(status_code=204)


app.include_router(auth_router.router)
app.include_router(slug_router.router)
app.include_router(likes_router.router)
app.include_router(submit_router.router)
app.include_router(seo_router.router)
app.include_router(pages_router.router)
app.mount("/admin", admin_app, name="admin")


def create_app() -> FastAPI:
    """Factory for uvicorn/gunicorn."""
    return app
