from __future__ import annotations

import html
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote_plus

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from saasdir.core.config import get_settings
from saasdir.core.errors import DirectoryError, NotFoundError
from saasdir.db.models import PRICING_OPTIONS
from saasdir.repositories.sql_repository import SQLRepository
from saasdir.services.admin_service import AdminService

logger = logging.getLogger(__name__)

app = FastAPI(title="AI SaaS Directory Admin")
repo = SQLRepository()
admin_service = AdminService(repo)

ADMIN_COOKIE_NAME = "admin_session"
TABS = ("pending", "approved", "rejected", "all")


# ---------------------- helpers ----------------------
def _url(request: Request, path: str) -> str:
    # mounted under /admin by the public app, standalone on its own port
    return (request.scope.get("root_path") or "").rstrip("/") + path


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _check_origin(request: Request) -> bool:
    origin = request.headers.get("origin") or request.headers.get("referer") or ""
    host = (request.headers.get("host") or "").strip()
    if not origin:
        return True
    netloc = origin.split("://", 1)[-1].split("/", 1)[0]
    return bool(host) and netloc == host


def _issue_admin_session() -> tuple[str, str]:
    csrf_token = secrets.token_urlsafe(32)
    ttl = get_settings().admin_session_ttl_seconds
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    token = repo.create_admin_session(csrf_token, expires_at)
    return token, csrf_token


def _load_admin_session(token: Optional[str]):
    if not token:
        return None
    sess = repo.get_admin_session(token)
    if not sess or (sess.expires_at and _as_utc(sess.expires_at) < datetime.now(timezone.utc)):
        repo.delete_admin_session(token)
        return None
    return sess


def _csrf_protect(request: Request, form_token: str) -> None:
    if not _check_origin(request):
        raise HTTPException(403, "invalid origin")
    sess = _load_admin_session(request.cookies.get(ADMIN_COOKIE_NAME))
    if not sess:
        raise HTTPException(401, "not authenticated")
    if not form_token or not secrets.compare_digest(sess.csrf_token, form_token):
        raise HTTPException(403, "invalid csrf")


def require_admin(request: Request) -> str:
    sess = _load_admin_session(request.cookies.get(ADMIN_COOKIE_NAME))
    if not sess:
        raise HTTPException(401, "not authenticated")
    return sess.csrf_token


def _layout(request: Request, title: str, body: str) -> HTMLResponse:
    home = _url(request, "/")
    return HTMLResponse(
        f"""
        <!doctype html><html lang='en'><head>
        <meta charset='utf-8'><meta name='viewport' content='width=device-width,initial-scale=1'>
        <link rel="stylesheet" href="https://unpkg.com/@picocss/pico@2.0.6/css/pico.min.css">
        <title>{html.escape(title)}</title>
        <style>table {{font-size:14px}} td.desc {{white-space:normal;max-width:28rem}}</style>
        </head><body>
        <main class="container">
          <nav><ul><li><strong>Admin</strong></li></ul>
              <ul><li><a href="{home}">Submissions</a></li><li><a href="{_url(request, '/logout')}">Log out</a></li></ul>
          </nav>
          {body}
        </main>
        </body></html>
        """
    )


def _alert(request: Request) -> str:
    ok = (request.query_params.get("ok") or "").strip()
    messages = {
        "approved": "Submission approved and published.",
        "rejected": "Submission rejected.",
        "updated": "Submission updated.",
    }
    if ok in messages:
        return f"<mark role='status' style='display:block'>{messages[ok]}</mark>"
    error = request.query_params.get("error")
    if error:
        return f"<mark role='alert' style='display:block'>{html.escape(error)}</mark>"
    return ""


def _redirect_error(request: Request, path: str, message: str) -> RedirectResponse:
    return RedirectResponse(_url(request, f"{path}?error={quote_plus(message)}"), status_code=303)


# ---------------------- auth ----------------------
@app.get("/login", response_class=HTMLResponse)
def login_page(request: Request, next: str = "/", error: str = ""):
    msg = "Invalid password." if error else ""
    return HTMLResponse(
        f"""
        <!doctype html><html lang='en'><head>
        <meta charset='utf-8'><meta name='viewport' content='width=device-width,initial-scale=1'>
        <link rel="stylesheet" href="https://unpkg.com/@picocss/pico@2.0.6/css/pico.min.css">
        <title>Admin | Login</title></head>
        <body><main class="container">
          <article>
            <h1>Admin | Login</h1>
            {('<mark role="alert">' + html.escape(msg) + '</mark>') if msg else ''}
            <form method='post' action='{_url(request, "/login")}'>
              <input type='hidden' name='next' value='{html.escape(next)}'>
              <label>Password</label><input name='password' type='password' required>
              <button style='margin-top:12px'>Sign in</button>
            </form>
          </article>
        </main></body></html>
        """
    )


@app.post("/login")
def do_login(request: Request, password: str = Form(""), next: str = Form("/")):
    if not _check_origin(request) or not admin_service.validate_admin_password(password):
        logger.warning("Rejected admin login from %s", request.client.host if request.client else "unknown")
        return RedirectResponse(_url(request, "/login?error=1"), status_code=303)
    tok, _ = _issue_admin_session()
    dest = next if (next or "").startswith("/") and not next.startswith("//") else "/"
    settings = get_settings()
    resp = RedirectResponse(_url(request, dest), status_code=303)
    resp.set_cookie(
        ADMIN_COOKIE_NAME,
        value=tok,
        httponly=True,
        samesite="strict",
        secure=settings.app_env == "prod",
        max_age=settings.admin_session_ttl_seconds,
        path="/",
    )
    return resp


@app.get("/logout")
def logout(request: Request):
    tok = request.cookies.get(ADMIN_COOKIE_NAME)
    if tok:
        repo.delete_admin_session(tok)
    resp = RedirectResponse(_url(request, "/login"), status_code=303)
    resp.delete_cookie(ADMIN_COOKIE_NAME, path="/")
    return resp


# ---------------------- submissions ----------------------
def _submission_row(request: Request, s, csrf_token: str) -> str:
    sid = html.escape(s.id)
    actions = [f"<a href='{_url(request, f'/submissions/{sid}')}' class='secondary' style='margin:0 4px'>Edit</a>"]
    if s.status == "pending":
        actions.append(
            f"<form method='post' action='{_url(request, f'/submissions/{sid}/approve')}' style='display:inline'>"
            f"<input type='hidden' name='csrf_token' value='{csrf_token}'>"
            "<button style='margin:0 4px'>Approve</button>"
            "</form>"
        )
    logo = f"<img src='{html.escape(s.logo_url)}' alt='' width='32' height='32'>" if s.logo_url else ""
    return (
        "<tr>"
        f"<td>{logo}</td>"
        f"<td><strong>{html.escape(s.name)}</strong><br><small>{html.escape(s.slug or '')}</small></td>"
        f"<td class='desc'>{html.escape(s.description)}</td>"
        f"<td><a href='{html.escape(s.url)}' target='_blank' rel='noopener'>{html.escape(s.url)}</a></td>"
        f"<td>{html.escape(s.category_name or '')}</td>"
        f"<td>{html.escape(s.pricing)}</td>"
        f"<td>{html.escape(s.status)}</td>"
        f"<td>{s.created_at:%Y-%m-%d}</td>"
        f"<td>{''.join(actions)}</td>"
        "</tr>"
    )


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request, tab: str = "pending"):
    try:
        csrf_token = require_admin(request)
    except HTTPException:
        return RedirectResponse(_url(request, "/login?next=/"), status_code=303)
    tab = tab if tab in TABS else "pending"
    counts = admin_service.submission_counts()
    submissions = admin_service.get_submissions(None if tab == "all" else tab)
    tab_links = []
    for name in TABS:
        count = sum(counts.values()) if name == "all" else counts.get(name, 0)
        cls = "" if name == tab else "class='secondary'"
        tab_links.append(f"<a role='button' {cls} href='{_url(request, f'/?tab={name}')}'>{name.title()} ({count})</a>")
    rows = "\n".join(_submission_row(request, s, csrf_token) for s in submissions)
    body = f"""
    <article>
      <h3>Submissions</h3>
      {_alert(request)}
      <p>{' '.join(tab_links)}</p>
      <div class='overflow-auto'>
      <table>
        <thead><tr><th>Logo</th><th>Name</th><th>Description</th><th>URL</th><th>Category</th><th>Pricing</th><th>Status</th><th>Submitted</th><th>Actions</th></tr></thead>
        <tbody>{rows or '<tr><td colspan="9">No submissions</td></tr>'}</tbody>
      </table>
      </div>
    </article>
    """
    return _layout(request, "Admin | Submissions", body)


@app.get("/submissions/{submission_id}", response_class=HTMLResponse)
def submission_detail(submission_id: str, request: Request):
    try:
        csrf_token = require_admin(request)
    except HTTPException:
        return RedirectResponse(_url(request, f"/login?next=/submissions/{submission_id}"), status_code=303)
    s = repo.get_submission(submission_id)
    if not s:
        return _redirect_error(request, "/", "Submission not found")
    sid = html.escape(s.id)
    category_options = "".join(
        f"<option value='{html.escape(c.name)}' {'selected' if c.name == s.category_name else ''}>{html.escape(c.name)}</option>"
        for c in repo.list_categories()
    )
    if s.category_name and not s.category_id:
        category_options += f"<option value='{html.escape(s.category_name)}' selected>{html.escape(s.category_name)} (custom)</option>"
    pricing_options = "".join(
        f"<option {'selected' if p == s.pricing else ''}>{p}</option>" for p in PRICING_OPTIONS
    )
    reason = f"<p><strong>Rejection reason:</strong> {html.escape(s.rejection_reason)}</p>" if s.rejection_reason else ""
    moderation = ""
    if s.status == "pending":
        moderation = f"""
    <article>
      <h4>Moderate</h4>
      <form method='post' action='{_url(request, f"/submissions/{sid}/approve")}'>
        <input type='hidden' name='csrf_token' value='{csrf_token}'>
        <button>Approve and publish</button>
      </form>
      <form method='post' action='{_url(request, f"/submissions/{sid}/reject")}'>
        <input type='hidden' name='csrf_token' value='{csrf_token}'>
        <label>Reason (optional) <textarea name='reason' rows='2'></textarea></label>
        <button class='secondary'>Reject</button>
      </form>
    </article>
    """
    body = f"""
    <article>
      <h3>{html.escape(s.name)}</h3>
      {_alert(request)}
      <p><strong>Status:</strong> {html.escape(s.status)} | <strong>Slug:</strong> {html.escape(s.slug or '')} | <strong>Email:</strong> {html.escape(s.email or '')}</p>
      {reason}
      <form method='post' action='{_url(request, f"/submissions/{sid}/edit")}'>
        <input type='hidden' name='csrf_token' value='{csrf_token}'>
        <label>Name <input name='name' value='{html.escape(s.name)}' maxlength='100' required></label>
        <label>Description <textarea name='description' rows='4' maxlength='500' required>{html.escape(s.description)}</textarea></label>
        <label>URL <input name='url' value='{html.escape(s.url)}' required></label>
        <label>Category <select name='category_name'>{category_options}</select></label>
        <label>Pricing <select name='pricing'>{pricing_options}</select></label>
        <button>Save</button>
      </form>
    </article>
    {moderation}
    <p><a class='secondary' href='{_url(request, "/")}'>Back</a></p>
    """
    return _layout(request, f"Admin | {s.name}", body)


@app.post("/submissions/{submission_id}/edit")
def edit_submission(
    submission_id: str,
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    url: str = Form(""),
    category_name: str = Form(""),
    pricing: str = Form(""),
    csrf_token: str = Form(""),
):
    _csrf_protect(request, csrf_token)
    data = {
        "name": name,
        "description": description,
        "url": url,
        "category_name": category_name,
        "pricing": pricing,
    }
    try:
        admin_service.update_submission(submission_id, data)
    except DirectoryError as exc:
        return _redirect_error(request, f"/submissions/{submission_id}", exc.message)
    return RedirectResponse(_url(request, f"/submissions/{submission_id}?ok=updated"), status_code=303)


@app.post("/submissions/{submission_id}/approve")
def approve_submission(submission_id: str, request: Request, csrf_token: str = Form("")):
    _csrf_protect(request, csrf_token)
    try:
        admin_service.approve_submission(submission_id)
    except NotFoundError as exc:
        return _redirect_error(request, "/", exc.message)
    except DirectoryError as exc:
        return _redirect_error(request, f"/submissions/{submission_id}", exc.message)
    return RedirectResponse(_url(request, "/?tab=pending&ok=approved"), status_code=303)


@app.post("/submissions/{submission_id}/reject")
def reject_submission(submission_id: str, request: Request, reason: str = Form(""), csrf_token: str = Form("")):
    _csrf_protect(request, csrf_token)
    try:
        admin_service.reject_submission(submission_id, reason)
    except NotFoundError as exc:
        return _redirect_error(request, "/", exc.message)
    return RedirectResponse(_url(request, "/?tab=pending&ok=rejected"), status_code=303)


def create_admin_app() -> FastAPI:
    """Factory for uvicorn/gunicorn."""
    return app
