"""Session helpers (issue tokens, cookies, resolve the current user)."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import Request, Response

from saasdir.core.config import get_settings
from saasdir.repositories.sql_repository import SQLRepository

SESSION_COOKIE_NAME = "session"

_repo = SQLRepository()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def issue_session(user_id: str) -> str:
    """Create a new session token for the user and persist it."""
    settings = get_settings()
    ttl = max(60, settings.session_ttl_seconds)
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    return _repo.create_user_session(user_id, expires_at)


def user_id_for_token(token: str | None) -> str | None:
    if not token:
        return None
    db_session = _repo.get_user_session(token)
    if not db_session:
        return None
    if db_session.expires_at and _as_utc(db_session.expires_at) < datetime.now(timezone.utc):
        _repo.delete_user_session(token)
        return None
    return db_session.user_id


def current_user_id(request: Request) -> str | None:
    """Return the user id bound to the session cookie, if any."""
    return user_id_for_token(request.cookies.get(SESSION_COOKIE_NAME))


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    secure_cookie = settings.app_env == "prod"
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure_cookie,
        samesite="lax",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


def delete_session(token: str) -> None:
    """Remove a session token from the store."""
    if not token:
        return
    _repo.delete_user_session(token)


def current_user(request: Request):
    """Return the User row for the session cookie, or None for anonymous visitors."""
    user_id = current_user_id(request)
    if not user_id:
        return None
    return _repo.get_user(user_id)
