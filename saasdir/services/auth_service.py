"""
Authentication and identity related use cases.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from saasdir.core.security import MIN_PASSWORD_LENGTH, hash_password, verify_password
from saasdir.db.models import User
from saasdir.repositories.sql_repository import SQLRepository
from saasdir.services.session_service import delete_session, issue_session

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


class AuthError(Exception):
    """Base class for authentication-related exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RegistrationError(AuthError):
    pass


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


@dataclass
class LoginSuccess:
    user_id: str
    email: str
    session_token: str


@dataclass
class AuthService:
    """Handles signup, login, logout and password change."""

    repository: Optional[SQLRepository] = None

    def __post_init__(self):
        if self.repository is None:
            self.repository = SQLRepository()

    def _normalize_email(self, email: str | None) -> str:
        return (email or "").strip().lower()

    def _check_password(self, password: str | None) -> str:
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return password

    def signup(self, email: str, password: str) -> LoginSuccess:
        raw_email = self._normalize_email(email)
        if not EMAIL_PATTERN.fullmatch(raw_email):
            raise RegistrationError("Please enter a valid email address")
        self._check_password(password)
        if self.repository.get_user_by_email(raw_email):
            raise AccountExistsError("An account with this email already exists")
        try:
            user = self.repository.create_user(raw_email, hash_password(password))
        except IntegrityError as exc:
            raise AccountExistsError("An account with this email already exists") from exc
        logger.info("User %s signed up", user.id)
        return LoginSuccess(user_id=user.id, email=user.email, session_token=issue_session(user.id))

    def login(self, email: str, password: str) -> LoginSuccess:
        raw_email = self._normalize_email(email)
        if not raw_email:
            raise InvalidCredentialsError("Invalid login credentials")
        user = self.repository.get_user_by_email(raw_email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid login credentials")
        return LoginSuccess(user_id=user.id, email=user.email, session_token=issue_session(user.id))

    def logout(self, session_token: Optional[str]) -> None:
        if not session_token:
            return
        delete_session(session_token)

    def get_user(self, user_id: str | None) -> Optional[User]:
        if not user_id:
            return None
        return self.repository.get_user(user_id)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self.repository.get_user(user_id)
        if not user or not verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")
        self._check_password(new_password)
        self.repository.update_user_password(user_id, hash_password(new_password))
        logger.info("User %s changed password", user_id)
