"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, or_, select, update

from saasdir.db.models import (
    AdminSession,
    Category,
    Like,
    Product,
    Submission,
    User,
    UserSession,
)
from saasdir.db.session import get_session

PRODUCT_FIELDS = (
    "name",
    "description",
    "url",
    "category_id",
    "category_name",
    "pricing",
    "logo_url",
    "image_url",
    "featured",
    "status",
    "slug",
)
SUBMISSION_FIELDS = (
    "name",
    "description",
    "url",
    "category_id",
    "category_name",
    "pricing",
    "email",
    "logo_url",
    "image_url",
    "status",
    "rejection_reason",
    "slug",
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _pick(data: dict, allowed: tuple) -> dict:
    return {key: value for key, value in data.items() if key in allowed}


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- categories --------------------------
    def list_categories(self) -> list[Category]:
        with get_session() as session:
            stmt = select(Category).order_by(Category.relevance.asc(), Category.name.asc())
            return session.execute(stmt).scalars().all()

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        with get_session() as session:
            stmt = select(Category).where(Category.slug == slug)
            return session.execute(stmt).scalar_one_or_none()

    def get_category_by_name(self, name: str) -> Optional[Category]:
        with get_session() as session:
            stmt = select(Category).where(Category.name == name)
            return session.execute(stmt).scalar_one_or_none()

    def create_category(self, name: str, slug: str, relevance: int = 0, description: str | None = None) -> Category:
        now = _now()
        entity = Category(
            name=name,
            slug=slug,
            relevance=relevance,
            description=description,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    # -------------------------- products --------------------------
    def get_product(self, product_id: str) -> Optional[Product]:
        with get_session() as session:
            return session.get(Product, product_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        with get_session() as session:
            stmt = select(Product).where(Product.slug == slug)
            return session.execute(stmt).scalar_one_or_none()

    def list_products(
        self,
        *,
        status: str | None = "active",
        category_name: str | None = None,
        category_id: str | None = None,
        pricing: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if status:
            stmt = stmt.where(Product.status == status)
        if category_name:
            stmt = stmt.where(Product.category_name == category_name)
        if category_id:
            stmt = stmt.where(Product.category_id == category_id)
        if pricing:
            stmt = stmt.where(Product.pricing == pricing)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(or_(func.lower(Product.name).like(pattern), func.lower(Product.description).like(pattern)))
        stmt = stmt.order_by(Product.featured.desc(), Product.created_at.desc())
        with get_session() as session:
            return session.execute(stmt).scalars().all()

    def list_related_products(self, category_id: str, exclude_id: str, limit: int = 4) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.category_id == category_id)
            .where(Product.id != exclude_id)
            .where(Product.status == "active")
            .order_by(Product.created_at.desc())
            .limit(limit)
        )
        with get_session() as session:
            return session.execute(stmt).scalars().all()

    def create_product(self, data: dict) -> Product:
        now = _now()
        values = _pick(data, PRODUCT_FIELDS)
        values.setdefault("status", "active")
        values.setdefault("featured", False)
        entity = Product(**values, like_count=0, created_at=now, updated_at=now)
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def get_product_like_count(self, product_id: str) -> Optional[int]:
        with get_session() as session:
            stmt = select(Product.like_count).where(Product.id == product_id)
            row = session.execute(stmt).first()
            return None if row is None else int(row[0] or 0)

    # -------------------------- submissions --------------------------
    def get_submission(self, submission_id: str) -> Optional[Submission]:
        with get_session() as session:
            return session.get(Submission, submission_id)

    def list_submissions(self, status: str | None = None) -> list[Submission]:
        stmt = select(Submission).order_by(Submission.created_at.desc())
        if status:
            stmt = stmt.where(Submission.status == status)
        with get_session() as session:
            return session.execute(stmt).scalars().all()

    def count_submissions_by_status(self) -> dict[str, int]:
        stmt = select(Submission.status, func.count(Submission.id)).group_by(Submission.status)
        with get_session() as session:
            return {status: int(total) for status, total in session.execute(stmt).all()}

    def create_submission(self, data: dict) -> Submission:
        now = _now()
        values = _pick(data, SUBMISSION_FIELDS)
        values.setdefault("status", "pending")
        entity = Submission(**values, created_at=now, updated_at=now)
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_submission(self, submission_id: str, data: dict) -> Optional[Submission]:
        values = _pick(data, SUBMISSION_FIELDS)
        values["updated_at"] = _now()
        with get_session() as session:
            stmt = update(Submission).where(Submission.id == submission_id).values(**values)
            result = session.execute(stmt)
            session.commit()
            if not result.rowcount:
                return None
            return session.get(Submission, submission_id, populate_existing=True)

    # -------------------------- slugs --------------------------
    def list_product_slugs(self) -> list[str]:
        with get_session() as session:
            stmt = select(Product.slug).where(Product.slug.is_not(None))
            return [slug for slug in session.execute(stmt).scalars().all() if slug]

    def list_submission_slugs(self) -> list[str]:
        with get_session() as session:
            stmt = select(Submission.slug).where(Submission.slug.is_not(None))
            return [slug for slug in session.execute(stmt).scalars().all() if slug]

    def product_slug_exists(self, slug: str) -> bool:
        with get_session() as session:
            stmt = select(Product.id).where(Product.slug == slug).limit(1)
            return session.execute(stmt).first() is not None

    def submission_slug_exists(self, slug: str) -> bool:
        with get_session() as session:
            stmt = select(Submission.id).where(Submission.slug == slug).limit(1)
            return session.execute(stmt).first() is not None

    # -------------------------- likes --------------------------
    def find_like(self, user_id: str, product_id: str) -> Optional[Like]:
        with get_session() as session:
            stmt = select(Like).where(Like.user_id == user_id).where(Like.product_id == product_id)
            return session.execute(stmt).scalar_one_or_none()

    def add_like(self, user_id: str, product_id: str) -> Like:
        """Insert the like row and bump products.like_count in one transaction."""
        entity = Like(user_id=user_id, product_id=product_id, created_at=_now())
        with get_session() as session:
            try:
                session.add(entity)
                session.execute(
                    update(Product)
                    .where(Product.id == product_id)
                    .values(like_count=Product.like_count + 1)
                )
                session.commit()
            except Exception:
                session.rollback()
                raise
            return entity

    def remove_like(self, user_id: str, product_id: str) -> int:
        """Delete the like row and lower products.like_count (never below 0); returns rows removed."""
        with get_session() as session:
            try:
                result = session.execute(
                    delete(Like).where(Like.user_id == user_id).where(Like.product_id == product_id)
                )
                removed = int(result.rowcount or 0)
                if removed:
                    session.execute(
                        update(Product)
                        .where(Product.id == product_id)
                        .where(Product.like_count > 0)
                        .values(like_count=Product.like_count - 1)
                    )
                session.commit()
            except Exception:
                session.rollback()
                raise
            return removed

    def list_liked_product_ids(self, user_id: str) -> list[str]:
        with get_session() as session:
            stmt = select(Like.product_id).where(Like.user_id == user_id).order_by(Like.created_at.desc())
            return list(session.execute(stmt).scalars().all())

    # -------------------------- users --------------------------
    def get_user(self, user_id: str) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(User.email == email)
            return session.execute(stmt).scalar_one_or_none()

    def create_user(self, email: str, password_hash: str) -> User:
        now = _now()
        entity = User(email=email, password_hash=password_hash, created_at=now, updated_at=now)
        with get_session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return entity

    def update_user_password(self, user_id: str, password_hash: str) -> None:
        with get_session() as session:
            stmt = update(User).where(User.id == user_id).values(password_hash=password_hash, updated_at=_now())
            session.execute(stmt)
            session.commit()

    # -------------------------- user sessions --------------------------
    def create_user_session(self, user_id: str, expires_at: datetime) -> str:
        token = secrets.token_urlsafe(32)
        with get_session() as session:
            session.add(UserSession(token=token, user_id=user_id, expires_at=expires_at))
            session.commit()
        return token

    def get_user_session(self, token: str) -> Optional[UserSession]:
        with get_session() as session:
            return session.get(UserSession, token)

    def delete_user_session(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.token == token))
            session.commit()

    def delete_user_sessions(self, user_id: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.user_id == user_id))
            session.commit()

    # -------------------------- admin sessions --------------------------
    def create_admin_session(self, csrf_token: str, expires_at: datetime) -> str:
        token = secrets.token_urlsafe(32)
        entity = AdminSession(token=token, csrf_token=csrf_token, expires_at=expires_at)
        with get_session() as session:
            session.add(entity)
            session.commit()
        return token

    def get_admin_session(self, token: str) -> Optional[AdminSession]:
        with get_session() as session:
            return session.get(AdminSession, token)

    def delete_admin_session(self, token: str) -> None:
        with get_session() as session:
            session.execute(delete(AdminSession).where(AdminSession.token == token))
            session.commit()
