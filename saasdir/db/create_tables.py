"""Create the database schema and seed the default categories."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    "Coding",
    "SEO",
    "Marketing",
    "Writing",
    "Web Scraping",
    "Video & Audio",
    "Design & UI/UX",
    "Analytics",
    "Email",
    "Task Management",
    "Content Creation",
    "Developer Tools",
    "Data Analysis",
    "Customer Support",
    "Project Management",
    "Communication",
    "Sales & CRM",
    "Finance & Accounting",
    "HR & Recruitment",
    "Ecommerce",
    "Security",
    "Social Media",
    "Education & Training",
    "Productivity",
    "Legal",
    "Payments",
)


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)


def seed_categories() -> int:
    """Insert missing default categories, ranked by list position. Returns rows added."""
    from saasdir.domain.slugs import generate_slug
    from saasdir.repositories.sql_repository import SQLRepository

    repo = SQLRepository()
    existing = {c.name for c in repo.list_categories()}
    added = 0
    for relevance, name in enumerate(DEFAULT_CATEGORIES, start=1):
        if name in existing:
            continue
        repo.create_category(name, generate_slug(name), relevance=relevance)
        added += 1
    return added


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        create_all()
        logger.info("Database tables created successfully.")
        logger.info("Seeded %d categories.", seed_categories())
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
