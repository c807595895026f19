"""Database helpers (engine/session export, schema bootstrap)."""

from .session import Base, get_engine, get_session
from .create_tables import create_all, seed_categories

__all__ = ["Base", "get_engine", "get_session", "create_all", "seed_categories"]
