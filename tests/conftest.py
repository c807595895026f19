from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest

# Make the saasdir package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from saasdir.core import config as core_config  # noqa: E402
from saasdir.db import models  # noqa: E402
from saasdir.db import session as db_session  # noqa: E402
from saasdir.repositories.sql_repository import SQLRepository  # noqa: E402


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("ADMIN_PASSWORD", "admin-secret")
    monkeypatch.delenv("BLOCKED_HOSTS", raising=False)
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield tmp_path

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def repo(db_env):
    return SQLRepository()


@pytest.fixture()
def category(repo):
    return repo.create_category("Coding", "coding", relevance=1)


@pytest.fixture()
def make_product(repo):
    def _make(name="Acme AI", slug="acme-ai", **extra):
        data = {
            "name": name,
            "description": "An assistant that writes release notes.",
            "url": "https://acme.example.com",
            "pricing": "Free",
            "slug": slug,
        }
        data.update(extra)
        return repo.create_product(data)

    return _make


@pytest.fixture()
def make_user(repo):
    def _make(email="user@example.com"):
        return repo.create_user(email, "argon2$unused")

    return _make


@pytest.fixture()
def png_bytes():
    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buf, "PNG")
    return buf.getvalue()
