from __future__ import annotations

import os

import pytest
from sqlalchemy.exc import IntegrityError

from saasdir.core.errors import SlugConflictError, UploadError, ValidationError
from saasdir.domain.submissions import SubmissionForm
from saasdir.services.storage_service import StorageService, UploadedFile
from saasdir.services.submission_service import SubmissionService


def _form(**overrides) -> SubmissionForm:
    values = {
        "name": "Acme AI",
        "description": "Writes release notes from your commits.",
        "url": "https://acme.example.com",
        "category": "Coding",
        "pricing": "Free",
        "email": "founder@acme.example.com",
    }
    values.update(overrides)
    return SubmissionForm(**values)


def test_submission_is_pending_with_generated_slug(repo, category):
    submission = SubmissionService(repo).create_submission(_form())
    assert submission.status == "pending"
    assert submission.slug == "acme-ai"
    assert submission.category_id == category.id
    assert submission.category_name == "Coding"
    assert repo.get_submission(submission.id) is not None


def test_slug_avoids_existing_products_and_submissions(repo, make_product):
    make_product(name="Acme AI", slug="acme-ai")
    svc = SubmissionService(repo)
    first = svc.create_submission(_form())
    second = svc.create_submission(_form())
    assert first.slug == "acme-ai1"
    assert second.slug == "acme-ai2"


def test_custom_slug_and_custom_category(repo):
    submission = SubmissionService(repo).create_submission(
        _form(slug="My Custom Slug", category="Other", custom_category="Robotics")
    )
    assert submission.slug == "my-custom-slug"
    assert submission.category_name == "Robotics"
    assert submission.category_id is None


def test_invalid_form_writes_nothing(repo):
    with pytest.raises(ValidationError):
        SubmissionService(repo).create_submission(_form(description="short"))
    assert repo.list_submissions() == []


def test_logo_and_image_are_stored(repo, db_env, png_bytes):
    storage = StorageService(str(db_env / "files"))
    svc = SubmissionService(repo, storage=storage)
    submission = svc.create_submission(
        _form(),
        logo=UploadedFile("logo.png", "image/png", png_bytes),
        image=UploadedFile("shot.png", "image/png", png_bytes),
    )
    assert submission.logo_url.startswith("/uploads/logos/logo_")
    assert submission.image_url.startswith("/uploads/product-images/")
    logo_path = db_env / "files" / "logos" / submission.logo_url.rsplit("/", 1)[1]
    assert logo_path.read_bytes() == png_bytes


def test_bad_image_removes_uploaded_logo(repo, db_env, png_bytes):
    storage = StorageService(str(db_env / "files"))
    svc = SubmissionService(repo, storage=storage)
    with pytest.raises(UploadError):
        svc.create_submission(
            _form(),
            logo=UploadedFile("logo.png", "image/png", png_bytes),
            image=UploadedFile("shot.gif", "image/gif", b"GIF89a"),
        )
    assert os.listdir(db_env / "files" / "logos") == []
    assert repo.list_submissions() == []


def test_insert_race_becomes_slug_conflict(repo, db_env, png_bytes, monkeypatch):
    storage = StorageService(str(db_env / "files"))
    svc = SubmissionService(repo, storage=storage)

    def _lost_race(_data):
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: submissions.slug"))

    monkeypatch.setattr(repo, "create_submission", _lost_race)
    with pytest.raises(SlugConflictError) as exc:
        svc.create_submission(_form(), logo=UploadedFile("logo.png", "image/png", png_bytes))
    assert exc.value.slug == "acme-ai"
    assert os.listdir(db_env / "files" / "logos") == []
