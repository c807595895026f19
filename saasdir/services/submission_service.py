"""Public submission flow: validate, upload files, resolve category and slug, insert."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from saasdir.core.config import get_settings
from saasdir.core.errors import SlugConflictError
from saasdir.db.models import Submission
from saasdir.domain.submissions import SubmissionForm, validate_submission
from saasdir.repositories.sql_repository import SQLRepository
from saasdir.services.slug_service import SlugService
from saasdir.services.storage_service import StorageService, UploadedFile

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(
        self,
        repository: SQLRepository | None = None,
        slug_service: SlugService | None = None,
        storage: StorageService | None = None,
    ) -> None:
        self.repository = repository or SQLRepository()
        self.slug_service = slug_service or SlugService(self.repository)
        self.storage = storage or StorageService()

    def _category_id(self, category_name: str) -> Optional[str]:
        try:
            category = self.repository.get_category_by_name(category_name)
        except SQLAlchemyError:
            logger.error("Error looking up category %r", category_name, exc_info=True)
            return None
        return category.id if category else None

    def create_submission(
        self,
        form: SubmissionForm,
        logo: UploadedFile | None = None,
        image: UploadedFile | None = None,
    ) -> Submission:
        """Validate and store a visitor submission with status 'pending'.

        Raises ValidationError/UploadError for bad input and SlugConflictError
        when a concurrent insert took the slug first.
        """
        clean = validate_submission(form, get_settings().blocked_hosts)

        logo_url = self.storage.upload_logo(logo) if logo else None
        image_url = None
        try:
            if image:
                image_url = self.storage.upload_product_image(image)
            if clean.custom_slug:
                slug = self.slug_service.validate_custom_slug(clean.custom_slug)
            else:
                slug = self.slug_service.generate_product_slug(clean.name)
            data = {
                "name": clean.name,
                "description": clean.description,
                "url": clean.url,
                "category_id": self._category_id(clean.category_name),
                "category_name": clean.category_name,
                "pricing": clean.pricing,
                "email": clean.email,
                "logo_url": logo_url,
                "image_url": image_url,
                "slug": slug or None,
                "status": "pending",
            }
            try:
                submission = self.repository.create_submission(data)
            except IntegrityError as exc:
                logger.warning("Slug %r was taken concurrently", slug)
                raise SlugConflictError(slug) from exc
        except Exception:
            for url in (logo_url, image_url):
                if url:
                    self.storage.delete_file(url)
            raise
        logger.info("Submission %s created for %r (slug=%s)", submission.id, submission.name, submission.slug)
        return submission
