"""Moderation use cases: list, edit, approve and reject submissions."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from saasdir.core.config import get_settings
from saasdir.core.errors import NotFoundError, SlugConflictError, ValidationError
from saasdir.core.security import constant_time_equals
from saasdir.db.models import SUBMISSION_STATUSES, Product, Submission
from saasdir.domain.submissions import (
    resolve_category,
    validate_description,
    validate_name,
    validate_pricing,
    validate_url,
)
from saasdir.repositories.sql_repository import SQLRepository
from saasdir.services.slug_service import SlugService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "url", "category_id", "category_name", "pricing")


class AdminService:
    def __init__(self, repository: SQLRepository | None = None, slug_service: SlugService | None = None) -> None:
        self.repository = repository or SQLRepository()
        self.slug_service = slug_service or SlugService(self.repository)

    def validate_admin_password(self, password: str | None) -> bool:
        return constant_time_equals(password, get_settings().admin_password)

    def get_submissions(self, status: str | None = None) -> list[Submission]:
        status_value = (status or "").strip().lower() or None
        if status_value and status_value not in SUBMISSION_STATUSES:
            raise ValidationError(f"Unknown status '{status_value}'", field="status")
        return self.repository.list_submissions(status_value)

    def submission_counts(self) -> dict[str, int]:
        counts = {status: 0 for status in SUBMISSION_STATUSES}
        counts.update(self.repository.count_submissions_by_status())
        return counts

    def _require(self, submission_id: str) -> Submission:
        submission = self.repository.get_submission(submission_id)
        if not submission:
            raise NotFoundError("submission", submission_id)
        return submission

    def _product_slug(self, submission: Submission, name: str) -> str:
        # The submission's own slug is reserved for the product it becomes.
        if submission.slug and not self.repository.product_slug_exists(submission.slug):
            return submission.slug
        return self.slug_service.generate_product_slug(name)

    def approve_submission(self, submission_id: str, updated: Optional[dict] = None) -> Product:
        """Copy a submission into products (status active) and mark it approved."""
        logger.info("Starting approval for submission %s", submission_id)
        submission = self._require(submission_id)
        if submission.status != "pending":
            logger.warning("Refusing to approve submission %s with status %s", submission_id, submission.status)
            raise ValidationError(f"Submission is already {submission.status}", field="status")
        updated = updated or {}
        name = updated.get("name") or submission.name
        product_data = {
            "name": name,
            "description": updated.get("description") or submission.description,
            "url": updated.get("url") or submission.url,
            "category_id": updated["category_id"] if "category_id" in updated else submission.category_id,
            "category_name": updated.get("category_name") or submission.category_name,
            "pricing": updated.get("pricing") or submission.pricing,
            "logo_url": submission.logo_url,
            "image_url": submission.image_url,
            "status": "active",
            "featured": False,
            "slug": self._product_slug(submission, name),
        }
        try:
            product = self.repository.create_product(product_data)
        except IntegrityError as exc:
            logger.error("Error creating product for submission %s", submission_id, exc_info=True)
            raise SlugConflictError(product_data["slug"]) from exc
        logger.info("Product %s created from submission %s", product.id, submission_id)
        self.repository.update_submission(submission_id, {"status": "approved"})
        logger.info("Submission %s marked approved", submission_id)
        return product

    def reject_submission(self, submission_id: str, rejection_reason: str | None = None) -> Submission:
        result = self.repository.update_submission(
            submission_id,
            {"status": "rejected", "rejection_reason": (rejection_reason or "").strip() or None},
        )
        if not result:
            raise NotFoundError("submission", submission_id)
        logger.info("Submission %s rejected", submission_id)
        return result

    def update_submission(self, submission_id: str, data: dict) -> Submission:
        """Apply an admin edit; provided fields go through the public form rules."""
        changes = {}
        if "name" in data:
            changes["name"] = validate_name(data["name"])
        if "description" in data:
            changes["description"] = validate_description(data["description"])
        if "url" in data:
            changes["url"] = validate_url(data["url"], get_settings().blocked_hosts)
        if "pricing" in data:
            changes["pricing"] = validate_pricing(data["pricing"])
        if "category_name" in data:
            changes["category_name"] = resolve_category(data["category_name"])
            category = self.repository.get_category_by_name(changes["category_name"])
            changes["category_id"] = category.id if category else None
        elif "category_id" in data:
            changes["category_id"] = data["category_id"]
        result = self.repository.update_submission(submission_id, changes)
        if not result:
            raise NotFoundError("submission", submission_id)
        logger.info("Submission %s updated (%s)", submission_id, ", ".join(sorted(changes)) or "no fields")
        return result
