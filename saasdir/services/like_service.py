"""Like use cases: toggle a user's like on a product and read like status."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from saasdir.domain.likes import LOGIN_REQUIRED, TOGGLE, LikeResult, LikeState, LikeStatus
from saasdir.repositories.sql_repository import SQLRepository

logger = logging.getLogger(__name__)


class LikeService:
    """Toggles likes and reports the resulting state.

    The caller passes the user id explicitly; `None` means anonymous. The
    sequence lookup -> insert/delete -> re-read count is not wrapped in a
    transaction, so a failure late in the sequence can leave the like written
    while the reply reports an error.
    """

    def __init__(self, repository: SQLRepository | None = None) -> None:
        self.repository = repository or SQLRepository()

    def toggle_like(self, product_id: str, user_id: str | None) -> LikeResult:
        if not user_id:
            return LikeResult(success=False, is_liked=False, like_count=0, error=LOGIN_REQUIRED)
        try:
            return self._toggle(product_id, user_id)
        except Exception:
            logger.exception("Unexpected error toggling like for product %s", product_id)
            return LikeResult(success=False, is_liked=False, like_count=0, error="An unexpected error occurred")

    def _toggle(self, product_id: str, user_id: str) -> LikeResult:
        try:
            existing = self.repository.find_like(user_id, product_id)
        except SQLAlchemyError:
            logger.error("Error checking existing like", exc_info=True)
            return LikeResult(success=False, is_liked=False, like_count=0, error="Failed to check like status")

        target = TOGGLE[LikeState.from_flag(existing is not None)]
        if target is LikeState.LIKED:
            try:
                self.repository.add_like(user_id, product_id)
            except SQLAlchemyError:
                logger.error("Error adding like", exc_info=True)
                return LikeResult(success=False, is_liked=False, like_count=0, error="Failed to add like")
        else:
            try:
                self.repository.remove_like(user_id, product_id)
            except SQLAlchemyError:
                logger.error("Error removing like", exc_info=True)
                return LikeResult(success=False, is_liked=True, like_count=0, error="Failed to remove like")

        try:
            like_count = self.repository.get_product_like_count(product_id)
        except SQLAlchemyError:
            logger.error("Error fetching updated like count", exc_info=True)
            like_count = None
        if like_count is None:
            return LikeResult(
                success=False,
                is_liked=target.is_liked,
                like_count=0,
                error="Failed to get updated like count",
            )
        return LikeResult(success=True, is_liked=target.is_liked, like_count=max(0, like_count))

    def get_like_status(self, product_id: str, user_id: str | None) -> LikeStatus:
        try:
            is_liked = False
            if user_id:
                is_liked = self.repository.find_like(user_id, product_id) is not None
            like_count = self.repository.get_product_like_count(product_id) or 0
            return LikeStatus(is_liked=is_liked, like_count=max(0, like_count))
        except SQLAlchemyError:
            logger.error("Error getting product like status", exc_info=True)
            return LikeStatus(is_liked=False, like_count=0)

    def get_user_liked_products(self, user_id: str | None) -> list[str]:
        if not user_id:
            return []
        try:
            return self.repository.list_liked_product_ids(user_id)
        except SQLAlchemyError:
            logger.error("Error fetching user liked products", exc_info=True)
            return []
