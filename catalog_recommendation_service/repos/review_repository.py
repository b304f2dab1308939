"""Repository for reading a profile's reviews."""

import logging
from typing import List

from sqlalchemy.orm import Session

from catalog_recommendation_service.engine.types import ReviewSignal
from catalog_recommendation_service.models import Review
from catalog_recommendation_service.repos.content_repository import to_content_item

logger = logging.getLogger(__name__)


class ReviewRepository:
    """
    Read-only access to reviews, joined with their content.
    """

    def __init__(self, db: Session):
        self.db = db

    # noinspection PyTypeChecker
    def get_reviews_for_profile(self, profile_id: int) -> List[ReviewSignal]:
        """
        Get every review written by a profile.

        Args:
            profile_id: Profile ID

        Returns:
            ReviewSignals ordered by review id; ``content`` is None when the
            referenced content no longer exists
        """
        reviews = (
            self.db.query(Review)
            .filter(Review.profile_id == profile_id)
            .order_by(Review.id)
            .all()
        )

        signals = []
        for review in reviews:
            content = to_content_item(review.content) if review.content is not None else None
            signals.append(
                ReviewSignal(content_id=review.content_id, rating=review.rating, content=content)
            )

        logger.debug(f"Loaded {len(signals)} reviews for profile {profile_id}")
        return signals
