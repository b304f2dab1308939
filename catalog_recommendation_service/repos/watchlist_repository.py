"""Repository for reading a profile's watchlist."""

import logging
from typing import List, Union

from sqlalchemy.orm import Session

from catalog_recommendation_service.engine.types import ContentItem
from catalog_recommendation_service.models import WatchlistEntry
from catalog_recommendation_service.repos.content_repository import to_content_item

logger = logging.getLogger(__name__)


class WatchlistRepository:
    """
    Read-only access to watchlist ("My List") entries.
    """

    def __init__(self, db: Session):
        self.db = db

    # noinspection PyTypeChecker
    def get_watchlist_for_profile(self, profile_id: int) -> List[Union[ContentItem, int]]:
        """
        Get a profile's watchlist in list order.

        Args:
            profile_id: Profile ID

        Returns:
            Resolved ContentItems, or the bare content id for entries whose
            content could not be resolved
        """
        entries = (
            self.db.query(WatchlistEntry)
            .filter(WatchlistEntry.profile_id == profile_id)
            .order_by(WatchlistEntry.position, WatchlistEntry.id)
            .all()
        )

        watchlist: List[Union[ContentItem, int]] = []
        for entry in entries:
            item = to_content_item(entry.content) if entry.content is not None else None
            watchlist.append(item if item is not None else entry.content_id)

        logger.debug(f"Loaded {len(watchlist)} watchlist entries for profile {profile_id}")
        return watchlist
