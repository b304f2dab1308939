"""Turn a profile's reviews and watchlist into an affinity profile."""
import logging
from typing import Iterable, Union

from catalog_recommendation_service.engine.types import AffinityProfile, ContentItem, ReviewSignal

logger = logging.getLogger(__name__)

# Lowest rating that counts as "liked"
LIKED_RATING_THRESHOLD = 3
MIN_RATING = 1
MAX_RATING = 5

WatchlistInput = Union[ContentItem, int, None]


class SignalExtractor:
    """
    Build an AffinityProfile from explicit (reviews) and implicit
    (watchlist) signal.

    Every reviewed or watchlisted content id is excluded from the
    recommendations, whatever its rating. Genre and keyword weight comes
    only from reviews rated 3 or higher and from resolvable watchlist items.
    """

    def __init__(self, liked_threshold: int = LIKED_RATING_THRESHOLD):
        self.liked_threshold = liked_threshold

    def extract(
            self,
            reviews: Iterable[ReviewSignal],
            watchlist: Iterable[WatchlistInput]
    ) -> AffinityProfile:
        """
        Extract the affinity profile.

        Args:
            reviews: Reviews joined with their content
            watchlist: Watchlist items, either resolved ContentItems or bare
                content ids whose content could not be resolved

        Returns:
            AffinityProfile with weight maps, exclusion set and reference items
        """
        profile = AffinityProfile()
        seen_reference_ids = set()

        for review in reviews:
            if review is None or review.content_id is None:
                logger.warning("Skipping review without a content reference")
                profile.skipped_entries += 1
                continue

            profile.excluded_ids.add(review.content_id)

            if not self._is_valid_rating(review.rating):
                logger.warning(
                    f"Skipping review of content {review.content_id} with invalid rating {review.rating!r}"
                )
                profile.skipped_entries += 1
                continue

            if review.content is None:
                logger.warning(f"Skipping review of unresolved content {review.content_id}")
                profile.skipped_entries += 1
                continue

            if review.rating >= self.liked_threshold:
                self._accumulate(profile, review.content, seen_reference_ids)

        for entry in watchlist:
            if isinstance(entry, ContentItem):
                profile.excluded_ids.add(entry.id)
                self._accumulate(profile, entry, seen_reference_ids)
            elif isinstance(entry, int) and not isinstance(entry, bool):
                logger.warning(f"Skipping unresolved watchlist content {entry}")
                profile.excluded_ids.add(entry)
                profile.skipped_entries += 1
            else:
                logger.warning(f"Skipping malformed watchlist entry {entry!r}")
                profile.skipped_entries += 1

        logger.debug(
            f"Affinity profile: {len(profile.genre_weights)} genres, "
            f"{len(profile.keyword_weights)} keywords, {len(profile.excluded_ids)} excluded, "
            f"{profile.skipped_entries} skipped"
        )
        return profile

    def _is_valid_rating(self, rating) -> bool:
        if isinstance(rating, bool) or not isinstance(rating, int):
            return False
        return MIN_RATING <= rating <= MAX_RATING

    def _accumulate(self, profile: AffinityProfile, item: ContentItem, seen_reference_ids: set) -> None:
        """Add one liked or watchlisted item's tags to the weight maps."""
        for genre_id in item.genre_ids:
            profile.genre_weights[genre_id] = profile.genre_weights.get(genre_id, 0) + 1

        for keyword_id in item.keyword_ids:
            profile.keyword_weights[keyword_id] = profile.keyword_weights.get(keyword_id, 0) + 1

        if item.id not in seen_reference_ids:
            seen_reference_ids.add(item.id)
            profile.reference_items.append(item)
