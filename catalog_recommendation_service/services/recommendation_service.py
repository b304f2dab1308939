"""Service for personalized catalog recommendations."""
import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from catalog_recommendation_service.config import (
    get_default_limit,
    get_max_workers,
    get_scoring_chunk_size,
)
from catalog_recommendation_service.engine.ranker import Ranker
from catalog_recommendation_service.engine.signal_extractor import SignalExtractor
from catalog_recommendation_service.engine.types import (
    AffinityProfile,
    ContentSummary,
    ContentType,
    RecommendationPath,
    RecommendationResult,
)
from catalog_recommendation_service.exceptions import InvalidRecommendationRequest
from catalog_recommendation_service.models.database import SessionLocal
from catalog_recommendation_service.repos import (
    ContentRepository,
    ReviewRepository,
    WatchlistRepository,
)

logger = logging.getLogger(__name__)


def validate_request(limit, type_filter) -> Tuple[int, Optional[ContentType]]:
    """
    Validate caller input before the engine runs.

    Args:
        limit: Requested number of recommendations
        type_filter: None, "movie", "series" or a ContentType

    Returns:
        (limit, ContentType or None)

    Raises:
        InvalidRecommendationRequest: For a non-positive or non-integer
            limit, or an unknown type filter
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidRecommendationRequest(f"limit must be an integer, got {limit!r}")
    if limit < 1:
        raise InvalidRecommendationRequest(f"limit must be positive, got {limit}")

    try:
        content_type = ContentType.parse(type_filter)
    except ValueError as e:
        raise InvalidRecommendationRequest(str(e)) from e

    return limit, content_type


class RecommendationService:
    """
    Recommend unseen catalog content for a viewer profile.

    Reads the profile's reviews and watchlist plus the content corpus,
    extracts an affinity profile and ranks the corpus. Upstream read
    failures degrade the result instead of raising; only invalid input is
    rejected.
    """

    def __init__(
            self,
            session_factory: Optional[Callable[[], Session]] = None,
            signal_extractor: Optional[SignalExtractor] = None,
            ranker: Optional[Ranker] = None
    ):
        """
        Initialize the recommendation service.

        Args:
            session_factory: Callable returning a database session
                (default: SessionLocal)
            signal_extractor: SignalExtractor to use
            ranker: Ranker to use (default: configured worker count and chunk size)
        """
        self.session_factory = session_factory or SessionLocal
        self.signal_extractor = signal_extractor or SignalExtractor()
        self.ranker = ranker or Ranker(
            max_workers=get_max_workers(),
            scoring_chunk_size=get_scoring_chunk_size()
        )

    def get_recommendations(
            self,
            profile_id: int,
            limit: Optional[int] = None,
            type_filter=None
    ) -> List[ContentSummary]:
        """
        Get recommendations for a profile.

        Args:
            profile_id: Profile ID
            limit: Number of recommendations (default from config, 10)
            type_filter: Optional "movie" or "series"

        Returns:
            Ordered list of ContentSummary

        Raises:
            InvalidRecommendationRequest: For invalid limit or type filter
        """
        return self.recommend(profile_id, limit=limit, type_filter=type_filter).summaries()

    def recommend(
            self,
            profile_id: int,
            limit: Optional[int] = None,
            type_filter=None
    ) -> RecommendationResult:
        """
        Same as get_recommendations, returning the full RecommendationResult
        so callers can tell which path produced the list.
        """
        if limit is None:
            limit = get_default_limit()
        limit, content_type = validate_request(limit, type_filter)

        logger.info(f"Recommending for profile {profile_id} (limit={limit}, type={content_type})")

        try:
            db = self.session_factory()
        except Exception as e:
            logger.error(f"Could not open database session: {e}", exc_info=True)
            return RecommendationResult(items=[], path=RecommendationPath.DEGRADED)

        try:
            result = self._recommend(db, profile_id, limit, content_type)
        except Exception as e:
            logger.error(f"Recommendation failed for profile {profile_id}: {e}", exc_info=True)
            result = RecommendationResult(items=[], path=RecommendationPath.DEGRADED)
        finally:
            db.close()

        logger.info(
            f"Returning {len(result.items)} recommendations for profile {profile_id} "
            f"via {result.path.value} (scored={result.scored_count}, "
            f"backfilled={result.backfilled_count}, skipped={result.skipped_entries})"
        )
        return result

    def _recommend(
            self,
            db: Session,
            profile_id: int,
            limit: int,
            content_type: Optional[ContentType]
    ) -> RecommendationResult:
        reviews = self._read(
            db,
            lambda: ReviewRepository(db).get_reviews_for_profile(profile_id),
            f"reviews for profile {profile_id}"
        )
        watchlist = self._read(
            db,
            lambda: WatchlistRepository(db).get_watchlist_for_profile(profile_id),
            f"watchlist for profile {profile_id}"
        )

        profile = self.signal_extractor.extract(reviews or [], watchlist or [])

        content_repo = ContentRepository(db)
        if reviews is None or watchlist is None:
            # Exclusion set is incomplete: popularity list only
            return self._popularity_fallback(db, content_repo, profile, limit, content_type)

        corpus = self._read(
            db,
            lambda: content_repo.get_corpus(content_type, exclude_ids=profile.excluded_ids),
            "content corpus"
        )
        if corpus is None:
            return self._popularity_fallback(db, content_repo, profile, limit, content_type)

        return self.ranker.rank(profile, corpus, limit, content_type)

    def _popularity_fallback(
            self,
            db: Session,
            content_repo: ContentRepository,
            profile: AffinityProfile,
            limit: int,
            content_type: Optional[ContentType]
    ) -> RecommendationResult:
        """Narrowest safe answer when the profile or corpus could not be read."""
        popular = self._read(
            db,
            lambda: content_repo.get_popular(limit, content_type, exclude_ids=profile.excluded_ids),
            "popular content"
        )
        if popular is None:
            return RecommendationResult(
                items=[],
                path=RecommendationPath.DEGRADED,
                skipped_entries=profile.skipped_entries,
            )

        return RecommendationResult(
            items=popular,
            path=RecommendationPath.COLD_START,
            skipped_entries=profile.skipped_entries,
        )

    def _read(self, db: Session, query: Callable, description: str):
        """Run one read-only query; log and return None on failure."""
        try:
            return query()
        except Exception as e:
            logger.error(f"Failed to load {description}: {e}", exc_info=True)
            try:
                db.rollback()
            except Exception as rollback_error:
                logger.warning(f"Rollback failed: {rollback_error}")
            return None
