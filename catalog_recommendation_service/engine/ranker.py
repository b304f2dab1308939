"""Rank unseen catalog content for an affinity profile."""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Set

from catalog_recommendation_service.engine.types import (
    AffinityProfile,
    ContentItem,
    ContentType,
    RecommendationPath,
    RecommendationResult,
    ScoredCandidate,
)
from catalog_recommendation_service.ml.text_processor import build_document_text
from catalog_recommendation_service.ml.tfidf_corpus import TfidfCorpus

logger = logging.getLogger(__name__)

FAVORITE_GENRE_COUNT = 3
FAVORITE_KEYWORD_COUNT = 5
GENRE_BONUS = 0.2
KEYWORD_BONUS = 0.1
POPULARITY_NORMALIZER = 20.0


def top_weighted_ids(weights: Dict[int, int], n: int) -> List[int]:
    """
    Return the n ids with the highest weight, ties broken by id ascending.

    Args:
        weights: id -> accumulated weight
        n: Number of ids to keep

    Returns:
        Ordered list of at most n ids
    """
    ranked = sorted(weights.items(), key=lambda entry: (-entry[1], entry[0]))
    return [tag_id for tag_id, _ in ranked[:n]]


def popularity_order(items: Iterable[ContentItem]) -> List[ContentItem]:
    """Sort by popularity descending, then id ascending."""
    return sorted(items, key=lambda item: (-item.popularity, item.id))


# noinspection PyMethodMayBeStatic
class Ranker:
    """
    Score and order candidate content for an AffinityProfile.

    Profiles without any genre or keyword signal get the popularity list
    (cold start). Otherwise candidates sharing a favorite genre are scored by
    TF-IDF relevance to the liked items plus genre, keyword and popularity
    terms, and any shortfall is backfilled by popularity.
    """

    def __init__(
            self,
            favorite_genre_count: int = FAVORITE_GENRE_COUNT,
            favorite_keyword_count: int = FAVORITE_KEYWORD_COUNT,
            genre_bonus: float = GENRE_BONUS,
            keyword_bonus: float = KEYWORD_BONUS,
            popularity_normalizer: float = POPULARITY_NORMALIZER,
            average_similarity_weight: float = 1.0,
            max_similarity_weight: float = 1.0,
            max_workers: int = 1,
            scoring_chunk_size: int = 500
    ):
        """
        Initialize the ranker.

        Args:
            favorite_genre_count: Number of top genres used for the genre gate
            favorite_keyword_count: Number of top keywords that earn a bonus
            genre_bonus: Score added per favorite genre matched
            keyword_bonus: Score added per favorite keyword matched
            popularity_normalizer: Popularity is divided by this and added uncapped
            average_similarity_weight: Weight of the average TF-IDF relevance term
            max_similarity_weight: Weight of the maximum TF-IDF relevance term
            max_workers: Worker threads for candidate scoring
            scoring_chunk_size: Candidates per scoring chunk
        """
        if popularity_normalizer <= 0:
            raise ValueError("popularity_normalizer must be positive")

        self.favorite_genre_count = favorite_genre_count
        self.favorite_keyword_count = favorite_keyword_count
        self.genre_bonus = genre_bonus
        self.keyword_bonus = keyword_bonus
        self.popularity_normalizer = popularity_normalizer
        self.average_similarity_weight = average_similarity_weight
        self.max_similarity_weight = max_similarity_weight
        self.max_workers = max(1, max_workers)
        self.scoring_chunk_size = max(1, scoring_chunk_size)

    def rank(
            self,
            profile: AffinityProfile,
            corpus: Iterable[ContentItem],
            limit: int,
            type_filter: Optional[ContentType] = None
    ) -> RecommendationResult:
        """
        Rank the corpus for a profile.

        Never raises: a corpus that cannot be read, or a scoring failure,
        degrades to the popularity list, and failing that to an empty list.

        Args:
            profile: Affinity profile from the SignalExtractor
            corpus: Catalog content; excluded items are filtered here
            limit: Maximum number of items to return
            type_filter: Optional content type restriction

        Returns:
            RecommendationResult
        """
        items: List[ContentItem] = []
        try:
            self._materialize(corpus, items)
        except Exception as e:
            logger.error(
                f"Failed to read content corpus after {len(items)} items: {e}", exc_info=True
            )
            return self._degraded_fallback(profile, items, limit, type_filter)

        try:
            if profile.is_empty:
                logger.info("No affinity signal, using popularity ranking")
                return self.cold_start(profile, items, limit, type_filter)

            return self._rank_scored(profile, items, limit, type_filter)
        except Exception as e:
            logger.error(f"Ranking failed, falling back to popularity: {e}", exc_info=True)
            return self._degraded_fallback(profile, items, limit, type_filter)

    def cold_start(
            self,
            profile: AffinityProfile,
            items: Sequence[ContentItem],
            limit: int,
            type_filter: Optional[ContentType] = None
    ) -> RecommendationResult:
        """Top items by popularity that the profile has not seen."""
        eligible = self._eligible(items, profile.excluded_ids, type_filter)
        return RecommendationResult(
            items=popularity_order(eligible)[:limit],
            path=RecommendationPath.COLD_START,
            skipped_entries=profile.skipped_entries,
        )

    def score_candidates(
            self,
            profile: AffinityProfile,
            candidates: Sequence[ContentItem],
            favorite_genres: Set[int],
            favorite_keywords: Set[int]
    ) -> List[ScoredCandidate]:
        """
        Compute composite scores for candidates.

        The TF-IDF corpus over the profile's reference items is fitted once
        before any candidate is scored; candidate chunks are then scored
        independently and merged in candidate order.

        Args:
            profile: Affinity profile (supplies reference items)
            candidates: Genre-gated candidates
            favorite_genres: Top genre ids
            favorite_keywords: Top keyword ids

        Returns:
            ScoredCandidates in the same order as candidates
        """
        if not candidates:
            return []

        tfidf_corpus = TfidfCorpus.from_items(profile.reference_items)

        chunks = [
            candidates[start:start + self.scoring_chunk_size]
            for start in range(0, len(candidates), self.scoring_chunk_size)
        ]

        def score_chunk(chunk: Sequence[ContentItem]) -> List[ScoredCandidate]:
            return self._score_chunk(chunk, tfidf_corpus, favorite_genres, favorite_keywords)

        if len(chunks) == 1 or self.max_workers == 1:
            chunk_results = [score_chunk(chunk) for chunk in chunks]
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(chunks))) as executor:
                chunk_results = list(executor.map(score_chunk, chunks))

        return [scored for chunk_result in chunk_results for scored in chunk_result]

    def _score_chunk(
            self,
            chunk: Sequence[ContentItem],
            tfidf_corpus: TfidfCorpus,
            favorite_genres: Set[int],
            favorite_keywords: Set[int]
    ) -> List[ScoredCandidate]:
        texts = [build_document_text(item) for item in chunk]
        average_similarity, max_similarity = tfidf_corpus.similarity_scores(texts)

        scored = []
        for idx, item in enumerate(chunk):
            genre_matches = len(item.genre_ids & favorite_genres)
            keyword_matches = len(item.keyword_ids & favorite_keywords)

            score = (
                self.average_similarity_weight * float(average_similarity[idx]) +
                self.max_similarity_weight * float(max_similarity[idx]) +
                self.genre_bonus * genre_matches +
                self.keyword_bonus * keyword_matches +
                item.popularity / self.popularity_normalizer
            )
            scored.append(ScoredCandidate(content_id=item.id, score=score, item=item))

        return scored

    def _rank_scored(
            self,
            profile: AffinityProfile,
            items: Sequence[ContentItem],
            limit: int,
            type_filter: Optional[ContentType]
    ) -> RecommendationResult:
        favorite_genres = set(top_weighted_ids(profile.genre_weights, self.favorite_genre_count))
        favorite_keywords = set(top_weighted_ids(profile.keyword_weights, self.favorite_keyword_count))

        eligible = self._eligible(items, profile.excluded_ids, type_filter)
        candidates = [item for item in eligible if item.genre_ids & favorite_genres]

        logger.info(
            f"Scoring {len(candidates)} of {len(eligible)} eligible items "
            f"(favorite genres: {sorted(favorite_genres)})"
        )

        scored = self.score_candidates(profile, candidates, favorite_genres, favorite_keywords)
        scored.sort(key=ScoredCandidate.sort_key)
        selected = [candidate.item for candidate in scored[:limit]]

        backfill = self._backfill(eligible, selected, limit)
        if backfill:
            logger.info(f"Backfilled {len(backfill)} items by popularity")

        return RecommendationResult(
            items=selected + backfill,
            path=RecommendationPath.SCORED,
            scored_count=len(selected),
            backfilled_count=len(backfill),
            skipped_entries=profile.skipped_entries,
        )

    def _backfill(
            self,
            eligible: Sequence[ContentItem],
            selected: Sequence[ContentItem],
            limit: int
    ) -> List[ContentItem]:
        """Popularity-ordered eligible items not already selected."""
        shortfall = limit - len(selected)
        if shortfall <= 0:
            return []

        selected_ids = {item.id for item in selected}
        remaining = [item for item in eligible if item.id not in selected_ids]
        return popularity_order(remaining)[:shortfall]

    def _degraded_fallback(
            self,
            profile: AffinityProfile,
            items: Sequence[ContentItem],
            limit: int,
            type_filter: Optional[ContentType]
    ) -> RecommendationResult:
        if items:
            try:
                return self.cold_start(profile, items, limit, type_filter)
            except Exception as e:
                logger.error(f"Popularity fallback failed: {e}", exc_info=True)

        return RecommendationResult(
            items=[],
            path=RecommendationPath.DEGRADED,
            skipped_entries=profile.skipped_entries,
        )

    def _materialize(self, corpus: Iterable[ContentItem], items: List[ContentItem]) -> None:
        """
        Read the corpus once into items, dropping duplicate ids (first wins).

        Items read before a failure stay in items.
        """
        seen: Set[int] = set()
        for item in corpus:
            if item.id in seen:
                continue
            seen.add(item.id)
            items.append(item)

    def _eligible(
            self,
            items: Iterable[ContentItem],
            excluded_ids: Set[int],
            type_filter: Optional[ContentType]
    ) -> List[ContentItem]:
        return [
            item for item in items
            if item.id not in excluded_ids
            and (type_filter is None or item.type == type_filter)
        ]

