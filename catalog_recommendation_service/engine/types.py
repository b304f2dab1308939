"""Value types passed between the recommendation engine components."""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple


class ContentType(str, Enum):
    """Kind of catalog item."""

    MOVIE = "movie"
    SERIES = "series"

    @classmethod
    def parse(cls, value: "str | ContentType | None") -> Optional["ContentType"]:
        """
        Parse a type filter value.

        Args:
            value: "movie", "series", an existing ContentType or None

        Returns:
            ContentType, or None when no filter was given

        Raises:
            ValueError: If the value is not a known content type
        """
        if value is None or isinstance(value, ContentType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown content type: {value!r}") from None


@dataclass(frozen=True)
class Tag:
    """Genre or keyword tag (id + display name)."""

    id: int
    name: str


@dataclass(frozen=True)
class ContentItem:
    """Read-only view of a catalog item as seen by the engine."""

    id: int
    title: str
    type: ContentType
    overview: str = ""
    genres: Tuple[Tag, ...] = ()
    keywords: Tuple[Tag, ...] = ()
    popularity: float = 0.0
    poster_path: Optional[str] = None
    release_date: Optional[date] = None
    vote_average: float = 0.0

    @property
    def genre_ids(self) -> Set[int]:
        return {genre.id for genre in self.genres}

    @property
    def keyword_ids(self) -> Set[int]:
        return {keyword.id for keyword in self.keywords}


@dataclass(frozen=True)
class ReviewSignal:
    """A review joined with its content.

    ``content`` is None when the referenced item could not be resolved.
    """

    content_id: Optional[int]
    rating: Optional[int]
    content: Optional[ContentItem] = None


@dataclass
class AffinityProfile:
    """Per-call taste profile derived from reviews and watchlist."""

    genre_weights: Dict[int, int] = field(default_factory=dict)
    keyword_weights: Dict[int, int] = field(default_factory=dict)
    excluded_ids: Set[int] = field(default_factory=set)
    # Liked or watchlisted items, first-seen order, unique by id
    reference_items: List[ContentItem] = field(default_factory=list)
    skipped_entries: int = 0

    @property
    def is_empty(self) -> bool:
        """True when there is no genre or keyword signal at all."""
        return not self.genre_weights and not self.keyword_weights


@dataclass(frozen=True)
class ScoredCandidate:
    """Candidate with its composite score, used only for sorting."""

    content_id: int
    score: float
    item: ContentItem

    def sort_key(self) -> Tuple[float, int]:
        return -self.score, self.content_id


@dataclass(frozen=True)
class ContentSummary:
    """Display subset of a content item."""

    id: int
    title: str
    type: str
    poster_path: Optional[str] = None
    release_date: Optional[date] = None
    vote_average: float = 0.0

    @classmethod
    def from_item(cls, item: ContentItem) -> "ContentSummary":
        return cls(
            id=item.id,
            title=item.title,
            type=item.type.value,
            poster_path=item.poster_path,
            release_date=item.release_date,
            vote_average=item.vote_average,
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type,
            'poster_path': self.poster_path,
            'release_date': self.release_date.isoformat() if self.release_date else None,
            'vote_average': self.vote_average,
        }


class RecommendationPath(str, Enum):
    """Which branch produced a recommendation list."""

    SCORED = "scored"
    COLD_START = "cold_start"
    DEGRADED = "degraded"


@dataclass
class RecommendationResult:
    """Ordered recommendations plus how they were produced."""

    items: List[ContentItem]
    path: RecommendationPath
    scored_count: int = 0
    backfilled_count: int = 0
    skipped_entries: int = 0

    @property
    def content_ids(self) -> List[int]:
        return [item.id for item in self.items]

    def summaries(self) -> List[ContentSummary]:
        return [ContentSummary.from_item(item) for item in self.items]
