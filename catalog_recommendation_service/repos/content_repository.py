"""Read-only repository over the content corpus."""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from catalog_recommendation_service.engine.types import ContentItem, ContentType, Tag
from catalog_recommendation_service.models import Content

logger = logging.getLogger(__name__)

# Stored type values from the ingestion pipeline that map onto ContentType
_TYPE_ALIASES = {"tv": ContentType.SERIES}


def _parse_tags(raw_tags) -> tuple[Tag, ...]:
    """Convert stored ``[{"id": .., "name": ..}]`` JSON to unique Tags."""
    tags: list[Tag] = []
    seen: set[int] = set()
    for raw in raw_tags or []:
        if not isinstance(raw, dict) or raw.get("id") is None:
            continue
        try:
            tag_id = int(raw["id"])
        except (TypeError, ValueError):
            continue
        if tag_id in seen:
            continue
        seen.add(tag_id)
        tags.append(Tag(id=tag_id, name=str(raw.get("name") or "")))
    return tuple(tags)


def to_content_item(content: Content) -> ContentItem | None:
    """
    Map a Content row to the engine's ContentItem.

    Args:
        content: Content model instance

    Returns:
        ContentItem, or None if the row has an unknown type
    """
    raw_type = (content.type or "").lower()
    content_type = _TYPE_ALIASES.get(raw_type)
    if content_type is None:
        try:
            content_type = ContentType(raw_type)
        except ValueError:
            logger.warning(f"Content {content.id} has unknown type {content.type!r}")
            return None

    return ContentItem(
        id=content.id,
        title=content.title or "",
        type=content_type,
        overview=content.overview or "",
        genres=_parse_tags(content.genres),
        keywords=_parse_tags(content.keywords),
        popularity=max(0.0, float(content.popularity or 0.0)),
        poster_path=content.poster_path,
        release_date=content.release_date,
        vote_average=float(content.vote_average or 0.0),
    )


def _to_items(rows: Iterable[Content]) -> List[ContentItem]:
    items = []
    for row in rows:
        item = to_content_item(row)
        if item is not None:
            items.append(item)
    return items


class ContentRepository:
    """
    Repository for reading catalog content.
    """

    def __init__(self, db: Session):
        self.db = db

    def _filtered_query(
            self,
            type_filter: Optional[ContentType] = None,
            exclude_ids: Optional[Iterable[int]] = None
    ):
        query = self.db.query(Content)

        if type_filter is not None:
            stored_types = [type_filter.value]
            stored_types.extend(alias for alias, target in _TYPE_ALIASES.items() if target == type_filter)
            query = query.filter(Content.type.in_(stored_types))

        excluded = list(exclude_ids or [])
        if excluded:
            query = query.filter(Content.id.notin_(excluded))

        return query

    def get_corpus(
            self,
            type_filter: Optional[ContentType] = None,
            exclude_ids: Optional[Iterable[int]] = None
    ) -> List[ContentItem]:
        """
        Get all content, optionally filtered by type and excluding ids.

        Args:
            type_filter: Restrict to one content type
            exclude_ids: Content ids to leave out

        Returns:
            List of ContentItems ordered by id
        """
        rows = self._filtered_query(type_filter, exclude_ids).order_by(Content.id).all()
        return _to_items(rows)

    def get_popular(
            self,
            limit: int,
            type_filter: Optional[ContentType] = None,
            exclude_ids: Optional[Iterable[int]] = None
    ) -> List[ContentItem]:
        """
        Get the most popular content.

        Args:
            limit: Maximum number of items
            type_filter: Restrict to one content type
            exclude_ids: Content ids to leave out

        Returns:
            List of ContentItems ordered by popularity desc, id asc
        """
        rows = (
            self._filtered_query(type_filter, exclude_ids)
            .order_by(Content.popularity.desc(), Content.id.asc())
            .limit(limit)
            .all()
        )
        return _to_items(rows)
