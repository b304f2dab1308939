"""Catalog content (movies and series)"""
from datetime import UTC, datetime

from sqlalchemy import Column, Date, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.dialects.mysql import JSON

from catalog_recommendation_service.models.base import Base


class Content(Base):
    """A movie or series in the catalog.

    Populated by the ingestion pipeline from the third-party metadata
    source. Genres and keywords are stored as lists of
    ``{"id": int, "name": str}`` objects.
    """
    __tablename__ = 'content'

    id = Column(Integer, primary_key=True, autoincrement=True)
    tmdb_id = Column(Integer, nullable=False, unique=True)
    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    overview = Column(Text, nullable=False, default="")
    poster_path = Column(String(255), nullable=True)
    release_date = Column(Date, nullable=True)
    genres = Column(JSON, nullable=True)
    keywords = Column(JSON, nullable=True)
    popularity = Column(Float, nullable=False, default=0.0)
    vote_average = Column(Float, nullable=False, default=0.0)

    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("idx_content_type", "type"),
        Index("idx_content_popularity", "popularity"),
    )

    def __repr__(self):
        return f"<Content(id={self.id}, title='{self.title}', type='{self.type}')>"
