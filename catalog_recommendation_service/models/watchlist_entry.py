"""Watchlist ("My List") membership."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from catalog_recommendation_service.models.base import Base


class WatchlistEntry(Base):
    """One content item on a profile's watchlist.

    Entries are ordered per profile by ``position``.
    """

    __tablename__ = "watchlist_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(Integer, nullable=False)
    content_id = Column(Integer, ForeignKey("content.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    added_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    content = relationship("Content", lazy="joined")

    __table_args__ = (
        UniqueConstraint("profile_id", "content_id", name="uq_watchlist_profile_content"),
        Index("idx_watchlist_profile", "profile_id", "position"),
    )

    def __repr__(self):
        return f"<WatchlistEntry(profile_id={self.profile_id}, content_id={self.content_id})>"
