"""Profile reviews of catalog content."""

from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from catalog_recommendation_service.models.base import Base


class Review(Base):
    """A profile's star rating (1-5) for one content item.

    One review per profile and content.
    """

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(Integer, nullable=False)
    content_id = Column(Integer, ForeignKey("content.id"), nullable=False)

    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    content = relationship("Content", lazy="joined")

    __table_args__ = (
        UniqueConstraint("profile_id", "content_id", name="uq_review_profile_content"),
        Index("idx_review_profile", "profile_id"),
    )

    def __repr__(self):
        return (
            f"<Review(profile_id={self.profile_id}, content_id={self.content_id}, "
            f"rating={self.rating})>"
        )
