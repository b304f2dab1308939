"""SQLAlchemy models"""

from catalog_recommendation_service.models.base import Base
from catalog_recommendation_service.models.content import Content
from catalog_recommendation_service.models.review import Review
from catalog_recommendation_service.models.watchlist_entry import WatchlistEntry

__all__ = [
    "Base",
    "Content",
    "Review",
    "WatchlistEntry",
]
