"""Repository classes"""

from catalog_recommendation_service.repos.content_repository import ContentRepository
from catalog_recommendation_service.repos.review_repository import ReviewRepository
from catalog_recommendation_service.repos.watchlist_repository import WatchlistRepository

__all__ = [
    "ContentRepository",
    "ReviewRepository",
    "WatchlistRepository",
]
