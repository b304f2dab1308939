"""Service classes"""

from .recommendation_service import RecommendationService, validate_request

__all__ = ["RecommendationService", "validate_request"]
