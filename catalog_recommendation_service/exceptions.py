"""Exceptions raised by the recommendation service."""


class RecommendationError(Exception):
    """Base class for recommendation errors."""


class InvalidRecommendationRequest(RecommendationError, ValueError):
    """A recommendation request was rejected before the engine ran.

    Raised for a non-positive or non-integer limit and for an unknown
    content type filter.
    """
