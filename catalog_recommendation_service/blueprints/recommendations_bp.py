"""Get recommendations for a profile."""
import azure.functions as func
import logging
import json

from catalog_recommendation_service.config import get_max_limit
from catalog_recommendation_service.engine.types import ContentType
from catalog_recommendation_service.exceptions import InvalidRecommendationRequest
from catalog_recommendation_service.services import RecommendationService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
recommendation_service = RecommendationService()

logger = logging.getLogger(__name__)


def _error_response(message: str, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps({"error": message}),
        status_code=status_code,
        mimetype="application/json"
    )


@bp.route(route="profiles/{profile_id}/recommendations", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_profile_recommendations(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get recommendations for a viewer profile.

    Query Parameters:
        - limit: Number of recommendations (default: 10, max: RECOMMENDATION_MAX_LIMIT)
        - type: Optional content type filter ("movie" or "series")
    """
    try:
        profile_id = req.route_params.get('profile_id')

        if not profile_id:
            return _error_response("profile_id is required", 400)

        try:
            profile_id = int(profile_id)
        except ValueError:
            return _error_response("profile_id must be an integer", 400)

        raw_limit = req.params.get('limit')
        try:
            limit = int(raw_limit) if raw_limit is not None else None
        except ValueError:
            return _error_response("limit must be an integer", 400)

        max_limit = get_max_limit()
        if limit is not None and (limit < 1 or limit > max_limit):
            return _error_response(f"limit must be between 1 and {max_limit}", 400)

        type_filter = req.params.get('type') or None
        if type_filter is not None:
            try:
                type_filter = ContentType.parse(type_filter)
            except ValueError:
                return _error_response("type must be 'movie' or 'series'", 400)

        try:
            recommendations = recommendation_service.get_recommendations(
                profile_id=profile_id,
                limit=limit,
                type_filter=type_filter
            )
        except InvalidRecommendationRequest as e:
            return _error_response(str(e), 400)

        response = {
            "profile_id": profile_id,
            "count": len(recommendations),
            "recommendations": [summary.to_dict() for summary in recommendations]
        }

        return func.HttpResponse(
            json.dumps(response),
            status_code=200,
            mimetype="application/json"
        )

    except Exception as e:
        logger.error(f"Error getting recommendations: {str(e)}", exc_info=True)
        return _error_response("Internal server error", 500)


# noinspection PyUnusedLocal
@bp.route(route="recommendations/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return func.HttpResponse(
        json.dumps({
            "status": "healthy",
            "service": "catalog-recommendation-service",
            "version": "1.0.0"
        }),
        status_code=200,
        mimetype="application/json"
    )
