"""
Print recommendations for a profile.
Shows which path (scored, cold start, degraded) produced the list.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog_recommendation_service.engine.types import RecommendationResult
from catalog_recommendation_service.exceptions import InvalidRecommendationRequest
from catalog_recommendation_service.services import RecommendationService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def format_result(profile_id: int, result: RecommendationResult) -> str:
    """
    Format a recommendation result for the terminal.

    Args:
        profile_id: Profile the result was computed for
        result: Recommendation result

    Returns:
        Multi-line report
    """
    lines = [
        f"Profile {profile_id}: {len(result.items)} recommendations via {result.path.value}",
        f"  scored={result.scored_count} backfilled={result.backfilled_count} "
        f"skipped={result.skipped_entries}",
    ]
    for rank, item in enumerate(result.items, start=1):
        genres = ", ".join(genre.name for genre in item.genres)
        lines.append(
            f"  {rank:>2}. [{item.id}] {item.title} ({item.type.value}) "
            f"popularity={item.popularity:.1f} genres={genres}"
        )
    return "\n".join(lines)


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Print recommendations for a profile'
    )
    parser.add_argument(
        'profile_id',
        type=int,
        help='Profile ID'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=None,
        help='Number of recommendations (default: from config)'
    )
    parser.add_argument(
        '--type',
        type=str,
        default=None,
        help="Content type filter: 'movie' or 'series' (default: none)"
    )
    parser.add_argument(
        '--database-url',
        type=str,
        default=None,
        help='Database URL (default: from config)'
    )

    args = parser.parse_args()

    session_factory = None
    if args.database_url:
        engine = create_engine(args.database_url)
        session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    service = RecommendationService(session_factory=session_factory)

    try:
        result = service.recommend(args.profile_id, limit=args.limit, type_filter=args.type)
    except InvalidRecommendationRequest as e:
        logger.error(f"Invalid request: {e}")
        sys.exit(2)

    print(format_result(args.profile_id, result))


if __name__ == '__main__':
    main()
