"""
Create the catalog tables (content, reviews, watchlist entries).
Useful for local development and for test databases.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging

from sqlalchemy import create_engine, inspect

from catalog_recommendation_service.config import get_database_url
from catalog_recommendation_service.models import Base

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def init_database(database_url: str) -> list[str]:
    """
    Create all tables that do not exist yet.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Names of the tables present after creation
    """
    engine = create_engine(database_url)
    try:
        Base.metadata.create_all(engine)
        tables = sorted(inspect(engine).get_table_names())
    finally:
        engine.dispose()

    logger.info(f"✓ Tables ready: {', '.join(tables)}")
    return tables


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Create catalog tables'
    )
    parser.add_argument(
        '--database-url',
        type=str,
        default=None,
        help='Database URL (default: from config)'
    )

    args = parser.parse_args()
    database_url = args.database_url or get_database_url()

    try:
        init_database(database_url)
    except Exception as e:
        logger.error(f"Error creating tables: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
