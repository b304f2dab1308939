"""Engine and session factory for the catalog database."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog_recommendation_service.config import get_database_url

CATALOG_DATABASE_URL = get_database_url()

if not CATALOG_DATABASE_URL:
    raise ValueError("Catalog database is not configured. Set DATABASE_URL.")

engine = create_engine(
    CATALOG_DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=1800,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
