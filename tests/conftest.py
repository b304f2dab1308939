"""Shared test fixtures and configuration for pytest."""
import pytest
from datetime import date
from unittest.mock import Mock
from typing import Callable, List

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog_recommendation_service.engine.types import ContentItem, ContentType, Tag
from catalog_recommendation_service.models.base import Base
from catalog_recommendation_service.models.content import Content
from catalog_recommendation_service.models.review import Review
from catalog_recommendation_service.models.watchlist_entry import WatchlistEntry

ACTION = Tag(28, 'Action')
DRAMA = Tag(18, 'Drama')
COMEDY = Tag(35, 'Comedy')
SCIFI = Tag(878, 'Science Fiction')
HEIST = Tag(10051, 'heist')
SPACE = Tag(9882, 'space')


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_db_engine):
    """Session factory bound to the in-memory database."""
    return sessionmaker(bind=test_db_engine)


@pytest.fixture(scope="function")
def test_db_session(test_session_factory):
    """Create a database session for testing."""
    session = test_session_factory()
    yield session
    session.close()


# ===== Engine Fixtures =====

@pytest.fixture
def make_item() -> Callable[..., ContentItem]:
    """Factory for ContentItems with sensible defaults."""
    def _make_item(
        content_id: int,
        title: str = None,
        genres=(),
        keywords=(),
        popularity: float = 0.0,
        content_type: ContentType = ContentType.MOVIE,
        overview: str = ""
    ) -> ContentItem:
        return ContentItem(
            id=content_id,
            title=title or f"Title {content_id}",
            type=content_type,
            overview=overview,
            genres=tuple(genres),
            keywords=tuple(keywords),
            popularity=popularity,
        )
    return _make_item


@pytest.fixture
def heist_movie(make_item) -> ContentItem:
    """Liked item tagged {Action, Drama} and {heist}."""
    return make_item(
        100,
        title='The Vault Job',
        genres=[ACTION, DRAMA],
        keywords=[HEIST],
        popularity=30.0,
        overview='A crew of thieves plans one last heist on a bank vault.'
    )


@pytest.fixture
def scenario_corpus(make_item) -> List[ContentItem]:
    """Corpus A (Action/heist, 50), B (Comedy, 900), C (Drama, 10)."""
    return [
        make_item(1, title='Bank Heist', genres=[ACTION], keywords=[HEIST], popularity=50.0,
                  overview='Thieves rob a bank.'),
        make_item(2, title='Office Laughs', genres=[COMEDY], popularity=900.0,
                  overview='Coworkers trade jokes.'),
        make_item(3, title='Quiet Family', genres=[DRAMA], popularity=10.0,
                  overview='A family copes with loss.'),
    ]


# ===== Sample Data Fixtures =====

@pytest.fixture
def sample_content_records(test_db_session) -> List[Content]:
    """Create sample Content records in the test database."""
    records = [
        Content(
            id=1,
            tmdb_id=501,
            title='Bank Heist',
            type='movie',
            overview='<p>Thieves rob a bank.</p>',
            poster_path='/heist.jpg',
            release_date=date(2019, 5, 1),
            genres=[{'id': 28, 'name': 'Action'}],
            keywords=[{'id': 10051, 'name': 'heist'}],
            popularity=50.0,
            vote_average=7.1
        ),
        Content(
            id=2,
            tmdb_id=502,
            title='Office Laughs',
            type='series',
            overview='Coworkers trade jokes.',
            genres=[{'id': 35, 'name': 'Comedy'}],
            keywords=[],
            popularity=900.0,
            vote_average=8.2
        ),
        Content(
            id=3,
            tmdb_id=503,
            title='Quiet Family',
            type='movie',
            overview='A family copes with loss.',
            genres=[{'id': 18, 'name': 'Drama'}],
            keywords=None,
            popularity=10.0,
            vote_average=6.4
        ),
        Content(
            id=4,
            tmdb_id=504,
            title='The Vault Job',
            type='movie',
            overview='A crew of thieves plans one last heist on a bank vault.',
            genres=[{'id': 28, 'name': 'Action'}, {'id': 18, 'name': 'Drama'}],
            keywords=[{'id': 10051, 'name': 'heist'}],
            popularity=30.0,
            vote_average=7.8
        ),
        Content(
            id=5,
            tmdb_id=505,
            title='Star Crossing',
            type='tv',
            overview='A crew drifts through deep space.',
            genres=[{'id': 878, 'name': 'Science Fiction'}, {'id': 18, 'name': 'Drama'}],
            keywords=[{'id': 9882, 'name': 'space'}],
            popularity=120.0,
            vote_average=7.5
        ),
    ]

    for record in records:
        test_db_session.add(record)
    test_db_session.commit()

    return records


@pytest.fixture
def sample_review_records(test_db_session, sample_content_records) -> List[Review]:
    """Profile 7 liked The Vault Job and disliked Office Laughs."""
    records = [
        Review(profile_id=7, content_id=4, rating=5, review='Loved it', is_public=True),
        Review(profile_id=7, content_id=2, rating=1, review='Not funny', is_public=False),
        Review(profile_id=8, content_id=1, rating=4, review='Fun', is_public=True),
    ]

    for record in records:
        test_db_session.add(record)
    test_db_session.commit()

    return records


@pytest.fixture
def sample_watchlist_records(test_db_session, sample_content_records) -> List[WatchlistEntry]:
    """Profile 9 has Star Crossing and Quiet Family on its watchlist."""
    records = [
        WatchlistEntry(profile_id=9, content_id=3, position=1),
        WatchlistEntry(profile_id=9, content_id=5, position=0),
    ]

    for record in records:
        test_db_session.add(record)
    test_db_session.commit()

    return records


# ===== Mock Fixtures =====

@pytest.fixture
def mock_database_session():
    """Mock database session."""
    mock_session = Mock()
    mock_session.query.return_value = mock_session
    mock_session.filter.return_value = mock_session
    mock_session.order_by.return_value = mock_session
    mock_session.first.return_value = None
    mock_session.all.return_value = []
    mock_session.count.return_value = 0
    mock_session.rollback.return_value = None
    mock_session.close.return_value = None
    return mock_session


# ===== Azure Functions Fixtures =====

@pytest.fixture
def mock_http_request():
    """Mock Azure Functions HttpRequest."""
    mock_req = Mock()
    mock_req.route_params = {}
    mock_req.params = {}
    mock_req.get_json.return_value = {}
    return mock_req


# ===== Repository Fixtures =====

@pytest.fixture
def content_repository(test_db_session):
    """Create ContentRepository with test database session."""
    from catalog_recommendation_service.repos import ContentRepository
    return ContentRepository(test_db_session)


@pytest.fixture
def review_repository(test_db_session):
    """Create ReviewRepository with test database session."""
    from catalog_recommendation_service.repos import ReviewRepository
    return ReviewRepository(test_db_session)


@pytest.fixture
def watchlist_repository(test_db_session):
    """Create WatchlistRepository with test database session."""
    from catalog_recommendation_service.repos import WatchlistRepository
    return WatchlistRepository(test_db_session)


# ===== Script Fixtures =====

@pytest.fixture
def mock_sys_argv(monkeypatch):
    """Mock sys.argv for script testing."""
    def _mock_argv(args):
        monkeypatch.setattr('sys.argv', args)
    return _mock_argv
