import os

# Settings require a TMDB key; tests never reach the real API
os.environ.setdefault("TMDB_API_KEY", "test-key")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from reelhub.models.media import MoviePage, MovieSummary  # noqa: E402
from reelhub.services.movie_store import MovieStore  # noqa: E402
from reelhub.services.repositories import (  # noqa: E402
    FavoritesRepository,
    SearchHistoryRepository,
)
from reelhub.services.storage import MemoryKeyValueStore  # noqa: E402
from reelhub.services.tmdb import MetadataClient  # noqa: E402


@pytest.fixture
def make_movie():
    def factory(movie_id: int, title: str | None = None) -> MovieSummary:
        return MovieSummary(
            id=movie_id,
            title=title or f"Movie {movie_id}",
            poster_path=f"/poster{movie_id}.jpg",
            release_date="2023-05-01",
            vote_average=7.5,
        )

    return factory


@pytest.fixture
def make_page():
    def factory(results, page: int = 1, total_pages: int = 1) -> MoviePage:
        return MoviePage(results=results, page=page, total_pages=total_pages)

    return factory


@pytest.fixture
def client():
    """MetadataClient double with every network call mocked."""
    mock = MagicMock(spec=MetadataClient)
    mock.trending = AsyncMock()
    mock.search = AsyncMock()
    mock.movie_details = AsyncMock()
    mock.movie_credits = AsyncMock()
    mock.movie_videos = AsyncMock()
    return mock


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(client, kv):
    return MovieStore(
        client=client,
        favorites_repo=FavoritesRepository(kv),
        search_repo=SearchHistoryRepository(kv),
    )
