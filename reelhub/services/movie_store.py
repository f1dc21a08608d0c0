"""Movie store: owns listings, pagination, favorites and loading/error state."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from reelhub.models.media import Credits, MovieDetails, MoviePage, MovieSummary, Video
from reelhub.models.state import FilterOptions, LookupResult, ResultSet, StoreState, Track
from reelhub.services.repositories import FavoritesRepository, SearchHistoryRepository
from reelhub.services.tmdb import MetadataClient, MetadataError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRENDING_ERROR = "Failed to fetch trending movies. Please try again later."
SEARCH_ERROR = "Failed to find movies. Please try again later."


class MovieStore:
    """State-and-pagination controller sitting between consumers and TMDB.

    Trending and search each keep their own result set and cursor. Every
    fetch on a track gets a sequence number, and a response is applied only
    if no newer request was issued on that track in the meantime.

    Favorites and the last search query are read once from their
    repositories when the store is built and written through on every
    change. The in-memory state stays authoritative if a write fails.
    """

    def __init__(
        self,
        client: MetadataClient,
        favorites_repo: FavoritesRepository,
        search_repo: SearchHistoryRepository,
    ):
        self.client = client
        self._favorites_repo = favorites_repo
        self._search_repo = search_repo

        self._favorites: List[MovieSummary] = favorites_repo.load()
        self.search_query: str = search_repo.load() or ""
        self.error: Optional[str] = None

        self._results: dict[Track, ResultSet] = {track: ResultSet() for track in Track}
        self._issued: dict[Track, int] = {track: 0 for track in Track}
        self._last_applied = Track.TRENDING
        self._in_flight = 0
        self._initialized = False

    # --- State accessors ---

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def trending_movies(self) -> List[MovieSummary]:
        return list(self._results[Track.TRENDING].movies)

    @property
    def search_results(self) -> List[MovieSummary]:
        return list(self._results[Track.SEARCH].movies)

    @property
    def favorites(self) -> List[MovieSummary]:
        return list(self._favorites)

    def result_set(self, track: Track) -> ResultSet:
        """Return a copy of the result set for ``track``."""
        return self._results[track].model_copy(deep=True)

    @property
    def current_page(self) -> int:
        return self._results[self._last_applied].page

    @property
    def total_pages(self) -> int:
        return self._results[self._last_applied].total_pages

    def snapshot(self) -> StoreState:
        """Return a detached copy of the whole store state."""
        return StoreState(
            trending=self.result_set(Track.TRENDING),
            search=self.result_set(Track.SEARCH),
            favorites=self.favorites,
            search_query=self.search_query,
            is_loading=self.is_loading,
            error=self.error,
            current_page=self.current_page,
            total_pages=self.total_pages,
        )

    # --- Listings ---

    async def _fetch_page(
        self,
        track: Track,
        page: int,
        filters: Optional[FilterOptions],
        query: str,
        request: Callable[[], Awaitable[MoviePage]],
        error_message: str,
    ) -> bool:
        """Run one listing request and apply it if it is still the latest.

        Returns True when the response was applied.
        """
        self._issued[track] += 1
        request_id = self._issued[track]
        self._in_flight += 1
        self.error = None

        try:
            result = await request()
        except MetadataError as exc:
            if self._is_stale(track, request_id):
                return False
            logger.error("Error fetching %s page %s: %s", track.value, page, exc)
            self.error = error_message
            return False
        except Exception as exc:
            if self._is_stale(track, request_id):
                return False
            logger.exception(
                "Unexpected error fetching %s page %s: %s", track.value, page, exc
            )
            self.error = error_message
            return False
        finally:
            self._in_flight -= 1

        if self._is_stale(track, request_id):
            return False

        current = self._results[track]
        if page == 1:
            movies = list(result.results)
        else:
            movies = [*current.movies, *result.results]

        self._results[track] = ResultSet(
            movies=movies,
            page=result.page,
            total_pages=result.total_pages,
            filters=filters or FilterOptions(),
            query=query,
        )
        self._last_applied = track
        return True

    def _is_stale(self, track: Track, request_id: int) -> bool:
        latest = self._issued[track]
        if request_id != latest:
            logger.debug(
                "Discarding stale %s response (request %d, latest %d)",
                track.value,
                request_id,
                latest,
            )
            return True
        return False

    async def get_trending(
        self, page: int = 1, filters: Optional[FilterOptions] = None
    ) -> None:
        """Load a page of trending movies; page 1 replaces, later pages append."""
        await self._fetch_page(
            Track.TRENDING,
            page,
            filters,
            "",
            lambda: self.client.trending(page, filters),
            TRENDING_ERROR,
        )

    async def search(
        self, query: str, page: int = 1, filters: Optional[FilterOptions] = None
    ) -> None:
        """Search movies by title. Blank queries are ignored."""
        if not query or not query.strip():
            return

        self.search_query = query
        applied = await self._fetch_page(
            Track.SEARCH,
            page,
            filters,
            query,
            lambda: self.client.search(query, page, filters),
            SEARCH_ERROR,
        )
        if applied:
            self._search_repo.save(query)

    async def load_more_trending(self) -> None:
        current = self._results[Track.TRENDING]
        if current.has_more:
            await self.get_trending(current.page + 1, current.filters)

    async def load_more_results(self) -> None:
        current = self._results[Track.SEARCH]
        if current.has_more and current.query:
            await self.search(current.query, current.page + 1, current.filters)

    def reset_search(self) -> None:
        """Clear the search track and forget the persisted last search."""
        # Invalidates any search response still in flight
        self._issued[Track.SEARCH] += 1
        self._results[Track.SEARCH] = ResultSet()
        self._last_applied = Track.SEARCH
        self.search_query = ""
        self._search_repo.clear()

    # --- Favorites ---

    def add_favorite(self, movie: MovieSummary) -> bool:
        """Append ``movie`` unless its id is already a favorite."""
        if self.is_favorite(movie.id):
            return False
        self._favorites = [*self._favorites, movie]
        self._favorites_repo.save(self._favorites)
        return True

    def remove_favorite(self, movie_id: int) -> bool:
        """Drop every favorite with ``movie_id``; persisted even if none matched."""
        remaining = [m for m in self._favorites if m.id != movie_id]
        removed = len(remaining) != len(self._favorites)
        self._favorites = remaining
        self._favorites_repo.save(self._favorites)
        return removed

    def is_favorite(self, movie_id: int) -> bool:
        return any(m.id == movie_id for m in self._favorites)

    # --- On-demand lookups ---

    async def _lookup(
        self,
        kind: str,
        movie_id: int,
        call: Callable[[int], Awaitable[T]],
        default: T,
    ) -> LookupResult[T]:
        try:
            return LookupResult(value=await call(movie_id))
        except MetadataError as exc:
            reason = str(exc)
            logger.warning(
                "Movie %s lookup failed for %s: %s",
                kind,
                movie_id,
                reason,
                extra={"lookup": kind, "movie_id": movie_id, "reason": reason},
            )
        except Exception as exc:
            reason = f"unexpected error: {exc}"
            logger.exception(
                "Unexpected error in movie %s lookup for %s",
                kind,
                movie_id,
                extra={"lookup": kind, "movie_id": movie_id, "reason": reason},
            )
        return LookupResult(value=default, error=reason)

    async def fetch_movie_details(
        self, movie_id: int
    ) -> LookupResult[Optional[MovieDetails]]:
        return await self._lookup("details", movie_id, self.client.movie_details, None)

    async def fetch_movie_credits(self, movie_id: int) -> LookupResult[Optional[Credits]]:
        return await self._lookup("credits", movie_id, self.client.movie_credits, None)

    async def fetch_movie_videos(self, movie_id: int) -> LookupResult[List[Video]]:
        return await self._lookup("videos", movie_id, self.client.movie_videos, [])

    async def get_movie_details(self, movie_id: int) -> Optional[MovieDetails]:
        """Return details for ``movie_id``, or None if they could not be fetched."""
        return (await self.fetch_movie_details(movie_id)).value

    async def get_movie_credits(self, movie_id: int) -> Optional[Credits]:
        return (await self.fetch_movie_credits(movie_id)).value

    async def get_movie_videos(self, movie_id: int) -> List[Video]:
        return (await self.fetch_movie_videos(movie_id)).value

    # --- Bootstrap ---

    async def initialize(self) -> None:
        """Load trending page 1 and replay the persisted search, once."""
        if self._initialized:
            return
        self._initialized = True

        tasks = [self.get_trending()]
        if self.search_query:
            tasks.append(self.search(self.search_query))
        await asyncio.gather(*tasks)
