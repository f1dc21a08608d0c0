"""TMDB client for listing, searching and looking up movies."""

import asyncio
import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from reelhub.core.config import Settings, get_settings
from reelhub.models.media import Credits, MovieDetails, MoviePage, Video, VideoList
from reelhub.models.state import FilterOptions

logger = logging.getLogger(__name__)


class MetadataError(Exception):
    """Domain exception for TMDB failures."""

    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception


def build_filter_params(filters: Optional[FilterOptions]) -> dict[str, str]:
    """Map filter options to TMDB query parameters.

    Empty fields are left out entirely rather than sent as empty strings.
    """
    if filters is None:
        return {}

    params = {}
    if filters.genre:
        params["with_genres"] = filters.genre
    if filters.year:
        params["primary_release_year"] = filters.year
    if filters.min_rating:
        params["vote_average_gte"] = filters.min_rating
    return params


class MetadataClient:
    """Thin wrapper around the TMDB REST API.

    Every call is a single attempt: failures are raised as ``MetadataError``
    and never retried here.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session: requests.Session | None = None,
    ):
        settings = settings or get_settings()
        self.base_url = settings.tmdb_api_url
        self.timeout = settings.tmdb_timeout
        self.session = session or requests.Session()
        self.session.params = {"api_key": settings.tmdb_api_key}
        if settings.proxy:
            self.session.proxies = {"http": settings.proxy, "https": settings.proxy}

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            raise MetadataError(f"GET {path} failed: {exc}", exc) from exc

        if not isinstance(payload, dict):
            raise MetadataError(f"GET {path} returned a non-object payload")
        return payload

    def _parse(self, path: str, model, payload: dict):
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise MetadataError(f"GET {path} returned an unexpected payload", exc) from exc

    # Synchronous calls

    def _trending_sync(self, page: int, filters: Optional[FilterOptions]) -> MoviePage:
        path = "/trending/movie/day"
        params = {"page": page, **build_filter_params(filters)}
        return self._parse(path, MoviePage, self._get(path, params))

    def _search_sync(
        self, query: str, page: int, filters: Optional[FilterOptions]
    ) -> MoviePage:
        path = "/search/movie"
        params = {
            "query": query,
            "page": page,
            "include_adult": "false",
            **build_filter_params(filters),
        }
        return self._parse(path, MoviePage, self._get(path, params))

    def _movie_details_sync(self, movie_id: int) -> MovieDetails:
        path = f"/movie/{movie_id}"
        return self._parse(path, MovieDetails, self._get(path))

    def _movie_credits_sync(self, movie_id: int) -> Credits:
        path = f"/movie/{movie_id}/credits"
        return self._parse(path, Credits, self._get(path))

    def _movie_videos_sync(self, movie_id: int) -> list[Video]:
        path = f"/movie/{movie_id}/videos"
        return self._parse(path, VideoList, self._get(path)).results

    # Async API

    async def trending(
        self, page: int = 1, filters: Optional[FilterOptions] = None
    ) -> MoviePage:
        """Fetch one page of today's trending movies."""
        return await asyncio.to_thread(self._trending_sync, page, filters)

    async def search(
        self, query: str, page: int = 1, filters: Optional[FilterOptions] = None
    ) -> MoviePage:
        """Search movies by title, adult titles excluded."""
        return await asyncio.to_thread(self._search_sync, query, page, filters)

    async def movie_details(self, movie_id: int) -> MovieDetails:
        return await asyncio.to_thread(self._movie_details_sync, movie_id)

    async def movie_credits(self, movie_id: int) -> Credits:
        return await asyncio.to_thread(self._movie_credits_sync, movie_id)

    async def movie_videos(self, movie_id: int) -> list[Video]:
        return await asyncio.to_thread(self._movie_videos_sync, movie_id)
