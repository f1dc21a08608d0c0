"""Models describing the movie store state exposed to consumers."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from reelhub.models.media import MovieSummary

T = TypeVar("T")


class Track(str, Enum):
    """Listing flows that own a result set."""

    TRENDING = "trending"
    SEARCH = "search"


class FilterOptions(BaseModel):
    """Optional narrowing criteria; an empty string means "not applied"."""

    model_config = ConfigDict(frozen=True)

    genre: str = ""
    year: str = ""
    min_rating: str = ""

    def is_empty(self) -> bool:
        return not (self.genre or self.year or self.min_rating)


class ResultSet(BaseModel):
    """Results of one track plus the cursor and inputs that produced them."""

    movies: List[MovieSummary] = []
    page: int = 1
    total_pages: int = 1
    filters: FilterOptions = FilterOptions()
    query: str = ""  # Only set on the search track

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


class StoreState(BaseModel):
    """Snapshot of everything a consumer renders from."""

    trending: ResultSet
    search: ResultSet
    favorites: List[MovieSummary]
    search_query: str
    is_loading: bool
    error: Optional[str]
    # Cursor of whichever track applied a response last
    current_page: int
    total_pages: int


@dataclass
class LookupResult(Generic[T]):
    """Outcome of an on-demand lookup.

    ``value`` holds the degraded default when the fetch failed, and ``error``
    tells the caller why.
    """

    value: T
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
