"""Media models for TMDB payloads."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, computed_field, field_validator

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
BACKDROP_BASE_URL = "https://image.tmdb.org/t/p/w780"
PROFILE_BASE_URL = "https://image.tmdb.org/t/p/w185"


def _image_url(base: str, path: Optional[str]) -> Optional[str]:
    return f"{base}{path}" if path else None


class MovieSummary(BaseModel):
    """A movie as it appears in trending/search listings."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str = "Unknown"
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: List[int] = []
    popularity: float = 0.0
    original_language: Optional[str] = None

    @computed_field
    @property
    def poster_url(self) -> Optional[str]:
        return _image_url(POSTER_BASE_URL, self.poster_path)

    @computed_field
    @property
    def backdrop_url(self) -> Optional[str]:
        return _image_url(BACKDROP_BASE_URL, self.backdrop_path)

    @computed_field
    @property
    def release_year(self) -> Optional[str]:
        return self.release_date[:4] if self.release_date else None


class MoviePage(BaseModel):
    """One page of a trending or search listing."""

    results: List[MovieSummary] = []
    page: int = 1
    total_pages: int = 1
    total_results: int = 0

    @field_validator("results", mode="before")
    @classmethod
    def missing_results_are_empty(cls, v):
        return [] if v is None else v


class Genre(BaseModel):
    id: int
    name: str


class MovieDetails(BaseModel):
    """A movie with full TMDB data."""

    id: int
    title: str = "Unknown"
    original_title: Optional[str] = None
    overview: str = ""
    tagline: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[str] = None
    runtime: Optional[int] = None
    vote_average: float = 0.0
    vote_count: int = 0
    genres: List[Genre] = []
    status: str = ""  # e.g., "Released", "In Production"
    imdb_id: Optional[str] = None
    homepage: Optional[str] = None
    budget: int = 0
    revenue: int = 0

    @computed_field
    @property
    def poster_url(self) -> Optional[str]:
        return _image_url(POSTER_BASE_URL, self.poster_path)

    @computed_field
    @property
    def backdrop_url(self) -> Optional[str]:
        return _image_url(BACKDROP_BASE_URL, self.backdrop_path)

    @computed_field
    @property
    def release_year(self) -> Optional[str]:
        return self.release_date[:4] if self.release_date else None


class CastMember(BaseModel):
    """An actor credited on a movie."""

    id: int
    name: str
    character: str = ""
    profile_path: Optional[str] = None
    order: int = 0

    @property
    def profile_url(self) -> Optional[str]:
        return _image_url(PROFILE_BASE_URL, self.profile_path)


class CrewMember(BaseModel):
    """A crew member credited on a movie."""

    id: int
    name: str
    job: str = ""
    department: str = ""
    profile_path: Optional[str] = None


class Credits(BaseModel):
    id: Optional[int] = None
    cast: List[CastMember] = []
    crew: List[CrewMember] = []

    @field_validator("cast", "crew", mode="before")
    @classmethod
    def missing_lists_are_empty(cls, v):
        return [] if v is None else v


class Video(BaseModel):
    """A trailer, teaser or clip attached to a movie."""

    id: str
    key: str
    name: str = ""
    site: str = ""  # e.g., "YouTube", "Vimeo"
    type: str = ""  # e.g., "Trailer", "Teaser"
    official: bool = False
    iso_639_1: Optional[str] = None
    published_at: Optional[str] = None


class VideoList(BaseModel):
    id: Optional[int] = None
    results: List[Video] = []

    @field_validator("results", mode="before")
    @classmethod
    def missing_results_are_empty(cls, v):
        return [] if v is None else v
