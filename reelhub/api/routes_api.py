"""API routes exposing the movie store as JSON."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from reelhub.models.media import Credits, MovieDetails, MovieSummary, Video
from reelhub.models.state import FilterOptions, StoreState
from reelhub.services.movie_store import MovieStore

router = APIRouter()


def get_store(request: Request) -> MovieStore:
    """Dependency returning the store built in the app lifespan."""
    return request.app.state.store


def get_filters(
    genre: str = Query("", description="TMDB genre id"),
    year: str = Query("", description="Primary release year"),
    min_rating: str = Query("", description="Minimum average vote"),
) -> FilterOptions:
    return FilterOptions(genre=genre, year=year, min_rating=min_rating)


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "reelhub"}


@router.get("/state", response_model=StoreState)
async def get_state(store: MovieStore = Depends(get_store)):
    """Return the full store snapshot."""
    return store.snapshot()


# --- Listings ---


@router.get("/trending", response_model=StoreState)
async def trending(
    page: int = Query(1, ge=1),
    filters: FilterOptions = Depends(get_filters),
    store: MovieStore = Depends(get_store),
):
    """Load a page of trending movies and return the updated state."""
    await store.get_trending(page, filters)
    return store.snapshot()


@router.post("/trending/more", response_model=StoreState)
async def trending_more(store: MovieStore = Depends(get_store)):
    await store.load_more_trending()
    return store.snapshot()


@router.get("/search", response_model=StoreState)
async def search(
    q: str = Query(..., description="Search query"),
    page: int = Query(1, ge=1),
    filters: FilterOptions = Depends(get_filters),
    store: MovieStore = Depends(get_store),
):
    """Search movies and return the updated state.

    Blank queries leave the state untouched.
    """
    await store.search(q, page, filters)
    return store.snapshot()


@router.post("/search/more", response_model=StoreState)
async def search_more(store: MovieStore = Depends(get_store)):
    await store.load_more_results()
    return store.snapshot()


@router.delete("/search", response_model=StoreState)
async def reset_search(store: MovieStore = Depends(get_store)):
    store.reset_search()
    return store.snapshot()


# --- Favorites ---


@router.get("/favorites", response_model=List[MovieSummary])
async def list_favorites(store: MovieStore = Depends(get_store)):
    return store.favorites


@router.post("/favorites", response_model=StoreState)
async def add_favorite(movie: MovieSummary, store: MovieStore = Depends(get_store)):
    store.add_favorite(movie)
    return store.snapshot()


@router.get("/favorites/{movie_id}")
async def is_favorite(movie_id: int, store: MovieStore = Depends(get_store)):
    return {"id": movie_id, "favorite": store.is_favorite(movie_id)}


@router.delete("/favorites/{movie_id}", response_model=StoreState)
async def remove_favorite(movie_id: int, store: MovieStore = Depends(get_store)):
    store.remove_favorite(movie_id)
    return store.snapshot()


# --- Lookups ---


@router.get("/movies/{movie_id}", response_model=MovieDetails)
async def movie_details(movie_id: int, store: MovieStore = Depends(get_store)):
    details = await store.get_movie_details(movie_id)
    if details is None:
        raise HTTPException(status_code=404, detail="Movie details not available")
    return details


@router.get("/movies/{movie_id}/credits", response_model=Credits)
async def movie_credits(movie_id: int, store: MovieStore = Depends(get_store)):
    credits = await store.get_movie_credits(movie_id)
    if credits is None:
        raise HTTPException(status_code=404, detail="Movie credits not available")
    return credits


@router.get("/movies/{movie_id}/videos", response_model=List[Video])
async def movie_videos(movie_id: int, store: MovieStore = Depends(get_store)):
    return await store.get_movie_videos(movie_id)
