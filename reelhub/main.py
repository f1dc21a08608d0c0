import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from reelhub.api.routes_api import router as api_router
from reelhub.core.auth import BasicAuthMiddleware
from reelhub.core.config import get_settings
from reelhub.core.database import build_engine, create_db_and_tables
from reelhub.services.movie_store import MovieStore
from reelhub.services.repositories import FavoritesRepository, SearchHistoryRepository
from reelhub.services.storage import SQLKeyValueStore
from reelhub.services.tmdb import MetadataClient

load_dotenv()

logger = logging.getLogger(__name__)


def build_store() -> MovieStore:
    """Wire a store against TMDB and the configured database."""
    engine = build_engine()
    create_db_and_tables(engine)
    kv = SQLKeyValueStore(engine)
    return MovieStore(
        client=MetadataClient(),
        favorites_repo=FavoritesRepository(kv),
        search_repo=SearchHistoryRepository(kv),
    )


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Application lifespan context manager."""
    settings = get_settings()
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

    store = build_store()
    app.state.store = store
    await store.initialize()
    try:
        yield
    finally:
        try:
            store.client.close()
        except Exception as e:
            logger.error(f"Error closing TMDB client: {e}")


app = FastAPI(
    title="Reelhub",
    description="Trending, search and favorites on top of TMDB",
    version="0.1.0",
    lifespan=app_lifespan,
)

app.add_middleware(BasicAuthMiddleware)
app.include_router(api_router, prefix="/api")
