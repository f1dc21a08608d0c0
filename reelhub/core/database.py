"""Database setup for Reelhub using SQLModel."""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine
from reelhub.core.config import get_settings


def build_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for the configured database."""
    settings = get_settings()
    url = database_url or settings.database_url
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # Needed for SQLite
    return create_engine(
        url,
        echo=settings.debug if echo is None else echo,
        connect_args=connect_args,
    )


def create_db_and_tables(engine: Engine) -> None:
    """Create all database tables."""
    # Registers the key-value table on SQLModel.metadata
    import reelhub.services.storage  # noqa: F401

    SQLModel.metadata.create_all(engine)

