"""Repositories persisting favorites and the last search query."""

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from reelhub.models.media import MovieSummary
from reelhub.services.storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"
LAST_SEARCH_KEY = "lastSearch"

_favorites_adapter = TypeAdapter(List[MovieSummary])


class FavoritesRepository:
    """Reads the favorites list once and writes it through on every change."""

    def __init__(self, kv: KeyValueStore, key: str = FAVORITES_KEY):
        self.kv = kv
        self.key = key

    def load(self) -> List[MovieSummary]:
        """Return the persisted favorites, or an empty list if unreadable."""
        try:
            raw = self.kv.get(self.key)
        except StorageError as exc:
            logger.error("Could not read %s: %s", self.key, exc)
            return []
        if not raw:
            return []

        try:
            return _favorites_adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring unreadable %s entry: %s", self.key, exc)
            return []

    def save(self, favorites: List[MovieSummary]) -> bool:
        """Persist the full favorites list. Returns False if the write failed."""
        fields = set(MovieSummary.model_fields)
        encoded = json.dumps([movie.model_dump(include=fields) for movie in favorites])
        try:
            self.kv.set(self.key, encoded)
        except StorageError as exc:
            logger.error(
                "Failed to persist %s (%d entries): %s", self.key, len(favorites), exc
            )
            return False
        return True


class SearchHistoryRepository:
    """Keeps the last search query so it can be replayed after a restart."""

    def __init__(self, kv: KeyValueStore, key: str = LAST_SEARCH_KEY):
        self.kv = kv
        self.key = key

    def load(self) -> Optional[str]:
        try:
            return self.kv.get(self.key) or None
        except StorageError as exc:
            logger.error("Could not read %s: %s", self.key, exc)
            return None

    def save(self, query: str) -> bool:
        try:
            self.kv.set(self.key, query)
        except StorageError as exc:
            logger.error("Failed to persist %s: %s", self.key, exc)
            return False
        return True

    def clear(self) -> bool:
        try:
            self.kv.remove(self.key)
        except StorageError as exc:
            logger.error("Failed to clear %s: %s", self.key, exc)
            return False
        return True
