"""Small-value durable storage used for favorites and the last search."""

import logging
from typing import Optional, Protocol

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Domain exception for key-value storage failures."""

    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception


class KeyValueStore(Protocol):
    """Synchronous get/set/remove capability with last-write-wins semantics."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class KVEntry(SQLModel, table=True):
    """A single stored value."""

    __tablename__ = "kv_entries"

    key: str = Field(primary_key=True)
    value: str


class SQLKeyValueStore:
    """Key-value store backed by the ``kv_entries`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def get(self, key: str) -> Optional[str]:
        try:
            with Session(self.engine) as session:
                entry = session.get(KVEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read '{key}'", exc) from exc

    def set(self, key: str, value: str) -> None:
        try:
            with Session(self.engine) as session:
                entry = session.get(KVEntry, key)
                if entry is None:
                    entry = KVEntry(key=key, value=value)
                else:
                    entry.value = value
                session.add(entry)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to write '{key}'", exc) from exc

    def remove(self, key: str) -> None:
        try:
            with Session(self.engine) as session:
                entry = session.get(KVEntry, key)
                if entry is not None:
                    session.delete(entry)
                    session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to remove '{key}'", exc) from exc


class MemoryKeyValueStore:
    """Process-local store, handy for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
