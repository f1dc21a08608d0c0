from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from reelhub.core.database import create_db_and_tables
from reelhub.services.storage import MemoryKeyValueStore, SQLKeyValueStore, StorageError


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(params=["sql", "memory"])
def kv(request, engine):
    if request.param == "sql":
        return SQLKeyValueStore(engine)
    return MemoryKeyValueStore()


def test_get_missing_key(kv):
    assert kv.get("favorites") is None


def test_set_overwrites(kv):
    kv.set("lastSearch", "alien")
    kv.set("lastSearch", "aliens")

    assert kv.get("lastSearch") == "aliens"


def test_remove_is_idempotent(kv):
    kv.set("lastSearch", "heat")
    kv.remove("lastSearch")
    kv.remove("lastSearch")

    assert kv.get("lastSearch") is None


def test_keys_are_independent(kv):
    kv.set("favorites", "[]")
    kv.set("lastSearch", "heat")
    kv.remove("lastSearch")

    assert kv.get("favorites") == "[]"


def test_sql_store_shares_state_across_instances(engine):
    SQLKeyValueStore(engine).set("favorites", '[{"id": 1}]')

    assert SQLKeyValueStore(engine).get("favorites") == '[{"id": 1}]'


def test_sql_errors_become_storage_errors(engine):
    store = SQLKeyValueStore(engine)
    failure = OperationalError("INSERT", {}, Exception("database is locked"))

    with patch("reelhub.services.storage.Session.commit", side_effect=failure):
        with pytest.raises(StorageError) as excinfo:
            store.set("favorites", "[]")

    assert excinfo.value.original_exception is failure
