import json
from unittest.mock import MagicMock

from reelhub.models.media import MovieSummary
from reelhub.services.movie_store import MovieStore
from reelhub.services.repositories import (
    FavoritesRepository,
    SearchHistoryRepository,
)
from reelhub.services.storage import MemoryKeyValueStore, StorageError


def persisted_ids(kv):
    return [entry["id"] for entry in json.loads(kv.get("favorites"))]


def test_add_favorite_twice_keeps_one_entry(store, kv, make_movie):
    a = make_movie(1, "A")

    assert store.add_favorite(a) is True
    assert store.add_favorite(a) is False

    assert store.favorites == [a]
    assert persisted_ids(kv) == [1]


def test_add_favorite_matches_on_id_only(store, make_movie):
    store.add_favorite(make_movie(1, "Original"))
    store.add_favorite(make_movie(1, "Renamed"))

    assert [m.title for m in store.favorites] == ["Original"]


def test_favorites_keep_insertion_order(store, kv, make_movie):
    for movie_id in (3, 1, 2):
        store.add_favorite(make_movie(movie_id))

    assert [m.id for m in store.favorites] == [3, 1, 2]
    assert persisted_ids(kv) == [3, 1, 2]


def test_remove_favorite(store, kv, make_movie):
    store.add_favorite(make_movie(1))
    store.add_favorite(make_movie(2))

    assert store.remove_favorite(1) is True

    assert [m.id for m in store.favorites] == [2]
    assert persisted_ids(kv) == [2]
    assert not store.is_favorite(1)


def test_remove_unknown_favorite_still_writes_same_content(store, kv, make_movie):
    store.add_favorite(make_movie(1))
    kv.remove("favorites")

    assert store.remove_favorite(999) is False

    assert [m.id for m in store.favorites] == [1]
    assert persisted_ids(kv) == [1]


def test_is_favorite_tracks_membership(store, make_movie):
    assert store.is_favorite(5) is False
    store.add_favorite(make_movie(5))
    assert store.is_favorite(5) is True
    store.remove_favorite(5)
    assert store.is_favorite(5) is False


def test_favorites_survive_a_restart(client, make_movie):
    kv = MemoryKeyValueStore()
    first = MovieStore(client, FavoritesRepository(kv), SearchHistoryRepository(kv))
    first.add_favorite(make_movie(7, "Se7en"))

    second = MovieStore(client, FavoritesRepository(kv), SearchHistoryRepository(kv))

    assert second.favorites == first.favorites
    assert second.favorites[0].poster_url == "https://image.tmdb.org/t/p/w500/poster7.jpg"


def test_favorites_snapshot_is_a_copy(store, make_movie):
    store.add_favorite(make_movie(1))

    store.favorites.append(make_movie(2))
    store.snapshot().favorites.clear()

    assert [m.id for m in store.favorites] == [1]


def test_write_failure_keeps_memory_state(client, make_movie):
    kv = MagicMock()
    kv.get.return_value = None
    kv.set.side_effect = StorageError("disk full")
    store = MovieStore(client, FavoritesRepository(kv), SearchHistoryRepository(kv))

    assert store.add_favorite(make_movie(1)) is True

    assert store.is_favorite(1)
    kv.set.assert_called_once()


def test_load_ignores_corrupt_payload():
    kv = MemoryKeyValueStore({"favorites": "{not json"})

    assert FavoritesRepository(kv).load() == []


def test_load_ignores_wrong_shape():
    kv = MemoryKeyValueStore({"favorites": json.dumps({"id": 1})})

    assert FavoritesRepository(kv).load() == []


def test_load_accepts_raw_tmdb_entries():
    raw = [{"id": 603, "title": "The Matrix", "adult": False, "video": False}]
    kv = MemoryKeyValueStore({"favorites": json.dumps(raw)})

    favorites = FavoritesRepository(kv).load()

    assert favorites == [MovieSummary(id=603, title="The Matrix")]


def test_search_history_round_trip():
    kv = MemoryKeyValueStore()
    repo = SearchHistoryRepository(kv)

    assert repo.load() is None
    assert repo.save("blade runner") is True
    assert repo.load() == "blade runner"
    assert repo.clear() is True
    assert repo.load() is None


def test_search_history_read_failure_returns_none():
    kv = MagicMock()
    kv.get.side_effect = StorageError("locked")

    assert SearchHistoryRepository(kv).load() is None
