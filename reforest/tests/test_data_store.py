from __future__ import annotations

import threading

import pytest

from reforest.exceptions import DatasetNotLoadedError
from reforest.recommendations.data_store import DatasetStore
from reforest.recommendations.ranking import recommend


def test_empty_store_reports_not_loaded():
    store = DatasetStore()
    assert store.is_loaded() is False
    assert store.get_last_update_time() is None
    assert store.current() is None
    with pytest.raises(DatasetNotLoadedError):
        store.snapshot()
    with pytest.raises(DatasetNotLoadedError):
        store.get_profiles()


def test_replace_creates_new_immutable_snapshot(sample_profiles):
    store = DatasetStore()
    first = store.replace(sample_profiles, source="a.xlsx", raw_row_count=6)
    second = store.replace(sample_profiles[:2], source="b.xlsx")

    assert first is not second
    assert len(first) == 4
    assert store.snapshot() is second
    assert second.raw_row_count == 2
    assert isinstance(first.profiles, tuple)
    with pytest.raises(AttributeError):
        first.profiles = ()


def test_replacing_does_not_disturb_held_snapshot(sample_profiles, reading):
    store = DatasetStore()
    store.replace(sample_profiles)
    held = store.snapshot()
    before = recommend(reading, held.profiles, top_n=4)

    store.replace(sample_profiles[3:])
    after = recommend(reading, held.profiles, top_n=4)

    assert before == after
    assert len(store.snapshot()) == 1


def test_snapshot_with_no_species_is_not_loaded():
    store = DatasetStore()
    store.replace([])
    assert store.is_loaded() is False
    assert store.get_last_update_time() is not None


def test_clear_discards_snapshot(loaded_store):
    assert loaded_store.is_loaded()
    loaded_store.clear()
    assert loaded_store.is_loaded() is False
    assert loaded_store.get_last_update_time() is None


def test_listeners_notified_on_swap_and_clear(sample_profiles):
    seen = []
    store = DatasetStore()
    store.subscribe(seen.append)
    snapshot = store.replace(sample_profiles)
    store.clear()
    assert seen == [snapshot, None]


def test_concurrent_readers_see_whole_snapshots(sample_profiles):
    store = DatasetStore()
    store.replace(sample_profiles)
    sizes: set[int] = set()
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            sizes.add(len(store.snapshot().profiles))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for _ in range(200):
        store.replace(sample_profiles[:1])
        store.replace(sample_profiles)
    stop.set()
    for t in threads:
        t.join()

    assert sizes <= {1, 4}
