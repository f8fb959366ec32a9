from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from fastapi.testclient import TestClient

from reforest.app import app
from reforest.recommendations.cache import cache_get, cache_set, clear_cache, get_cache_stats
from reforest.recommendations.config import EngineConfig
from reforest.recommendations.data_store import DatasetStore
from reforest.recommendations.models import SensorReading
from reforest.recommendations.ranking import recommend
from reforest.recommendations.service import get_recommendations

client = TestClient(app)

READING = {"ph": 6.5, "soilMoisture": 50, "temperature": 25}


def _load(c, path):
    c.post("/dataset/load", json={"path": str(path)})


def test_cache_miss_then_hit(sample_csv):
    _load(client, sample_csv)
    clear_cache()
    resp1 = client.post("/recommendations", json=READING)
    assert resp1.status_code == 200
    stats = get_cache_stats()
    assert stats["misses"] >= 1

    # Second identical call is served from the cache
    resp2 = client.post("/recommendations", json=READING)
    assert resp2.status_code == 200
    assert resp2.json() == resp1.json()
    stats = get_cache_stats()
    assert stats["hits"] >= 1


def test_cache_different_readings_miss(sample_csv):
    _load(client, sample_csv)
    clear_cache()
    client.post("/recommendations", json=READING)
    client.post("/recommendations", json={**READING, "ph": 7.0})
    stats = get_cache_stats()
    assert stats["misses"] >= 2
    assert stats["hits"] == 0


def test_cache_invalidated_on_reload(sample_csv):
    _load(client, sample_csv)
    client.post("/recommendations", json=READING)
    assert get_cache_stats()["size"] == 1

    _load(client, sample_csv)
    assert get_cache_stats()["size"] == 0


def test_cache_stats_endpoint(sample_csv):
    _load(client, sample_csv)
    clear_cache()
    client.post("/recommendations", json=READING)
    client.post("/recommendations", json=READING)
    resp = client.get("/cache/stats")
    assert resp.status_code == 200
    body = resp.json()
    assert body["hits"] >= 1
    assert "hit_rate" in body


def test_cache_disabled_always_recomputes(loaded_store: DatasetStore):
    config = EngineConfig(cache_enabled=False)
    reading = SensorReading(ph=6.5, soil_moisture=50, temperature=25)
    with patch("reforest.recommendations.service.recommend", wraps=recommend) as mock_recommend:
        get_recommendations(reading, loaded_store, config)
        get_recommendations(reading, loaded_store, config)
    assert mock_recommend.call_count == 2
    assert get_cache_stats()["size"] == 0


def test_linear_strategy_is_cached_separately(loaded_store: DatasetStore):
    reading = SensorReading(ph=6.5, soil_moisture=50, temperature=25)
    tapered = get_recommendations(reading, loaded_store)
    linear = get_recommendations(reading, loaded_store, EngineConfig(scoring_strategy="linear"))
    assert tapered.strategy == "tapered"
    assert linear.strategy == "linear"
    assert get_cache_stats()["size"] == 2


def _distinct_readings(count: int):
    return [
        SensorReading(ph=5.0 + i * 0.001, soil_moisture=50, temperature=25)
        for i in range(count)
    ]


def test_expired_entries_are_swept_on_write(loaded_store: DatasetStore):
    config = EngineConfig(cache_ttl_seconds=0.0)
    for reading in _distinct_readings(200):
        get_recommendations(reading, loaded_store, config)
    assert get_cache_stats()["size"] <= 1


def test_cache_size_is_capped_and_oldest_evicted(loaded_store: DatasetStore):
    config = EngineConfig(cache_max_entries=10)
    readings = _distinct_readings(40)
    for reading in readings:
        get_recommendations(reading, loaded_store, config)

    stats = get_cache_stats()
    assert stats["size"] == 10
    assert stats["evictions"] == 30

    # The newest reading is still cached, the oldest was evicted
    get_recommendations(readings[-1], loaded_store, config)
    assert get_cache_stats()["hits"] == 1
    get_recommendations(readings[0], loaded_store, config)
    assert get_cache_stats()["misses"] == 41


def test_cache_counters_are_consistent_under_concurrency():
    cache_set({"ph": 6.5}, "cached")

    def lookup(i: int) -> None:
        for _ in range(250):
            cache_get({"ph": 6.5} if i % 2 else {"ph": float(i)})

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lookup, range(8)))

    stats = get_cache_stats()
    assert stats["hits"] == 1000
    assert stats["misses"] == 1000
