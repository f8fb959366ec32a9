from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from typing import Any, NamedTuple

DEFAULT_TTL = 300.0  # 5 minutes
DEFAULT_MAX_ENTRIES = 256


class _Entry(NamedTuple):
    value: Any
    expires_at: float


# Insertion order doubles as age order: the first entry is always the oldest.
_entries: OrderedDict[str, _Entry] = OrderedDict()
_lock = threading.Lock()
_hits = 0
_misses = 0
_evictions = 0


def _make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def _purge_expired(now: float) -> None:
    global _evictions
    expired = [key for key, entry in _entries.items() if entry.expires_at <= now]
    for key in expired:
        del _entries[key]
    _evictions += len(expired)


def cache_get(request_dict: dict) -> Any | None:
    """Return a live cached result for the request, counting the hit or miss."""
    global _hits, _misses
    key = _make_key(request_dict)
    with _lock:
        entry = _entries.get(key)
        if entry is not None and entry.expires_at > time.monotonic():
            _hits += 1
            return entry.value
        if entry is not None:
            del _entries[key]
        _misses += 1
        return None


def cache_set(
    request_dict: dict,
    value: Any,
    ttl: float = DEFAULT_TTL,
    max_entries: int = DEFAULT_MAX_ENTRIES,
) -> None:
    """
    Store a result for ``ttl`` seconds.

    Expired entries are swept on every write, and the oldest entries are
    evicted once the cache holds more than ``max_entries``.
    """
    global _evictions
    key = _make_key(request_dict)
    now = time.monotonic()
    with _lock:
        _purge_expired(now)
        _entries.pop(key, None)
        _entries[key] = _Entry(value, now + ttl)
        while len(_entries) > max(max_entries, 0):
            _entries.popitem(last=False)
            _evictions += 1


def invalidate(_snapshot: Any = None) -> None:
    """Drop cached results; hooked to dataset store swaps."""
    with _lock:
        _entries.clear()


def get_cache_stats() -> dict:
    with _lock:
        total = _hits + _misses
        return {
            "size": len(_entries),
            "hits": _hits,
            "misses": _misses,
            "evictions": _evictions,
            "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
        }


def clear_cache() -> None:
    global _hits, _misses, _evictions
    with _lock:
        _entries.clear()
        _hits = _misses = _evictions = 0
