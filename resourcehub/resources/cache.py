"""
Short-lived cache for discovery results.

Keys combine the operation name, its parameters and the store revision, so
any write to the store makes earlier entries unreachable; they then age out
through the TTL or the size bound.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from typing import Any

from ..config import DEFAULT_APP_CONFIG

# Endpoints run in a threadpool; every access to the state below holds _lock.
_lock = threading.Lock()
_cache: OrderedDict[str, dict[str, Any]] = OrderedDict()
_hits: int = 0
_misses: int = 0


def _make_key(operation: str, params: dict, revision: int) -> str:
    normalized = json.dumps(
        {"op": operation, "rev": revision, "params": params},
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(
    operation: str,
    params: dict,
    revision: int,
    ttl: float = DEFAULT_APP_CONFIG.cache_ttl_seconds,
) -> Any | None:
    global _hits, _misses
    key = _make_key(operation, params, revision)
    with _lock:
        entry = _cache.get(key)
        if entry and time.time() - entry["created_at"] < ttl:
            _cache.move_to_end(key)
            _hits += 1
            return entry["value"]
        if entry:
            del _cache[key]
        _misses += 1
        return None


def cache_set(
    operation: str,
    params: dict,
    revision: int,
    value: Any,
    max_entries: int = DEFAULT_APP_CONFIG.cache_max_entries,
) -> None:
    key = _make_key(operation, params, revision)
    with _lock:
        _cache[key] = {"value": value, "created_at": time.time()}
        _cache.move_to_end(key)
        while len(_cache) > max_entries:
            _cache.popitem(last=False)


def get_cache_stats() -> dict:
    with _lock:
        total = _hits + _misses
        return {
            "size": len(_cache),
            "hits": _hits,
            "misses": _misses,
            "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
        }


def clear_cache() -> None:
    global _hits, _misses
    with _lock:
        _cache.clear()
        _hits = 0
        _misses = 0
