"""
Discovery service.

Responsibilities:
- Take a snapshot from the store and hand it to the pure discovery core.
- Cache results per store revision.
- Record search / related events for the analytics dashboard.
"""
from __future__ import annotations

import logging
import time

from ..analytics.events import record_event
from ..discovery import ResourceRecord, filter_resources, recommend
from ..discovery.config import DEFAULT_SCORING_CONFIG
from . import store
from .cache import cache_get, cache_set

logger = logging.getLogger(__name__)


def _elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 3)


def search_resources(
    keyword: str | None = None,
    category: str | None = None,
    tags: list[str] | None = None,
) -> list[ResourceRecord]:
    start_time = time.time()
    params = {
        "keyword": keyword,
        "category": category,
        "tags": sorted(tags) if tags else None,
    }
    revision = store.get_revision()

    results = cache_get("search", params, revision)
    cache_hit = results is not None
    if cache_hit:
        logger.debug("Search cache hit for %s", params)
    else:
        results = filter_resources(store.load_all_resources(), keyword, category, tags)
        cache_set("search", params, revision, results)

    record_event("search", {
        "keyword": keyword,
        "category": category,
        "tags": tags or [],
        "results_returned": len(results),
        "response_time_ms": _elapsed_ms(start_time),
        "cache_hit": cache_hit,
    })
    return results


def related_resources(
    resource_id: int, limit: int = DEFAULT_SCORING_CONFIG.default_limit,
) -> list[ResourceRecord]:
    """
    Rank resources related to *resource_id*.

    ``InvalidArgumentError`` and ``ResourceNotFoundError`` from the core are
    propagated unchanged; nothing is recorded or cached for failed requests.
    """
    start_time = time.time()
    params = {"resource_id": resource_id, "limit": limit}
    revision = store.get_revision()

    cached = cache_get("related", params, revision)
    cache_hit = cached is not None
    if cache_hit:
        logger.debug("Related cache hit for %s", params)
    else:
        snapshot = store.load_all_resources()
        results = recommend(snapshot, resource_id, limit)
        reference = next(r for r in snapshot if r.id == resource_id)
        cached = {"results": results, "popularity_fallback": not reference.tags}
        cache_set("related", params, revision, cached)

    results = cached["results"]
    record_event("related", {
        "resource_id": resource_id,
        "limit": limit,
        "popularity_fallback": cached["popularity_fallback"],
        "results_returned": len(results),
        "response_time_ms": _elapsed_ms(start_time),
        "cache_hit": cache_hit,
    })
    return results
