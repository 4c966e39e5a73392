from __future__ import annotations

from collections import Counter
from typing import Any

from ..resources import store


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def _clean(value: str | None) -> str:
    return value.strip().lower() if value else ""


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    related = [e for e in events if e["type"] == "related"]
    total = len(searches)

    # Average response time across both discovery operations
    times = [e["response_time_ms"] for e in searches + related if "response_time_ms" in e]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    keyword_counter: Counter[str] = Counter()
    category_counter: Counter[str] = Counter()
    tag_counter: Counter[str] = Counter()
    filter_counts = {"keyword": 0, "category": 0, "tags": 0}
    for s in searches:
        # Blank criteria are no-ops for the filter, so they are not counted here
        keyword = _clean(s.get("keyword"))
        if keyword:
            keyword_counter[keyword] += 1
            filter_counts["keyword"] += 1
        category = _clean(s.get("category"))
        if category:
            category_counter[category] += 1
            filter_counts["category"] += 1
        tags = [t for t in (_clean(t) for t in s.get("tags") or []) if t]
        if tags:
            tag_counter.update(tags)
            filter_counts["tags"] += 1

    fallbacks = sum(1 for r in related if r.get("popularity_fallback"))

    discovery = searches + related
    cache_hits = sum(1 for e in discovery if e.get("cache_hit"))

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_keywords": _top(keyword_counter),
        "top_categories": _top(category_counter),
        "top_tags": _top(tag_counter),
        "filter_usage": {k: _rate(v, total) for k, v in filter_counts.items()},
        "related_requests": {
            "total": len(related),
            "popularity_fallback": fallbacks,
            "fallback_rate": _rate(fallbacks, len(related)),
        },
        "cache_stats": {
            "hits": cache_hits,
            "misses": len(discovery) - cache_hits,
            "hit_rate": _rate(cache_hits, len(discovery)),
        },
        "engagement": {
            "ratings": store.count_ratings(),
            "comments": store.count_comments(),
            "favorites": store.count_favorites(),
        },
    }
