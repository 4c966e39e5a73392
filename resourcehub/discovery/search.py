from __future__ import annotations

from collections.abc import Iterable

from .models import ResourceRecord


def _normalize(value: str | None) -> str:
    return value.strip().lower() if value else ""


def _matches_keyword(resource: ResourceRecord, keyword_lower: str) -> bool:
    if keyword_lower in resource.title.lower():
        return True
    return resource.description is not None and keyword_lower in resource.description.lower()


def _matches_category(resource: ResourceRecord, category_lower: str) -> bool:
    return any(c.name.lower() == category_lower for c in resource.categories)


def _matches_tags(resource: ResourceRecord, tags_lower: set[str]) -> bool:
    return any(t.name.lower() in tags_lower for t in resource.tags)


def filter_resources(
    resources: Iterable[ResourceRecord],
    keyword: str | None = None,
    category: str | None = None,
    tags: Iterable[str] | None = None,
) -> list[ResourceRecord]:
    """
    Narrow *resources* by keyword, category and tag criteria.

    Each non-empty criterion is applied in turn and can only remove records;
    blank or missing criteria are skipped. The input iteration order is kept.
    Requested tags are OR-ed: one matching tag name is enough.
    """
    if resources is None:
        raise TypeError("resources must be provided")

    results = list(resources)

    keyword_lower = _normalize(keyword)
    if keyword_lower:
        results = [r for r in results if _matches_keyword(r, keyword_lower)]

    category_lower = _normalize(category)
    if category_lower:
        results = [r for r in results if _matches_category(r, category_lower)]

    if isinstance(tags, str):
        tags = [tags]
    tags_lower = {_normalize(t) for t in tags or ()} - {""}
    if tags_lower:
        results = [r for r in results if _matches_tags(r, tags_lower)]

    return results
