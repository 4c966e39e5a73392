"""
In-memory storage for resources and everything hanging off them.

Resources reference their categories and tags by id only. Reads materialize
fresh, immutable ``ResourceRecord`` values, so callers always get a consistent
snapshot they can filter and rank without holding the lock.
"""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from ..discovery.models import CategoryRef, ResourceRecord, TagRef
from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from .models import TagOut

logger = logging.getLogger(__name__)


@dataclass
class _ResourceRow:
    id: int
    title: str
    description: str | None
    file_path: str | None
    uploader_id: int | None
    view_count: int = 0
    download_count: int = 0
    category_ids: list[int] = field(default_factory=list)
    tag_ids: list[int] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass
class _TagRow:
    id: int
    name: str
    description: str | None = None
    is_predefined: bool = False
    created_by: int | None = None
    usage_count: int = 0


_lock = threading.RLock()
_loaded = False
_revision = 0

_resources: dict[int, _ResourceRow] = {}
_categories: dict[int, str] = {}
_tags: dict[int, _TagRow] = {}
_ratings: dict[tuple[int, int], int] = {}
_averages: dict[int, float] = {}
_comments: list[dict[str, Any]] = []
_favorites: dict[tuple[int, int], datetime] = {}

_resource_ids = itertools.count(1)
_category_ids = itertools.count(1)
_tag_ids = itertools.count(1)
_comment_ids = itertools.count(1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _split_names(value: Any) -> list[str]:
    if pd.isna(value):
        return []
    return [n.strip() for n in str(value).split("|") if n.strip()]


def _optional_str(value: Any) -> str | None:
    return None if pd.isna(value) else str(value)


def _bump() -> None:
    global _revision
    _revision += 1


# ── Seed loading ─────────────────────────────────────────────────────────


def _load(config: StoreConfig) -> None:
    global _resource_ids, _category_ids, _tag_ids, _comment_ids

    _resources.clear()
    _categories.clear()
    _tags.clear()
    _ratings.clear()
    _averages.clear()
    _comments.clear()
    _favorites.clear()
    _category_ids = itertools.count(1)
    _comment_ids = itertools.count(1)

    tags_df = pd.read_csv(config.tags_path)
    for row in tags_df.itertuples(index=False):
        created_by = None if pd.isna(row.created_by) else int(row.created_by)
        _tags[int(row.id)] = _TagRow(
            id=int(row.id),
            name=str(row.name),
            description=_optional_str(row.description),
            is_predefined=str(row.is_predefined).strip().lower() == "true",
            created_by=created_by,
        )

    resources_df = pd.read_csv(config.resources_path)
    resources_df["created_at"] = pd.to_datetime(
        resources_df["created_at"], errors="coerce", utc=True,
    )
    for row in resources_df.itertuples(index=False):
        resource = _ResourceRow(
            id=int(row.id),
            title=str(row.title),
            description=_optional_str(row.description),
            file_path=_optional_str(row.file_path),
            uploader_id=None if pd.isna(row.uploader_id) else int(row.uploader_id),
            view_count=int(row.view_count),
            download_count=int(row.download_count),
            created_at=row.created_at.to_pydatetime() if pd.notna(row.created_at) else None,
        )
        for name in _split_names(row.categories):
            resource.category_ids.append(_category_id_for(name))
        for name in _split_names(row.tags):
            tag = _find_tag_by_name(name)
            if tag is None:
                logger.warning("Seed resource %s references unknown tag %r", resource.id, name)
                continue
            if tag.id not in resource.tag_ids:
                resource.tag_ids.append(tag.id)
                tag.usage_count += 1
        _resources[resource.id] = resource

    if config.ratings_path.exists():
        ratings_df = pd.read_csv(config.ratings_path)
        for row in ratings_df.itertuples(index=False):
            resource_id = int(row.resource_id)
            if resource_id not in _resources:
                logger.warning("Skipping rating for unknown resource %s", resource_id)
                continue
            _ratings[(int(row.user_id), resource_id)] = int(row.rating)
        for resource_id in _resources:
            _refresh_average(resource_id)

    _resource_ids = itertools.count(max(_resources, default=0) + 1)
    _tag_ids = itertools.count(max(_tags, default=0) + 1)

    logger.info(
        "Loaded %d resources, %d tags, %d ratings from %s",
        len(_resources), len(_tags), len(_ratings), config.seed_dir,
    )


def _ensure_loaded() -> None:
    global _loaded
    if not _loaded:
        with _lock:
            if not _loaded:
                _load(DEFAULT_STORE_CONFIG)
                _loaded = True


def reset_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> None:
    """Discard all state and reload the seed data."""
    global _loaded
    with _lock:
        _load(config)
        _loaded = True
        _bump()


def get_revision() -> int:
    """Monotonic counter bumped on every write; used to key cached results."""
    _ensure_loaded()
    return _revision


# ── Internal helpers (call with the lock held) ───────────────────────────


def _category_id_for(name: str) -> int:
    for cid, existing in _categories.items():
        if existing == name:
            return cid
    cid = next(_category_ids)
    _categories[cid] = name
    return cid


def _find_tag_by_name(name: str) -> _TagRow | None:
    lowered = name.lower()
    for tag in _tags.values():
        if tag.name.lower() == lowered:
            return tag
    return None


def _refresh_average(resource_id: int) -> None:
    values = [v for (_, rid), v in _ratings.items() if rid == resource_id]
    if values:
        _averages[resource_id] = round(sum(values) / len(values), 2)
    else:
        _averages.pop(resource_id, None)


def _require_resource(resource_id: int) -> _ResourceRow:
    row = _resources.get(resource_id)
    if row is None:
        raise NotFoundError(f"Resource {resource_id} not found")
    return row


def _require_tag(tag_id: int) -> _TagRow:
    tag = _tags.get(tag_id)
    if tag is None:
        raise NotFoundError(f"Tag {tag_id} not found")
    return tag


def _tag_out(tag: _TagRow) -> TagOut:
    return TagOut(
        id=tag.id,
        name=tag.name,
        description=tag.description,
        is_predefined=tag.is_predefined,
        usage_count=tag.usage_count,
    )


def _to_record(row: _ResourceRow) -> ResourceRecord:
    return ResourceRecord(
        id=row.id,
        title=row.title,
        description=row.description,
        file_path=row.file_path,
        uploader_id=row.uploader_id,
        average_rating=_averages.get(row.id),
        view_count=row.view_count,
        download_count=row.download_count,
        categories=tuple(CategoryRef(id=cid, name=_categories[cid]) for cid in row.category_ids),
        tags=tuple(
            TagRef(
                id=tid,
                name=_tags[tid].name,
                usage_count=_tags[tid].usage_count,
                is_predefined=_tags[tid].is_predefined,
            )
            for tid in row.tag_ids
        ),
        created_at=row.created_at,
    )


# ── Resources ────────────────────────────────────────────────────────────


def load_all_resources() -> list[ResourceRecord]:
    """Return a full snapshot of every resource, ordered by id."""
    _ensure_loaded()
    with _lock:
        return [_to_record(_resources[rid]) for rid in sorted(_resources)]


def get_resource(resource_id: int) -> ResourceRecord:
    _ensure_loaded()
    with _lock:
        return _to_record(_require_resource(resource_id))


def create_resource(
    uploader_id: int,
    title: str,
    description: str | None,
    file_path: str,
    categories: list[str] | None = None,
    tags: list[str] | None = None,
) -> ResourceRecord:
    """
    Store a new resource record.

    Categories are matched by exact name and created when missing. Tags are
    matched case-insensitively; unknown names become custom tags owned by the
    uploader. Every tag association bumps that tag's usage count once.
    """
    if not title or not title.strip():
        raise ValidationError("Title cannot be empty.")

    _ensure_loaded()
    with _lock:
        row = _ResourceRow(
            id=next(_resource_ids),
            title=title.strip(),
            description=description,
            file_path=file_path,
            uploader_id=uploader_id,
            created_at=_now(),
        )
        for name in categories or []:
            name = name.strip()
            if name:
                cid = _category_id_for(name)
                if cid not in row.category_ids:
                    row.category_ids.append(cid)
        for name in tags or []:
            name = name.strip()
            if not name:
                continue
            tag = _find_tag_by_name(name)
            if tag is None:
                tag = _TagRow(id=next(_tag_ids), name=name, created_by=uploader_id)
                _tags[tag.id] = tag
            if tag.id not in row.tag_ids:
                row.tag_ids.append(tag.id)
                tag.usage_count += 1
        _resources[row.id] = row
        _bump()
        logger.info("User %s uploaded resource %s (%s)", uploader_id, row.id, row.title)
        return _to_record(row)


def increment_view_count(resource_id: int) -> ResourceRecord:
    _ensure_loaded()
    with _lock:
        row = _require_resource(resource_id)
        row.view_count += 1
        _bump()
        return _to_record(row)


def increment_download_count(resource_id: int) -> ResourceRecord:
    _ensure_loaded()
    with _lock:
        row = _require_resource(resource_id)
        row.download_count += 1
        _bump()
        return _to_record(row)


def list_categories() -> list[dict[str, Any]]:
    _ensure_loaded()
    with _lock:
        return [{"id": cid, "name": name} for cid, name in sorted(_categories.items())]


# ── Ratings ──────────────────────────────────────────────────────────────


def add_rating(user_id: int, resource_id: int, value: int) -> float:
    """Record a 1-5 rating and return the resource's new average."""
    if not 1 <= value <= 5:
        raise ValidationError("Rating must be between 1 and 5.")

    _ensure_loaded()
    with _lock:
        _require_resource(resource_id)
        key = (user_id, resource_id)
        if key in _ratings:
            raise ConflictError("You have already rated this resource.")
        _ratings[key] = value
        _refresh_average(resource_id)
        _bump()
        return _averages[resource_id]


def count_ratings() -> int:
    _ensure_loaded()
    return len(_ratings)


# ── Comments ─────────────────────────────────────────────────────────────


def add_comment(user_id: int, resource_id: int, content: str) -> dict[str, Any]:
    if not content or not content.strip():
        raise ValidationError("Comment cannot be empty.")

    _ensure_loaded()
    with _lock:
        _require_resource(resource_id)
        comment = {
            "id": next(_comment_ids),
            "resource_id": resource_id,
            "user_id": user_id,
            "content": content.strip(),
            "created_at": _now(),
        }
        _comments.append(comment)
        return dict(comment)


def list_comments(resource_id: int) -> list[dict[str, Any]]:
    """Return comments on a resource, newest first."""
    _ensure_loaded()
    with _lock:
        _require_resource(resource_id)
        found = [dict(c) for c in _comments if c["resource_id"] == resource_id]
    return sorted(found, key=lambda c: (c["created_at"], c["id"]), reverse=True)


def count_comments(resource_id: int | None = None) -> int:
    _ensure_loaded()
    with _lock:
        if resource_id is None:
            return len(_comments)
        return sum(1 for c in _comments if c["resource_id"] == resource_id)


# ── Favorites ────────────────────────────────────────────────────────────


def toggle_favorite(user_id: int, resource_id: int) -> bool:
    """Flip the favorite flag and return whether the resource is now favorited."""
    _ensure_loaded()
    with _lock:
        _require_resource(resource_id)
        key = (user_id, resource_id)
        if key in _favorites:
            del _favorites[key]
            return False
        _favorites[key] = _now()
        return True


def is_favorited(user_id: int, resource_id: int) -> bool:
    _ensure_loaded()
    return (user_id, resource_id) in _favorites


def list_favorites(user_id: int) -> list[ResourceRecord]:
    _ensure_loaded()
    with _lock:
        return [
            _to_record(_resources[rid])
            for (uid, rid) in _favorites
            if uid == user_id and rid in _resources
        ]


def count_favorites(resource_id: int | None = None) -> int:
    _ensure_loaded()
    with _lock:
        if resource_id is None:
            return len(_favorites)
        return sum(1 for (_, rid) in _favorites if rid == resource_id)


# ── Tags ─────────────────────────────────────────────────────────────────


def list_tags() -> list[TagOut]:
    _ensure_loaded()
    with _lock:
        return [_tag_out(_tags[tid]) for tid in sorted(_tags)]


def list_predefined_tags() -> list[TagOut]:
    return [t for t in list_tags() if t.is_predefined]


def list_popular_tags(limit: int = 20) -> list[TagOut]:
    tags = sorted(list_tags(), key=lambda t: -t.usage_count)
    return tags[:limit]


def search_tags(keyword: str) -> list[TagOut]:
    lowered = keyword.strip().lower()
    return [t for t in list_tags() if lowered in t.name.lower()]


def list_tags_by_creator(user_id: int) -> list[TagOut]:
    _ensure_loaded()
    with _lock:
        return [_tag_out(t) for tid, t in sorted(_tags.items()) if t.created_by == user_id]


def get_tag(tag_id: int) -> TagOut:
    _ensure_loaded()
    with _lock:
        return _tag_out(_require_tag(tag_id))


def create_tag(user_id: int, name: str, description: str | None = None) -> TagOut:
    if not name or not name.strip():
        raise ValidationError("Tag name cannot be empty.")
    name = name.strip()

    _ensure_loaded()
    with _lock:
        if _find_tag_by_name(name) is not None:
            raise ConflictError("Tag already exists.")
        tag = _TagRow(
            id=next(_tag_ids),
            name=name,
            description=description,
            created_by=user_id,
        )
        _tags[tag.id] = tag
        _bump()
        return _tag_out(tag)


def delete_tag(user_id: int, tag_id: int) -> None:
    """Delete a custom tag owned by *user_id* and detach it from resources."""
    _ensure_loaded()
    with _lock:
        tag = _require_tag(tag_id)
        if tag.is_predefined:
            raise PermissionDeniedError("Cannot delete predefined tags.")
        if tag.created_by != user_id:
            raise PermissionDeniedError("You can only delete tags you created.")
        for row in _resources.values():
            if tag_id in row.tag_ids:
                row.tag_ids.remove(tag_id)
        del _tags[tag_id]
        _bump()
