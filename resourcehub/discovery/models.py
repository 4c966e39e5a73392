from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class TagRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    usage_count: int = Field(default=0, ge=0)
    is_predefined: bool = False


class ResourceRecord(BaseModel):
    """Read-only view of an uploaded resource, as supplied by the store."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str | None = None
    file_path: str | None = None
    uploader_id: int | None = None
    average_rating: float | None = None
    view_count: int = Field(default=0, ge=0)
    download_count: int = Field(default=0, ge=0)
    categories: tuple[CategoryRef, ...] = ()
    tags: tuple[TagRef, ...] = ()
    created_at: datetime | None = None

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: tuple[CategoryRef, ...]) -> tuple[CategoryRef, ...]:
        seen: set[str] = set()
        unique = []
        for category in value:
            if category.name not in seen:
                seen.add(category.name)
                unique.append(category)
        return tuple(unique)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: tuple[TagRef, ...]) -> tuple[TagRef, ...]:
        seen: set[int] = set()
        unique = []
        for tag in value:
            if tag.id not in seen:
                seen.add(tag.id)
                unique.append(tag)
        return tuple(unique)

    @property
    def tag_ids(self) -> frozenset[int]:
        return frozenset(tag.id for tag in self.tags)
