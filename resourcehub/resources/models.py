from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ResourceCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    file_path: str = Field(..., min_length=1, description="Name of the already-stored file")
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class CommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class TagCreateRequest(BaseModel):
    name: str = Field(..., max_length=50)
    description: str | None = None


class TagOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    is_predefined: bool
    usage_count: int


class CommentOut(BaseModel):
    id: int
    content: str
    user_name: str
    user_email: str
    created_at: datetime


class ResourceDetailResponse(BaseModel):
    id: int
    title: str
    description: str | None
    file_path: str | None
    uploader_id: int | None
    uploader_name: str
    uploader_email: str
    average_rating: float | None
    view_count: int
    download_count: int
    categories: list[str]
    tags: list[str]
    comment_count: int
    favorite_count: int
    is_favorited_by_current_user: bool
    created_at: datetime | None


class FavoriteToggleResponse(BaseModel):
    favorited: bool
    message: str
