from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .analytics.aggregator import compute_analytics
from .analytics.events import get_events
from .auth.dependencies import get_current_user, require_admin, require_user
from .auth.users import authenticate, get_user
from .config import DEFAULT_APP_CONFIG
from .discovery import InvalidArgumentError, ResourceNotFoundError, ResourceRecord
from .discovery.config import DEFAULT_SCORING_CONFIG
from .resources import store
from .resources.cache import get_cache_stats
from .resources.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .resources.models import (
    CommentOut,
    CommentRequest,
    FavoriteToggleResponse,
    LoginRequest,
    RatingRequest,
    ResourceCreateRequest,
    ResourceDetailResponse,
    TagCreateRequest,
    TagOut,
)
from .resources.service import related_resources, search_resources

logger = logging.getLogger(__name__)


def configure_logging(level: str = DEFAULT_APP_CONFIG.log_level) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


configure_logging()

app = FastAPI(title="ResourceHub API", version=__version__)
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)


# ── Error translation ────────────────────────────────────────────────────


def _error(status_code: int, exc: Exception) -> JSONResponse:
    logger.info("%s -> %d: %s", type(exc).__name__, status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(ResourceNotFoundError)
@app.exception_handler(NotFoundError)
def not_found_handler(request: Request, exc: LookupError) -> JSONResponse:
    return _error(404, exc)


@app.exception_handler(InvalidArgumentError)
@app.exception_handler(ValidationError)
def bad_request_handler(request: Request, exc: ValueError) -> JSONResponse:
    return _error(400, exc)


@app.exception_handler(ConflictError)
def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return _error(409, exc)


@app.exception_handler(PermissionDeniedError)
def forbidden_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return _error(403, exc)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    categories = sorted(c["name"] for c in store.list_categories())
    tags = sorted(t.name for t in store.list_tags())
    return {"categories": categories, "tags": tags}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Resources ────────────────────────────────────────────────────────────


@app.get("/resources", response_model=list[ResourceRecord])
def list_resources() -> list[ResourceRecord]:
    return store.load_all_resources()


@app.post("/resources", response_model=ResourceRecord, status_code=201)
def upload_resource(
    body: ResourceCreateRequest,
    user: dict = Depends(require_user),
) -> ResourceRecord:
    return store.create_resource(
        uploader_id=user["id"],
        title=body.title,
        description=body.description,
        file_path=body.file_path,
        categories=body.categories,
        tags=body.tags,
    )


@app.get("/resources/search", response_model=list[ResourceRecord])
def search(
    keyword: str | None = None,
    category: str | None = None,
    tags: list[str] | None = Query(default=None),
) -> list[ResourceRecord]:
    return search_resources(keyword=keyword, category=category, tags=tags)


@app.get("/resources/categories")
def categories() -> list[dict]:
    return store.list_categories()


@app.get("/resources/favorites", response_model=list[ResourceRecord])
def favorites(user: dict = Depends(require_user)) -> list[ResourceRecord]:
    return store.list_favorites(user["id"])


@app.get("/resources/{resource_id}/details", response_model=ResourceDetailResponse)
def resource_details(
    resource_id: int,
    user: dict | None = Depends(get_current_user),
) -> ResourceDetailResponse:
    resource = store.increment_view_count(resource_id)
    uploader = get_user(resource.uploader_id)
    return ResourceDetailResponse(
        id=resource.id,
        title=resource.title,
        description=resource.description,
        file_path=resource.file_path,
        uploader_id=resource.uploader_id,
        uploader_name=uploader["name"] if uploader else "Unknown",
        uploader_email=uploader["email"] if uploader else "",
        average_rating=resource.average_rating,
        view_count=resource.view_count,
        download_count=resource.download_count,
        categories=[c.name for c in resource.categories],
        tags=[t.name for t in resource.tags],
        comment_count=store.count_comments(resource_id),
        favorite_count=store.count_favorites(resource_id),
        is_favorited_by_current_user=bool(user) and store.is_favorited(user["id"], resource_id),
        created_at=resource.created_at,
    )


@app.get("/resources/{resource_id}/related", response_model=list[ResourceRecord])
def related(
    resource_id: int, limit: int = DEFAULT_SCORING_CONFIG.default_limit,
) -> list[ResourceRecord]:
    return related_resources(resource_id, limit)


@app.post("/resources/{resource_id}/downloads")
def increment_downloads(resource_id: int) -> dict:
    resource = store.increment_download_count(resource_id)
    return {"status": "ok", "download_count": resource.download_count}


@app.post("/resources/{resource_id}/rate")
def rate_resource(
    resource_id: int,
    body: RatingRequest,
    user: dict = Depends(require_user),
) -> dict:
    average = store.add_rating(user["id"], resource_id, body.rating)
    return {"status": "ok", "average_rating": average}


@app.post("/resources/{resource_id}/comments", response_model=CommentOut, status_code=201)
def add_comment(
    resource_id: int,
    body: CommentRequest,
    user: dict = Depends(require_user),
) -> CommentOut:
    comment = store.add_comment(user["id"], resource_id, body.content)
    return _comment_out(comment)


@app.get("/resources/{resource_id}/comments", response_model=list[CommentOut])
def get_comments(resource_id: int) -> list[CommentOut]:
    return [_comment_out(c) for c in store.list_comments(resource_id)]


def _comment_out(comment: dict) -> CommentOut:
    author = get_user(comment["user_id"])
    return CommentOut(
        id=comment["id"],
        content=comment["content"],
        user_name=author["name"] if author else "Unknown",
        user_email=author["email"] if author else "",
        created_at=comment["created_at"],
    )


@app.post("/resources/{resource_id}/favorite", response_model=FavoriteToggleResponse)
def toggle_favorite(
    resource_id: int,
    user: dict = Depends(require_user),
) -> FavoriteToggleResponse:
    favorited = store.toggle_favorite(user["id"], resource_id)
    message = "Added to favorites" if favorited else "Removed from favorites"
    return FavoriteToggleResponse(favorited=favorited, message=message)


# ── Tags ─────────────────────────────────────────────────────────────────


@app.get("/tags", response_model=list[TagOut])
def all_tags() -> list[TagOut]:
    return store.list_tags()


@app.get("/tags/predefined", response_model=list[TagOut])
def predefined_tags() -> list[TagOut]:
    return store.list_predefined_tags()


@app.get("/tags/popular", response_model=list[TagOut])
def popular_tags(limit: int = Query(default=20, ge=1, le=100)) -> list[TagOut]:
    return store.list_popular_tags(limit)


@app.get("/tags/search", response_model=list[TagOut])
def search_tags(keyword: str) -> list[TagOut]:
    return store.search_tags(keyword)


@app.get("/tags/mine", response_model=list[TagOut])
def my_tags(user: dict = Depends(require_user)) -> list[TagOut]:
    return store.list_tags_by_creator(user["id"])


@app.post("/tags", response_model=TagOut, status_code=201)
def create_tag(
    body: TagCreateRequest,
    user: dict = Depends(require_user),
) -> TagOut:
    return store.create_tag(user["id"], body.name, body.description)


@app.get("/tags/{tag_id}", response_model=TagOut)
def tag_details(tag_id: int) -> TagOut:
    return store.get_tag(tag_id)


@app.delete("/tags/{tag_id}")
def delete_tag(tag_id: int, user: dict = Depends(require_user)) -> dict:
    store.delete_tag(user["id"], tag_id)
    return {"status": "deleted"}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
