"""
News Routes - public listing/reading of published articles and admin management.

Articles carry up to 5 images uploaded as multipart `images` files. On
update the form sends `existingImages` (the images still shown); anything
missing from it is removed from the media host.
"""
from fastapi import APIRouter, Depends, Request, status
from typing import Any, Dict
import logging

from bson import ObjectId

from database import database, db_errors
from middleware import require_admin
from models.content import BulkDeleteRequest, NewsSchema, slugify
from models.media import split_kept_media, with_legacy_image
from services.content_service import ContentService, ResourceConfig
from services.media_storage import upload_batch
from services.query_builder import FilterField, ListSpec
from utils.errors import ValidationError
from utils.forms import read_payload
from utils.rate_limiter import limit_uploads

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api/news", tags=["news"])
admin_router = APIRouter(prefix="/api/admin/news", tags=["admin-news"])

MAX_IMAGES = 5

NEWS_LISTING = ListSpec(
    filters=(
        FilterField("status"),
        FilterField("category"),
        FilterField("featured", kind="bool"),
    ),
    search_fields=("title", "excerpt", "content"),
    default_sort=[("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "publishDate", "title", "views"),
    public_sort=[("featured", -1), ("publishDate", -1)],
    published={"status": "published"},
    public_exclude=("status",),
)

news_service = ContentService(ResourceConfig(
    name="news article",
    collection="news",
    schema=NewsSchema,
    listing=NEWS_LISTING,
    toggles=("featured",),
    media_fields=("images",),
    decorate=with_legacy_image,
))


async def _unique_slug(title: str, exclude_id=None) -> str:
    base = slugify(title) or "article"
    slug = base
    suffix = 1
    collection = database.get_db().news
    while True:
        query: Dict[str, Any] = {"slug": slug}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        with db_errors("Check news slug"):
            taken = await collection.find_one(query, {"_id": 1})
        if not taken:
            return slug
        suffix += 1
        slug = f"{base}-{suffix}"


def _check_image_count(count: int) -> None:
    if count > MAX_IMAGES:
        raise ValidationError(
            f"A news article can have at most {MAX_IMAGES} images",
            errors=[{"field": "images", "message": f"Maximum {MAX_IMAGES} images"}],
        )


# =========================
# PUBLIC ROUTES
# =========================

@public_router.get("")
async def list_news(request: Request):
    """Published articles, featured first."""
    result = await news_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/{id_or_slug}")
async def get_news(id_or_slug: str):
    """Published article by id or slug; each read counts as a view."""
    query = {"_id": ObjectId(id_or_slug)} if ObjectId.is_valid(id_or_slug) else {"slug": id_or_slug}
    article = await news_service.increment(query, "views")
    return {"success": True, "data": article}


# =========================
# ADMIN ROUTES
# =========================

@admin_router.get("")
async def admin_list_news(request: Request, admin: dict = Depends(require_admin)):
    result = await news_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/stats")
async def admin_news_stats(admin: dict = Depends(require_admin)):
    stats = await news_service.stats(("category", "status"))
    return {"success": True, "data": stats}


@admin_router.post("/bulk-delete")
async def admin_bulk_delete_news(body: BulkDeleteRequest, admin: dict = Depends(require_admin)):
    result = await news_service.bulk_delete(body.ids, admin["id"])
    return {"success": True, "message": f"{result['deletedCount']} articles deleted", "data": result}


@admin_router.get("/{item_id}")
async def admin_get_news(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await news_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_create_news(request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    uploads = files.get("images", [])
    _check_image_count(len(uploads))

    # Reject bad fields before anything reaches the media host
    news_service.validate(data)

    data["images"] = await upload_batch(uploads, "news", data.get("title", ""))
    slug = await _unique_slug(data["title"])
    article = await news_service.create(data, admin["id"], extra={"slug": slug, "views": 0})
    return {"success": True, "message": "News article created successfully", "data": article}


@admin_router.put("/{item_id}", dependencies=[Depends(limit_uploads)])
async def admin_update_news(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    existing = await news_service.find(item_id)

    kept, removed = split_kept_media(existing.get("images") or [], data.pop("existingImages", None))
    uploads = files.get("images", [])
    _check_image_count(len(kept) + len(uploads))

    news_service.validate_patch(existing, data)

    title = data.get("title") or existing.get("title", "")
    if uploads or removed:
        data["images"] = kept + await upload_batch(uploads, "news", title)

    extra = {}
    if data.get("title") and data["title"] != existing.get("title"):
        extra["slug"] = await _unique_slug(data["title"], exclude_id=existing["_id"])

    article = await news_service.update(item_id, data, admin["id"], replaced_media=removed, extra=extra)
    return {"success": True, "message": "News article updated successfully", "data": article}


@admin_router.patch("/{item_id}/toggle-featured")
async def admin_toggle_news_featured(item_id: str, admin: dict = Depends(require_admin)):
    article = await news_service.toggle(item_id, "featured", admin["id"])
    state = "featured" if article["featured"] else "unfeatured"
    return {
        "success": True,
        "message": f"News article {state} successfully",
        "data": {"id": article["id"], "featured": article["featured"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_news(item_id: str, admin: dict = Depends(require_admin)):
    result = await news_service.delete(item_id, admin["id"])
    return {"success": True, "message": "News article deleted successfully", "data": result}
