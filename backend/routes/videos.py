"""
Videos Routes - embedded campus videos (YouTube ids are derived from the URL).
"""
from fastapi import APIRouter, Depends, Request, status

from database import database, db_errors
from middleware import require_admin
from models.content import BulkDeleteRequest, VideoSchema
from services.content_service import ContentService, ResourceConfig
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload
from utils.video import with_video_fields

public_router = APIRouter(prefix="/api/videos", tags=["videos"])
admin_router = APIRouter(prefix="/api/admin/videos", tags=["admin-videos"])

VIDEOS_LISTING = ListSpec(
    filters=(
        FilterField("category"),
        FilterField("platform"),
        FilterField("isPublished", kind="bool"),
        FilterField("isFeatured", kind="bool"),
    ),
    search_fields=("title", "description", "tags"),
    default_sort=[("uploadDate", -1)],
    sortable=("createdAt", "updatedAt", "title", "uploadDate"),
    default_limit=12,
    public_sort=[("isFeatured", -1), ("uploadDate", -1)],
    published={"isPublished": True},
    public_exclude=("isPublished",),
)

videos_service = ContentService(ResourceConfig(
    name="video",
    collection="videos",
    schema=VideoSchema,
    listing=VIDEOS_LISTING,
    toggles=("isPublished", "isFeatured"),
    decorate=with_video_fields,
))


@public_router.get("")
async def list_videos(request: Request):
    """Published videos plus the categories that currently have any."""
    result = await videos_service.list(request.query_params, public=True)
    with db_errors("List video categories"):
        categories = await database.get_db().videos.distinct("category", {"isPublished": True})
    return {"success": True, **result, "categories": sorted(categories)}


@public_router.get("/{item_id}")
async def get_video(item_id: str):
    return {"success": True, "data": await videos_service.get(item_id, public=True)}


@admin_router.get("")
async def admin_list_videos(request: Request, admin: dict = Depends(require_admin)):
    result = await videos_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/stats")
async def admin_video_stats(admin: dict = Depends(require_admin)):
    stats = await videos_service.stats(("category", "platform"))
    stats["featured"] = await videos_service.count({"isFeatured": True})
    return {"success": True, "data": stats}


@admin_router.post("/bulk-delete")
async def admin_bulk_delete_videos(body: BulkDeleteRequest, admin: dict = Depends(require_admin)):
    result = await videos_service.bulk_delete(body.ids, admin["id"])
    return {"success": True, "message": f"{result['deletedCount']} videos deleted", "data": result}


@admin_router.get("/{item_id}")
async def admin_get_video(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await videos_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED)
async def admin_create_video(request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    video = await videos_service.create(data, admin["id"])
    return {"success": True, "message": "Video created successfully", "data": video}


@admin_router.put("/{item_id}")
async def admin_update_video(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    video = await videos_service.update(item_id, data, admin["id"])
    return {"success": True, "message": "Video updated successfully", "data": video}


@admin_router.patch("/{item_id}/toggle-published")
async def admin_toggle_video_published(item_id: str, admin: dict = Depends(require_admin)):
    video = await videos_service.toggle(item_id, "isPublished", admin["id"])
    state = "published" if video["isPublished"] else "unpublished"
    return {
        "success": True,
        "message": f"Video {state} successfully",
        "data": {"id": video["id"], "isPublished": video["isPublished"]},
    }


@admin_router.patch("/{item_id}/toggle-featured")
async def admin_toggle_video_featured(item_id: str, admin: dict = Depends(require_admin)):
    video = await videos_service.toggle(item_id, "isFeatured", admin["id"])
    state = "featured" if video["isFeatured"] else "unfeatured"
    return {
        "success": True,
        "message": f"Video {state} successfully",
        "data": {"id": video["id"], "isFeatured": video["isFeatured"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_video(item_id: str, admin: dict = Depends(require_admin)):
    result = await videos_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Video deleted successfully", "data": result}
