"""
Activities Routes - events, competitions, workshops and achievements.

Photos for an activity are uploaded as multipart `photos` files and stored
in its photoGallery. Updates send `existingPhotos` to keep; the rest are
removed from the media host.
"""
from fastapi import APIRouter, Depends, Request, status

from middleware import require_admin
from models.content import ActivitySchema
from models.media import split_kept_media
from services.content_service import ContentService, ResourceConfig
from services.media_storage import upload_batch
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload
from utils.rate_limiter import limit_uploads

public_router = APIRouter(prefix="/api/activities", tags=["activities"])
admin_router = APIRouter(prefix="/api/admin/activities", tags=["admin-activities"])

ACTIVITIES_LISTING = ListSpec(
    filters=(
        FilterField("type"),
        FilterField("category"),
        FilterField("status"),
        FilterField("isPublished", kind="bool"),
        FilterField("isFeatured", kind="bool"),
    ),
    search_fields=("title", "description"),
    default_sort=[("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "title", "publishDate", "priority"),
    public_sort=[("isFeatured", -1), ("createdAt", -1)],
    published={"isPublished": True},
    public_exclude=("isPublished", "isFeatured"),
)

activities_service = ContentService(ResourceConfig(
    name="activity",
    collection="activities",
    schema=ActivitySchema,
    listing=ACTIVITIES_LISTING,
    toggles=("isPublished", "isFeatured"),
    media_fields=("photoGallery",),
))


@public_router.get("")
async def list_activities(request: Request):
    result = await activities_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/{item_id}")
async def get_activity(item_id: str):
    return {"success": True, "data": await activities_service.get(item_id, public=True)}


@admin_router.get("")
async def admin_list_activities(request: Request, admin: dict = Depends(require_admin)):
    result = await activities_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/{item_id}")
async def admin_get_activity(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await activities_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_create_activity(request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    activities_service.validate(data)

    uploads = files.get("photos", [])
    if uploads:
        data["photoGallery"] = await upload_batch(uploads, "activities", data.get("title", ""))

    activity = await activities_service.create(data, admin["id"])
    return {"success": True, "message": "Activity created successfully", "data": activity}


@admin_router.put("/{item_id}", dependencies=[Depends(limit_uploads)])
async def admin_update_activity(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    existing = await activities_service.find(item_id)

    kept, removed = split_kept_media(existing.get("photoGallery") or [], data.pop("existingPhotos", None))
    activities_service.validate_patch(existing, data)

    uploads = files.get("photos", [])
    if uploads or removed:
        title = data.get("title") or existing.get("title", "")
        data["photoGallery"] = kept + await upload_batch(uploads, "activities", title)

    activity = await activities_service.update(item_id, data, admin["id"], replaced_media=removed)
    return {"success": True, "message": "Activity updated successfully", "data": activity}


@admin_router.patch("/{item_id}/toggle-published")
async def admin_toggle_activity_published(item_id: str, admin: dict = Depends(require_admin)):
    activity = await activities_service.toggle(item_id, "isPublished", admin["id"])
    state = "published" if activity["isPublished"] else "unpublished"
    return {
        "success": True,
        "message": f"Activity {state} successfully",
        "data": {"id": activity["id"], "isPublished": activity["isPublished"]},
    }


@admin_router.patch("/{item_id}/toggle-featured")
async def admin_toggle_activity_featured(item_id: str, admin: dict = Depends(require_admin)):
    activity = await activities_service.toggle(item_id, "isFeatured", admin["id"])
    state = "featured" if activity["isFeatured"] else "unfeatured"
    return {
        "success": True,
        "message": f"Activity {state} successfully",
        "data": {"id": activity["id"], "isFeatured": activity["isFeatured"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_activity(item_id: str, admin: dict = Depends(require_admin)):
    result = await activities_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Activity deleted successfully", "data": result}
