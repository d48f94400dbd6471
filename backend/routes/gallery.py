"""
Gallery Routes - campus photos with a single hosted image each.
"""
from fastapi import APIRouter, Depends, Request, status
import logging

from middleware import require_admin
from models.content import BulkDeleteRequest, GallerySchema
from models.media import superseded_asset
from services.content_service import ContentService, ResourceConfig
from services.media_storage import get_media_storage
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload, single_file
from utils.rate_limiter import limit_uploads

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api/gallery", tags=["gallery"])
admin_router = APIRouter(prefix="/api/admin/gallery", tags=["admin-gallery"])

GALLERY_LISTING = ListSpec(
    filters=(
        FilterField("category"),
        FilterField("isActive", kind="bool"),
    ),
    search_fields=("title", "description", "tags"),
    default_sort=[("displayOrder", 1), ("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "title", "displayOrder"),
    default_limit=12,
    published={"isActive": True},
    public_exclude=("isActive",),
)

gallery_service = ContentService(ResourceConfig(
    name="gallery item",
    collection="gallery",
    schema=GallerySchema,
    listing=GALLERY_LISTING,
    toggles=("isActive",),
    media_fields=("image",),
))


async def _upload(upload, title: str):
    asset = await get_media_storage().upload(upload, "gallery")
    asset.alt = asset.alt or title
    return asset.to_document()


@public_router.get("")
async def list_gallery(request: Request):
    result = await gallery_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/{item_id}")
async def get_gallery_item(item_id: str):
    return {"success": True, "data": await gallery_service.get(item_id, public=True)}


@admin_router.get("")
async def admin_list_gallery(request: Request, admin: dict = Depends(require_admin)):
    result = await gallery_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.post("/upload", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_upload_gallery_image(request: Request, admin: dict = Depends(require_admin)):
    """Store an image without creating a gallery item; returns its media record."""
    _, files = await read_payload(request)
    upload = single_file(files, "image", required=True)
    asset = await get_media_storage().upload(upload, "gallery")
    logger.info(f"Gallery image {asset.publicId} uploaded by {admin['id']}")
    return {"success": True, "message": "Image uploaded successfully", "data": asset.to_document()}


@admin_router.post("/bulk-delete")
async def admin_bulk_delete_gallery(body: BulkDeleteRequest, admin: dict = Depends(require_admin)):
    result = await gallery_service.bulk_delete(body.ids, admin["id"])
    return {"success": True, "message": f"{result['deletedCount']} gallery items deleted", "data": result}


@admin_router.get("/{item_id}")
async def admin_get_gallery_item(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await gallery_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_create_gallery_item(request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    upload = single_file(files, "image", required=not data.get("image"))

    gallery_service.validate(data)
    if upload:
        data["image"] = await _upload(upload, data.get("title", ""))

    item = await gallery_service.create(data, admin["id"])
    return {"success": True, "message": "Gallery item created successfully", "data": item}


@admin_router.put("/{item_id}", dependencies=[Depends(limit_uploads)])
async def admin_update_gallery_item(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    existing = await gallery_service.find(item_id)
    upload = single_file(files, "image")
    gallery_service.validate_patch(existing, data)

    if upload:
        data["image"] = await _upload(upload, data.get("title") or existing.get("title", ""))
    replaced = superseded_asset(existing, data, "image")

    item = await gallery_service.update(item_id, data, admin["id"], replaced_media=replaced)
    return {"success": True, "message": "Gallery item updated successfully", "data": item}


@admin_router.patch("/{item_id}/toggle-published")
async def admin_toggle_gallery_item(item_id: str, admin: dict = Depends(require_admin)):
    item = await gallery_service.toggle(item_id, "isActive", admin["id"])
    state = "published" if item["isActive"] else "unpublished"
    return {
        "success": True,
        "message": f"Gallery item {state} successfully",
        "data": {"id": item["id"], "isActive": item["isActive"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_gallery_item(item_id: str, admin: dict = Depends(require_admin)):
    result = await gallery_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Gallery item deleted successfully", "data": result}
