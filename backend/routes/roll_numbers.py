"""
Roll Number Routes - downloadable roll number slips per program and session.

The slip file (PDF or image) is stored on the media host as a raw asset;
its URL, name, size and public id live flat on the document.
"""
from fastapi import APIRouter, Depends, Request, status
from typing import Any, Dict, List
import logging

from middleware import require_admin
from models.content import RollNumberSchema
from services.content_service import ContentService, ResourceConfig, parse_object_id
from services.media_storage import get_media_storage
from services.query_builder import FilterField, ListSpec, parse_bool
from utils.forms import read_payload, single_file
from utils.rate_limiter import limit_uploads

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api/roll-numbers", tags=["roll-numbers"])
admin_router = APIRouter(prefix="/api/admin/roll-numbers", tags=["admin-roll-numbers"])

FILE_FIELDS = ("fileUrl", "fileName", "fileSize", "filePublicId")

ROLL_NUMBERS_LISTING = ListSpec(
    filters=(
        FilterField("program"),
        FilterField("session", kind="regex"),
        FilterField("academicYear"),
        FilterField("isActive", kind="bool"),
    ),
    search_fields=("name", "session"),
    default_sort=[("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "name", "academicYear", "downloadCount"),
    default_limit=20,
    public_sort=[("academicYear", -1), ("program", 1), ("name", 1)],
    published={"isActive": True},
    public_exclude=("isActive",),
)


def _stored_file(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    if not doc.get("fileUrl"):
        return []
    return [{"url": doc["fileUrl"], "publicId": doc.get("filePublicId")}]


roll_numbers_service = ContentService(ResourceConfig(
    name="roll number",
    collection="roll_numbers",
    schema=RollNumberSchema,
    listing=ROLL_NUMBERS_LISTING,
    toggles=("isActive",),
    media_resource_type="raw",
    hidden_fields=("filePublicId",),
    media_of=_stored_file,
))


async def _upload_slip(upload) -> Dict[str, Any]:
    asset = await get_media_storage().upload(upload, "roll-numbers")
    return {
        "fileUrl": asset.url,
        "fileName": asset.originalName,
        "fileSize": asset.size,
        "filePublicId": asset.publicId,
    }


# =========================
# PUBLIC ROUTES
# =========================

@public_router.get("")
async def list_roll_numbers(request: Request):
    result = await roll_numbers_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/{item_id}")
async def get_roll_number(item_id: str):
    return {"success": True, "data": await roll_numbers_service.get(item_id, public=True)}


@public_router.post("/{item_id}/download")
async def download_roll_number(item_id: str):
    """Count a download and hand back the file location."""
    query = {"_id": parse_object_id(item_id, "roll number")}
    slip = await roll_numbers_service.increment(query, "downloadCount")
    return {
        "success": True,
        "data": {
            "id": slip["id"],
            "fileUrl": slip.get("fileUrl"),
            "fileName": slip.get("fileName"),
            "downloadCount": slip.get("downloadCount", 0),
        },
    }


# =========================
# ADMIN ROUTES
# =========================

@admin_router.get("")
async def admin_list_roll_numbers(request: Request, admin: dict = Depends(require_admin)):
    result = await roll_numbers_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/stats")
async def admin_roll_number_stats(admin: dict = Depends(require_admin)):
    stats = await roll_numbers_service.stats(("program", "academicYear"))
    return {"success": True, "data": stats}


@admin_router.post("/upload", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_upload_roll_number_file(request: Request, admin: dict = Depends(require_admin)):
    """Store a slip file without attaching it; returns the file fields to submit."""
    _, files = await read_payload(request)
    upload = single_file(files, "file", required=True)
    stored = await _upload_slip(upload)
    logger.info(f"Roll number file {stored['filePublicId']} uploaded by {admin['id']}")
    return {"success": True, "message": "File uploaded successfully", "data": stored}


@admin_router.get("/{item_id}")
async def admin_get_roll_number(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await roll_numbers_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_create_roll_number(request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    upload = single_file(files, "file")
    roll_numbers_service.validate(data)

    if upload:
        data.update(await _upload_slip(upload))

    slip = await roll_numbers_service.create(data, admin["id"], extra={"downloadCount": 0})
    return {"success": True, "message": "Roll number created successfully", "data": slip}


@admin_router.put("/{item_id}", dependencies=[Depends(limit_uploads)])
async def admin_update_roll_number(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    existing = await roll_numbers_service.find(item_id)
    upload = single_file(files, "file")
    remove_file = parse_bool("removeFile", data.pop("removeFile", False))
    roll_numbers_service.validate_patch(existing, data)

    replaced = []
    file_changed = upload or remove_file or (
        data.get("fileUrl") and data.get("fileUrl") != existing.get("fileUrl")
    )
    if file_changed:
        replaced = _stored_file(existing)
        if upload:
            data.update(await _upload_slip(upload))
        elif remove_file:
            data.update({name: None for name in FILE_FIELDS})

    slip = await roll_numbers_service.update(item_id, data, admin["id"], replaced_media=replaced)
    return {"success": True, "message": "Roll number updated successfully", "data": slip}


@admin_router.patch("/{item_id}/toggle-published")
async def admin_toggle_roll_number(item_id: str, admin: dict = Depends(require_admin)):
    slip = await roll_numbers_service.toggle(item_id, "isActive", admin["id"])
    state = "published" if slip["isActive"] else "unpublished"
    return {
        "success": True,
        "message": f"Roll number {state} successfully",
        "data": {"id": slip["id"], "isActive": slip["isActive"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_roll_number(item_id: str, admin: dict = Depends(require_admin)):
    result = await roll_numbers_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Roll number deleted successfully", "data": result}
