"""
Faculty Routes - staff directory with optional portrait.
"""
from fastapi import APIRouter, Depends, Request, status
import logging

from middleware import require_admin
from models.content import FacultySchema
from models.media import superseded_asset
from services.content_service import ContentService, ResourceConfig
from services.media_storage import get_media_storage
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload, single_file
from utils.rate_limiter import limit_uploads

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api/faculty", tags=["faculty"])
admin_router = APIRouter(prefix="/api/admin/faculty", tags=["admin-faculty"])

FACULTY_LISTING = ListSpec(
    filters=(
        FilterField("status"),
        FilterField("department"),
    ),
    search_fields=("name", "designation", "department", "specialization"),
    default_sort=[("displayOrder", 1), ("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "name", "department", "displayOrder"),
    default_limit=20,
    published={"status": "active"},
    public_exclude=("status",),
)

faculty_service = ContentService(ResourceConfig(
    name="faculty member",
    collection="faculty",
    schema=FacultySchema,
    listing=FACULTY_LISTING,
    media_fields=("image",),
))


async def _upload_portrait(upload, name: str):
    asset = await get_media_storage().upload(upload, "faculty")
    asset.alt = asset.alt or name
    return asset.to_document()


@public_router.get("")
async def list_faculty(request: Request):
    result = await faculty_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/department/{department}")
async def list_faculty_by_department(department: str, request: Request):
    params = dict(request.query_params)
    params["department"] = department
    result = await faculty_service.list(params, public=True)
    return {"success": True, "department": department, **result}


@public_router.get("/{item_id}")
async def get_faculty_member(item_id: str):
    return {"success": True, "data": await faculty_service.get(item_id, public=True)}


@admin_router.get("")
async def admin_list_faculty(request: Request, admin: dict = Depends(require_admin)):
    result = await faculty_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/stats")
async def admin_faculty_stats(admin: dict = Depends(require_admin)):
    stats = await faculty_service.stats(("department", "status"))
    return {"success": True, "data": stats}


@admin_router.get("/{item_id}")
async def admin_get_faculty_member(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await faculty_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_uploads)])
async def admin_create_faculty_member(request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    upload = single_file(files, "image")

    faculty_service.validate(data)
    if upload:
        data["image"] = await _upload_portrait(upload, data.get("name", ""))

    member = await faculty_service.create(data, admin["id"])
    return {"success": True, "message": "Faculty member created successfully", "data": member}


@admin_router.put("/{item_id}", dependencies=[Depends(limit_uploads)])
async def admin_update_faculty_member(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, files = await read_payload(request)
    existing = await faculty_service.find(item_id)
    upload = single_file(files, "image")
    faculty_service.validate_patch(existing, data)

    if upload:
        data["image"] = await _upload_portrait(upload, data.get("name") or existing.get("name", ""))
    replaced = superseded_asset(existing, data, "image")

    member = await faculty_service.update(item_id, data, admin["id"], replaced_media=replaced)
    return {"success": True, "message": "Faculty member updated successfully", "data": member}


@admin_router.delete("/{item_id}")
async def admin_delete_faculty_member(item_id: str, admin: dict = Depends(require_admin)):
    result = await faculty_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Faculty member deleted successfully", "data": result}
