"""
Admissions Routes - announcements, merit lists, fee structures and schedules.
"""
from fastapi import APIRouter, Depends, Request, status

from middleware import require_admin
from models.content import AdmissionSchema
from services.content_service import ContentService, ResourceConfig
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload

public_router = APIRouter(prefix="/api/admissions", tags=["admissions"])
admin_router = APIRouter(prefix="/api/admin/admissions", tags=["admin-admissions"])

ADMISSIONS_LISTING = ListSpec(
    filters=(
        FilterField("type"),
        FilterField("program"),
        FilterField("academicYear"),
        FilterField("status"),
        FilterField("isPublished", kind="bool"),
        FilterField("isFeatured", kind="bool"),
    ),
    search_fields=("title", "description"),
    default_sort=[("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "title", "publishDate", "priority"),
    public_sort=[("isFeatured", -1), ("createdAt", -1)],
    published={"isPublished": True},
    public_exclude=("status", "isPublished", "isFeatured"),
)

admissions_service = ContentService(ResourceConfig(
    name="admission",
    collection="admissions",
    schema=AdmissionSchema,
    listing=ADMISSIONS_LISTING,
    toggles=("isPublished", "isFeatured"),
))


@public_router.get("")
async def list_admissions(request: Request):
    result = await admissions_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/{item_id}")
async def get_admission(item_id: str):
    return {"success": True, "data": await admissions_service.get(item_id, public=True)}


@admin_router.get("")
async def admin_list_admissions(request: Request, admin: dict = Depends(require_admin)):
    result = await admissions_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/{item_id}")
async def admin_get_admission(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await admissions_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED)
async def admin_create_admission(request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    admission = await admissions_service.create(data, admin["id"])
    return {"success": True, "message": "Admission created successfully", "data": admission}


@admin_router.put("/{item_id}")
async def admin_update_admission(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    admission = await admissions_service.update(item_id, data, admin["id"])
    return {"success": True, "message": "Admission updated successfully", "data": admission}


@admin_router.patch("/{item_id}/toggle-published")
async def admin_toggle_admission_published(item_id: str, admin: dict = Depends(require_admin)):
    admission = await admissions_service.toggle(item_id, "isPublished", admin["id"])
    state = "published" if admission["isPublished"] else "unpublished"
    return {
        "success": True,
        "message": f"Admission {state} successfully",
        "data": {"id": admission["id"], "isPublished": admission["isPublished"]},
    }


@admin_router.patch("/{item_id}/toggle-featured")
async def admin_toggle_admission_featured(item_id: str, admin: dict = Depends(require_admin)):
    admission = await admissions_service.toggle(item_id, "isFeatured", admin["id"])
    state = "featured" if admission["isFeatured"] else "unfeatured"
    return {
        "success": True,
        "message": f"Admission {state} successfully",
        "data": {"id": admission["id"], "isFeatured": admission["isFeatured"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_admission(item_id: str, admin: dict = Depends(require_admin)):
    result = await admissions_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Admission deleted successfully", "data": result}
