"""
Examinations Routes - schedules, results, rules and admit card notices.
"""
from fastapi import APIRouter, Depends, Request, status

from middleware import require_admin
from models.content import ExaminationSchema
from services.content_service import ContentService, ResourceConfig
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload

public_router = APIRouter(prefix="/api/examinations", tags=["examinations"])
admin_router = APIRouter(prefix="/api/admin/examinations", tags=["admin-examinations"])

EXAMINATIONS_LISTING = ListSpec(
    filters=(
        FilterField("type"),
        FilterField("class"),
        FilterField("status"),
        FilterField("isPublished", kind="bool"),
        FilterField("isFeatured", kind="bool"),
    ),
    search_fields=("title", "description", "subject"),
    default_sort=[("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "title", "examDate", "priority"),
    public_sort=[("isFeatured", -1), ("examDate", 1)],
    published={"isPublished": True},
    public_exclude=("isPublished", "isFeatured"),
)

examinations_service = ContentService(ResourceConfig(
    name="examination",
    collection="examinations",
    schema=ExaminationSchema,
    listing=EXAMINATIONS_LISTING,
    toggles=("isPublished", "isFeatured"),
))


@public_router.get("")
async def list_examinations(request: Request):
    result = await examinations_service.list(request.query_params, public=True)
    return {"success": True, **result}


@public_router.get("/{item_id}")
async def get_examination(item_id: str):
    return {"success": True, "data": await examinations_service.get(item_id, public=True)}


@admin_router.get("")
async def admin_list_examinations(request: Request, admin: dict = Depends(require_admin)):
    result = await examinations_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.get("/stats")
async def admin_examination_stats(admin: dict = Depends(require_admin)):
    stats = await examinations_service.stats(("type", "status", "class"))
    return {"success": True, "data": stats}


@admin_router.get("/{item_id}")
async def admin_get_examination(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await examinations_service.get(item_id)}


@admin_router.post("", status_code=status.HTTP_201_CREATED)
async def admin_create_examination(request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    examination = await examinations_service.create(data, admin["id"])
    return {"success": True, "message": "Examination created successfully", "data": examination}


@admin_router.put("/{item_id}")
async def admin_update_examination(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    examination = await examinations_service.update(item_id, data, admin["id"])
    return {"success": True, "message": "Examination updated successfully", "data": examination}


@admin_router.patch("/{item_id}/toggle-published")
async def admin_toggle_examination_published(item_id: str, admin: dict = Depends(require_admin)):
    examination = await examinations_service.toggle(item_id, "isPublished", admin["id"])
    state = "published" if examination["isPublished"] else "unpublished"
    return {
        "success": True,
        "message": f"Examination {state} successfully",
        "data": {"id": examination["id"], "isPublished": examination["isPublished"]},
    }


@admin_router.patch("/{item_id}/toggle-featured")
async def admin_toggle_examination_featured(item_id: str, admin: dict = Depends(require_admin)):
    examination = await examinations_service.toggle(item_id, "isFeatured", admin["id"])
    state = "featured" if examination["isFeatured"] else "unfeatured"
    return {
        "success": True,
        "message": f"Examination {state} successfully",
        "data": {"id": examination["id"], "isFeatured": examination["isFeatured"]},
    }


@admin_router.delete("/{item_id}")
async def admin_delete_examination(item_id: str, admin: dict = Depends(require_admin)):
    result = await examinations_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Examination deleted successfully", "data": result}
