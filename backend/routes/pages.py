"""
Page Content Routes - editable copy for the site's static pages.

One document per page, keyed by its pageId (home, about, ...). Each save
bumps the document's version.
"""
from fastapi import APIRouter, Depends, Request, Response, status
import logging

from database import database, db_errors
from middleware import require_admin
from models.content import PageContentSchema
from services.content_service import ContentService, ResourceConfig
from services.query_builder import FilterField, ListSpec
from utils.errors import NotFoundError
from utils.forms import read_payload

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api/pages", tags=["pages"])
admin_router = APIRouter(prefix="/api/admin/pages", tags=["admin-pages"])

PAGES_LISTING = ListSpec(
    filters=(FilterField("isActive", kind="bool"),),
    search_fields=("title",),
    default_sort=[("pageId", 1)],
    sortable=("pageId", "title", "updatedAt"),
    default_limit=20,
    published={"isActive": True},
    public_exclude=("isActive",),
)

pages_service = ContentService(ResourceConfig(
    name="page content",
    collection="pages",
    schema=PageContentSchema,
    listing=PAGES_LISTING,
    toggles=("isActive",),
))


async def _find_page(page_id: str, active_only: bool = False):
    query = {"pageId": page_id}
    if active_only:
        query["isActive"] = True
    with db_errors("Get pages"):
        return await database.get_db().pages.find_one(query)


@public_router.get("/{page_id}")
async def get_page_content(page_id: str):
    page = await _find_page(page_id, active_only=True)
    if not page:
        raise NotFoundError("Page content not found")
    return {"success": True, "data": pages_service.serialize(page, public=True)}


@admin_router.get("")
async def admin_list_pages(request: Request, admin: dict = Depends(require_admin)):
    result = await pages_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.put("/{page_id}")
async def admin_save_page(page_id: str, request: Request, response: Response, admin: dict = Depends(require_admin)):
    """Create the page on first save, otherwise update it and bump its version."""
    data, _ = await read_payload(request)
    data["pageId"] = page_id

    existing = await _find_page(page_id)
    if existing:
        version = existing.get("version", 1) + 1
        page = await pages_service.update(existing["_id"], data, admin["id"], extra={"version": version})
        return {"success": True, "message": "Page content updated successfully", "data": page}

    page = await pages_service.create(data, admin["id"], extra={"version": 1})
    logger.info(f"Page {page_id} created by {admin['id']}")
    response.status_code = status.HTTP_201_CREATED
    return {"success": True, "message": "Page content created successfully", "data": page}


@admin_router.patch("/{page_id}/toggle-published")
async def admin_toggle_page(page_id: str, admin: dict = Depends(require_admin)):
    existing = await _find_page(page_id)
    if not existing:
        raise NotFoundError("Page content not found")
    page = await pages_service.toggle(existing["_id"], "isActive", admin["id"])
    state = "published" if page["isActive"] else "unpublished"
    return {
        "success": True,
        "message": f"Page content {state} successfully",
        "data": {"pageId": page["pageId"], "isActive": page["isActive"]},
    }
