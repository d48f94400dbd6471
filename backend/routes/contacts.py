"""
Contact Routes - public contact form and the admin inbox.

Messages are never readable publicly; the public surface is the rate-limited
submission endpoint only.
"""
from fastapi import APIRouter, Depends, Request, status
import logging

from middleware import require_admin
from models.content import CONTACT_EDITABLE_FIELDS, BulkDeleteRequest, ContactSchema
from services.content_service import ContentService, ResourceConfig
from services.query_builder import FilterField, ListSpec
from utils.forms import read_payload
from utils.rate_limiter import client_key, limit_contact_submissions

logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api/contact", tags=["contact"])
admin_router = APIRouter(prefix="/api/admin/contacts", tags=["admin-contacts"])

CONTACTS_LISTING = ListSpec(
    filters=(
        FilterField("status"),
        FilterField("category"),
        FilterField("priority"),
    ),
    search_fields=("name", "email", "subject"),
    default_sort=[("createdAt", -1)],
    sortable=("createdAt", "updatedAt", "name", "status", "priority"),
)

contacts_service = ContentService(ResourceConfig(
    name="contact message",
    collection="contacts",
    schema=ContactSchema,
    listing=CONTACTS_LISTING,
))


@public_router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(limit_contact_submissions)])
async def submit_contact(request: Request):
    data, _ = await read_payload(request)
    # Triage fields are set by staff, not by the sender
    for name in ("status", "priority", "notes", "ipAddress", "userAgent"):
        data.pop(name, None)

    message = await contacts_service.create(
        data,
        admin_id=None,
        extra={"ipAddress": client_key(request), "userAgent": request.headers.get("user-agent")},
    )
    logger.info(f"Contact message {message['id']} received from {message['email']}")
    return {
        "success": True,
        "message": "Thank you for your message. We will get back to you soon!",
        "data": {key: message.get(key) for key in ("id", "name", "email", "subject")},
    }


@admin_router.get("")
async def admin_list_contacts(request: Request, admin: dict = Depends(require_admin)):
    result = await contacts_service.list(request.query_params)
    return {"success": True, **result}


@admin_router.post("/bulk-delete")
async def admin_bulk_delete_contacts(body: BulkDeleteRequest, admin: dict = Depends(require_admin)):
    result = await contacts_service.bulk_delete(body.ids, admin["id"])
    return {"success": True, "message": f"{result['deletedCount']} messages deleted", "data": result}


@admin_router.get("/{item_id}")
async def admin_get_contact(item_id: str, admin: dict = Depends(require_admin)):
    return {"success": True, "data": await contacts_service.get(item_id)}


@admin_router.put("/{item_id}")
async def admin_update_contact(item_id: str, request: Request, admin: dict = Depends(require_admin)):
    data, _ = await read_payload(request)
    patch = {key: value for key, value in data.items() if key in CONTACT_EDITABLE_FIELDS}
    message = await contacts_service.update(item_id, patch, admin["id"])
    return {"success": True, "message": "Contact updated successfully", "data": message}


@admin_router.delete("/{item_id}")
async def admin_delete_contact(item_id: str, admin: dict = Depends(require_admin)):
    result = await contacts_service.delete(item_id, admin["id"])
    return {"success": True, "message": "Contact deleted successfully", "data": result}
