from fastapi import APIRouter, Depends, Request
from datetime import datetime, timezone
import logging

from auth import create_access_token, hash_password, validate_password_strength, verify_password
from database import database, db_errors
from middleware import require_admin
from models.admin import AdminProfile, ChangePasswordRequest, LoginRequest
from services.content_service import parse_object_id
from utils.errors import AuthenticationError, NotFoundError, ValidationError
from utils.rate_limiter import limit_login_attempts, login_rate_key, rate_limiter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/auth", tags=["admin-auth"])

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/login", dependencies=[Depends(limit_login_attempts)])
async def login(request: Request, credentials: LoginRequest):
    """Admin login by username or email."""
    db = database.get_db()
    handle = credentials.username.strip()

    with db_errors("Admin login"):
        admin = await db.admins.find_one({
            "$or": [{"username": handle}, {"email": handle.lower()}],
            "isActive": True,
        })

    # Unknown handle, wrong password and deactivated account look the same
    if not admin or not verify_password(credentials.password, admin.get("password", "")):
        logger.warning(f"Failed admin login for {handle}")
        raise AuthenticationError(INVALID_CREDENTIALS)

    now = datetime.now(timezone.utc)
    with db_errors("Admin login"):
        await db.admins.update_one({"_id": admin["_id"]}, {"$set": {"lastLogin": now}})
    admin["lastLogin"] = now

    rate_limiter.reset(login_rate_key(request))
    token = create_access_token(str(admin["_id"]))
    logger.info(f"Admin {admin['username']} logged in")

    return {
        "success": True,
        "message": "Login successful",
        "data": {
            "admin": AdminProfile.from_document(admin).model_dump(mode="json"),
            "token": token,
        },
    }


@router.get("/profile")
async def get_profile(admin: dict = Depends(require_admin)):
    db = database.get_db()
    with db_errors("Load admin profile"):
        doc = await db.admins.find_one({"_id": parse_object_id(admin.get("id"), "admin")})
    if not doc:
        raise NotFoundError("Admin not found")
    return {"success": True, "data": AdminProfile.from_document(doc).model_dump(mode="json")}


@router.put("/change-password")
async def change_password(body: ChangePasswordRequest, admin: dict = Depends(require_admin)):
    is_valid, message = validate_password_strength(body.newPassword)
    if not is_valid:
        raise ValidationError(message, errors=[{"field": "newPassword", "message": message}])

    db = database.get_db()
    with db_errors("Change admin password"):
        doc = await db.admins.find_one({"_id": parse_object_id(admin.get("id"), "admin")})
    if not doc:
        raise NotFoundError("Admin not found")

    if not verify_password(body.currentPassword, doc.get("password", "")):
        logger.warning(f"Rejected password change for {doc['username']}: wrong current password")
        raise AuthenticationError("Current password is incorrect")

    with db_errors("Change admin password"):
        await db.admins.update_one(
            {"_id": doc["_id"]},
            {"$set": {"password": hash_password(body.newPassword), "updatedAt": datetime.now(timezone.utc)}},
        )
    logger.info(f"Admin {doc['username']} changed password")
    return {"success": True, "message": "Password changed successfully"}


@router.post("/refresh")
async def refresh_token(admin: dict = Depends(require_admin)):
    """Re-issue a token while the identity still exists and is active."""
    admin_id = admin.get("id")
    if not admin_id:
        raise AuthenticationError("Invalid token.")

    db = database.get_db()
    with db_errors("Refresh admin token"):
        doc = await db.admins.find_one({"_id": parse_object_id(admin_id, "admin"), "isActive": True})
    if not doc:
        raise AuthenticationError("Admin not found or inactive")

    return {
        "success": True,
        "message": "Token refreshed successfully",
        "data": {"token": create_access_token(str(doc["_id"]))},
    }
