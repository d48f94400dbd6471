"""Admin identity schemas."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.enums import AdminRole


class AdminPermissions(BaseModel):
    canManageNews: bool = True
    canManageGallery: bool = True
    canManageFaculty: bool = True
    canManageAdmissions: bool = True
    canManagePages: bool = True
    canManageContacts: bool = True
    canManageUsers: bool = False


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=1)


class AdminProfile(BaseModel):
    """Public view of an admin; never carries the password hash."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    id: str
    username: str
    email: str
    fullName: str
    role: AdminRole = AdminRole.ADMIN
    isActive: bool = True
    lastLogin: Optional[datetime] = None
    permissions: AdminPermissions = Field(default_factory=AdminPermissions)
    createdAt: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "AdminProfile":
        data = {k: v for k, v in doc.items() if k not in ("_id", "password")}
        data["id"] = str(doc["_id"])
        return cls.model_validate(data)


def new_admin_document(
    username: str,
    email: str,
    password_hash: str,
    full_name: str,
    role: AdminRole = AdminRole.ADMIN,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build a stored admin identity with default permissions."""
    return {
        "username": username,
        "email": email.lower(),
        "password": password_hash,
        "fullName": full_name,
        "role": AdminRole(role).value,
        "isActive": True,
        "lastLogin": None,
        "permissions": AdminPermissions().model_dump(),
        "createdAt": now,
        "updatedAt": now,
    }
