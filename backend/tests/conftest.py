"""
Pytest configuration and shared fixtures for backend tests.

The app runs in-process through TestClient without its lifespan, against an
in-memory mongomock-motor database and a recording media storage.
"""
import asyncio
import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ENVIRONMENT", "test")

BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from auth import create_access_token, hash_password
from database import database
from models.admin import new_admin_document
from models.media import MediaAsset
from server import app
from services.media_storage import MediaStorage, get_preset, set_media_storage, validate_upload
from utils.errors import UpstreamError
from utils.rate_limiter import rate_limiter

ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@college.edu"
ADMIN_PASSWORD = "Admin123!"


class FakeMediaStorage(MediaStorage):
    """Applies the real upload checks, then records instead of calling Cloudinary."""

    def __init__(self):
        self.uploads = []
        self.deleted = []
        self.fail_deletes = False
        self.fail_uploads_for = set()

    async def upload(self, file, category):
        preset = get_preset(category)
        data = await file.read()
        validate_upload(file.filename, file.content_type, len(data), preset)
        if file.filename in self.fail_uploads_for:
            raise UpstreamError("File upload failed")
        public_id = f"college-cms/{preset.folder}/{category}-{uuid.uuid4().hex[:8]}"
        url = f"https://res.cloudinary.com/demo/{preset.resource_type}/upload/v1/{public_id}.{file.filename.rsplit('.', 1)[-1]}"
        self.uploads.append(public_id)
        return MediaAsset(
            url=url,
            publicId=public_id,
            originalName=file.filename,
            size=len(data),
            mimeType=file.content_type,
        )

    async def delete(self, public_id, resource_type="image"):
        if self.fail_deletes:
            raise RuntimeError("media host unreachable")
        self.deleted.append(public_id)


@pytest.fixture(autouse=True)
def test_db():
    """Fresh in-memory database per test."""
    database.db = AsyncMongoMockClient()[f"college_cms_{uuid.uuid4().hex[:8]}"]
    yield database.db
    database.db = None


@pytest.fixture(autouse=True)
def reset_rate_limits():
    rate_limiter.clear()
    yield
    rate_limiter.clear()


@pytest.fixture(autouse=True)
def media_storage():
    storage = FakeMediaStorage()
    set_media_storage(storage)
    yield storage
    set_media_storage(None)


@pytest.fixture
def client():
    """Return a TestClient for the main FastAPI app (server:app)."""
    return TestClient(app)


@pytest.fixture
def admin_doc(test_db):
    """Seed an active super-admin and return the stored document."""
    doc = new_admin_document(
        ADMIN_USERNAME,
        ADMIN_EMAIL,
        hash_password(ADMIN_PASSWORD),
        "Site Admin",
        role="super-admin",
        now=datetime.now(timezone.utc),
    )
    doc["_id"] = ObjectId()
    asyncio.run(test_db.admins.insert_one(doc))
    return doc


@pytest.fixture
def auth_token(admin_doc):
    return create_access_token(str(admin_doc["_id"]))


@pytest.fixture
def auth_headers(auth_token):
    return {"Authorization": f"Bearer {auth_token}"}
