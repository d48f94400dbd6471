"""
Media storage - Cloudinary-hosted images and documents.

Routes hand an uploaded file and a category to the configured storage and
persist the returned MediaAsset on the content document. Deletion is
best-effort: a failure to remove a remote asset is logged and never fails
the request that triggered it.
"""
import io
import logging
import os
import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from models.media import MediaAsset, asset_public_id
from utils.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

CLOUDINARY_ROOT_FOLDER = os.getenv("CLOUDINARY_ROOT_FOLDER", "college-cms")

MB = 1024 * 1024
IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
IMAGE_MIME_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

THUMBNAIL_TRANSFORMATION = "c_thumb,w_200,h_150"


@dataclass(frozen=True)
class MediaPreset:
    folder: str
    extensions: Tuple[str, ...]
    mime_types: Tuple[str, ...]
    max_bytes: int
    resource_type: str = "image"
    transformation: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def type_message(self) -> str:
        return f"Only {', '.join(self.extensions)} files are allowed"


MEDIA_PRESETS: Dict[str, MediaPreset] = {
    "news": MediaPreset(
        folder="news",
        extensions=IMAGE_EXTENSIONS,
        mime_types=IMAGE_MIME_TYPES,
        max_bytes=5 * MB,
        transformation=[
            {"width": 1200, "height": 800, "crop": "limit", "quality": "auto:good"},
            {"fetch_format": "auto"},
        ],
    ),
    "gallery": MediaPreset(
        folder="gallery",
        extensions=IMAGE_EXTENSIONS,
        mime_types=IMAGE_MIME_TYPES,
        max_bytes=10 * MB,
        transformation=[
            {"width": 1920, "height": 1080, "crop": "limit", "quality": "auto:good"},
            {"fetch_format": "auto"},
        ],
    ),
    "faculty": MediaPreset(
        folder="faculty",
        extensions=("jpg", "jpeg", "png", "webp"),
        mime_types=("image/jpeg", "image/png", "image/webp"),
        max_bytes=5 * MB,
        transformation=[
            {"width": 400, "height": 400, "crop": "fill", "gravity": "face", "quality": "auto:good"},
            {"fetch_format": "auto"},
        ],
    ),
    "activities": MediaPreset(
        folder="activities",
        extensions=IMAGE_EXTENSIONS,
        mime_types=IMAGE_MIME_TYPES,
        max_bytes=10 * MB,
        transformation=[
            {"width": 1600, "height": 900, "crop": "limit", "quality": "auto:good"},
            {"fetch_format": "auto"},
        ],
    ),
    "roll-numbers": MediaPreset(
        folder="roll-numbers",
        extensions=("pdf", "jpg", "jpeg", "png"),
        mime_types=("application/pdf", "image/jpeg", "image/png"),
        max_bytes=10 * MB,
        resource_type="raw",
    ),
}


def get_preset(category: str) -> MediaPreset:
    preset = MEDIA_PRESETS.get(category)
    if not preset:
        raise ValueError(f"Unknown media category: {category}")
    return preset


def thumbnail_url(url: Optional[str]) -> Optional[str]:
    """Derive the 200x150 thumbnail URL for an image hosted on Cloudinary."""
    if not url or "/upload/" not in url:
        return url
    return url.replace("/upload/", f"/upload/{THUMBNAIL_TRANSFORMATION}/", 1)


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """Recover the public id from a versioned Cloudinary URL (.../v123/<id>.<ext>)."""
    if not url or not isinstance(url, str):
        return None
    match = re.search(r"/v\d+/(.+)\.[^./]+$", url)
    return match.group(1) if match else None


def validate_upload(filename: Optional[str], content_type: Optional[str], size: int, preset: MediaPreset) -> None:
    extension = (filename or "").rsplit(".", 1)[-1].lower() if filename and "." in filename else ""
    if extension not in preset.extensions or (content_type or "").lower() not in preset.mime_types:
        raise ValidationError(
            preset.type_message,
            errors=[{"field": "file", "message": preset.type_message}],
        )
    if size > preset.max_bytes:
        limit_mb = preset.max_bytes // MB
        raise ValidationError(
            f"File too large. Maximum size is {limit_mb}MB",
            errors=[{"field": "file", "message": f"File exceeds {limit_mb}MB"}],
        )
    if size == 0:
        raise ValidationError("Empty file", errors=[{"field": "file", "message": "File is empty"}])


class MediaStorage(ABC):
    """Abstract media host."""

    @abstractmethod
    async def upload(self, file: UploadFile, category: str) -> MediaAsset:
        """Store the file under the category preset and return its asset record."""

    @abstractmethod
    async def delete(self, public_id: str, resource_type: str = "image") -> None:
        """Remove a remote asset. Raises on failure."""


class CloudinaryMediaStorage(MediaStorage):
    """Cloudinary implementation, configured from CLOUDINARY_* variables."""

    def __init__(self, root_folder: str = CLOUDINARY_ROOT_FOLDER):
        self.root_folder = root_folder
        self.configured = self._configure()

    @staticmethod
    def _configure() -> bool:
        cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME")
        api_key = os.getenv("CLOUDINARY_API_KEY")
        api_secret = os.getenv("CLOUDINARY_API_SECRET")

        if not cloud_name or not api_key or not api_secret:
            logger.warning("Cloudinary credentials not set - media uploads disabled")
            return False

        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        return True

    def _require_configured(self) -> None:
        if not self.configured:
            raise UpstreamError("Media storage is not configured")

    async def upload(self, file: UploadFile, category: str) -> MediaAsset:
        preset = get_preset(category)
        data = await file.read()
        validate_upload(file.filename, file.content_type, len(data), preset)
        self._require_configured()

        public_id = f"{category}-{uuid.uuid4().hex[:16]}"
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                folder=f"{self.root_folder}/{preset.folder}",
                public_id=public_id,
                resource_type=preset.resource_type,
                transformation=preset.transformation or None,
                overwrite=False,
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed for {file.filename}: {e}")
            raise UpstreamError("File upload failed", detail=str(e))

        url = result.get("secure_url") or result.get("url")
        logger.info(f"Uploaded {category} media {result.get('public_id')}")
        return MediaAsset(
            url=url,
            thumbnailUrl=thumbnail_url(url) if preset.resource_type == "image" else None,
            publicId=result.get("public_id"),
            originalName=file.filename,
            size=result.get("bytes") or len(data),
            mimeType=file.content_type,
        )

    async def delete(self, public_id: str, resource_type: str = "image") -> None:
        self._require_configured()
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.destroy, public_id, resource_type=resource_type
            )
        except CloudinaryError as e:
            raise UpstreamError("File delete failed", detail=str(e))
        if result.get("result") not in ("ok", "not found"):
            raise UpstreamError("File delete failed", detail=str(result))


_storage: Optional[MediaStorage] = None


def get_media_storage() -> MediaStorage:
    """Process-wide storage, created on first use."""
    global _storage
    if _storage is None:
        _storage = CloudinaryMediaStorage()
    return _storage


def set_media_storage(storage: Optional[MediaStorage]) -> None:
    global _storage
    _storage = storage


async def delete_media_quietly(asset: Optional[Dict[str, Any]], resource_type: str = "image") -> bool:
    """Best-effort removal of a stored asset; failures are logged and swallowed."""
    if not asset:
        return False
    public_id = asset_public_id(asset) or public_id_from_url(asset.get("url"))
    if not public_id:
        return False
    try:
        await get_media_storage().delete(public_id, resource_type=resource_type)
        return True
    except Exception as e:
        logger.warning(f"Failed to delete media {public_id}: {e}")
        return False


async def check_upload(file: UploadFile, category: str) -> None:
    """Validate a file against its category preset without storing it."""
    data = await file.read()
    await file.seek(0)
    validate_upload(file.filename, file.content_type, len(data), get_preset(category))


async def upload_batch(files: List[UploadFile], category: str, alt: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Store several files as one unit.

    Every file is checked before the first upload. If an upload fails part
    way, the assets already stored for this batch are removed and the error
    is re-raised.
    """
    for upload in files:
        await check_upload(upload, category)

    storage = get_media_storage()
    resource_type = get_preset(category).resource_type
    assets: List[Dict[str, Any]] = []
    try:
        for upload in files:
            asset = await storage.upload(upload, category)
            asset.alt = asset.alt or alt
            assets.append(asset.to_document())
    except Exception:
        logger.warning(f"{category} batch upload failed, removing {len(assets)} stored file(s)")
        for stored in assets:
            await delete_media_quietly(stored, resource_type)
        raise
    return assets
