"""
Request schemas for every content type.

Field names are the camelCase names stored in MongoDB and exchanged with
the admin panel. Enum-typed fields validate against models/enums.py and are
stored as their plain string values.

Updates are validated by merging the patch into the stored document and
validating the result against the same schema (see `validate_update`), so
cross-field rules such as passingMarks <= totalMarks hold after partial
edits too.
"""
import re
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from models.enums import (
    ActivityCategory,
    ActivityPriority,
    ActivityType,
    AdmissionProgram,
    AdmissionStatus,
    AdmissionType,
    ClassLevel,
    ContactCategory,
    ContactPriority,
    ContactStatus,
    EventStatus,
    ExaminationType,
    FacultyStatus,
    GalleryCategory,
    NewsCategory,
    NewsStatus,
    PageId,
    Priority,
    RollNumberColor,
    RollNumberProgram,
    VideoCategory,
    VideoPlatform,
)
from models.media import MediaAsset
from utils.video import apply_youtube_defaults

# Managed by the service layer, never taken from a request body
SYSTEM_FIELDS = ("_id", "id", "createdBy", "lastModifiedBy", "createdAt", "updatedAt", "__v")

DURATION_PATTERN = r"^(\d{1,2}:)?\d{1,2}:\d{2}$"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )

    # Fields recomputed from other fields and written on every update
    derived_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _blank_strings_to_none(cls, data: Any) -> Any:
        # HTML forms submit untouched inputs as ""
        if isinstance(data, dict):
            return {k: (None if isinstance(v, str) and not v.strip() else v) for k, v in data.items()}
        return data

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value or []

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def validate_update(model: Type[ContentModel], existing: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a partial update against the full schema.

    Returns only the fields to write: those named in the patch plus the
    model's derived fields.
    """
    patch = {k: v for k, v in patch.items() if k not in SYSTEM_FIELDS}
    merged = {k: v for k, v in existing.items() if k not in SYSTEM_FIELDS}
    merged.update(patch)

    validated = model.model_validate(merged)
    dumped = validated.model_dump(by_alias=True)
    keys = set(patch) | set(model.derived_fields)
    return {k: v for k, v in dumped.items() if k in keys}


# ============================================================================
# NEWS
# ============================================================================

class NewsSchema(ContentModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    excerpt: Optional[str] = Field(None, max_length=300)
    category: NewsCategory = NewsCategory.NEWS
    status: NewsStatus = NewsStatus.PUBLISHED
    featured: bool = False
    images: List[MediaAsset] = Field(default_factory=list, max_length=5)
    publishDate: Optional[datetime] = Field(default_factory=utcnow)
    eventDate: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)

    derived_fields: ClassVar[Tuple[str, ...]] = ("excerpt",)

    @model_validator(mode="after")
    def _default_excerpt(self):
        if not self.excerpt:
            self.excerpt = self.content[:200] + "..." if len(self.content) > 200 else self.content
        return self


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return re.sub(r"-+", "-", slug).strip("-")


# ============================================================================
# GALLERY
# ============================================================================

class GallerySchema(ContentModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: GalleryCategory = GalleryCategory.CAMPUS
    tags: List[str] = Field(default_factory=list)
    isActive: bool = True
    displayOrder: int = 0
    image: Optional[MediaAsset] = None


# ============================================================================
# FACULTY
# ============================================================================

class FacultySchema(ContentModel):
    name: str = Field(..., min_length=1, max_length=100)
    designation: str = Field(..., min_length=1, max_length=100)
    department: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    experience: Optional[str] = None
    qualifications: Optional[str] = None
    specialization: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)
    bio: Optional[str] = Field(None, max_length=2000)
    image: Optional[MediaAsset] = None
    status: FacultyStatus = FacultyStatus.ACTIVE
    displayOrder: int = 0


# ============================================================================
# ADMISSIONS
# ============================================================================

class AdmissionSchema(ContentModel):
    type: AdmissionType
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=3000)
    academicYear: str = Field(..., min_length=1)
    program: AdmissionProgram
    specialization: Optional[str] = None
    class_level: ClassLevel = Field(ClassLevel.ALL, alias="class")
    status: AdmissionStatus = AdmissionStatus.DRAFT
    priority: Priority = Priority.MEDIUM
    isPublished: bool = False
    isFeatured: bool = False
    importantDates: List[Dict[str, Any]] = Field(default_factory=list)
    # Nested sections are stored as submitted
    meritListData: Optional[Dict[str, Any]] = None
    feeStructure: Optional[Dict[str, Any]] = None
    eligibilityCriteria: Optional[Dict[str, Any]] = None
    requirements: Optional[Dict[str, Any]] = None
    applicationProcess: Optional[Dict[str, Any]] = None
    contactInfo: Optional[Dict[str, Any]] = None
    attachments: List[Dict[str, Any]] = Field(default_factory=list)
    announcements: List[Dict[str, Any]] = Field(default_factory=list)
    faqs: List[Dict[str, Any]] = Field(default_factory=list)
    statistics: Optional[Dict[str, Any]] = None
    publishDate: Optional[datetime] = Field(default_factory=utcnow)
    expiryDate: Optional[datetime] = None


# ============================================================================
# EXAMINATIONS
# ============================================================================

class ExaminationSchema(ContentModel):
    type: ExaminationType
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    examDate: Optional[datetime] = None
    examTime: Optional[str] = None
    subject: Optional[str] = Field(None, max_length=100)
    class_level: ClassLevel = Field(..., alias="class")
    program: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=200)
    duration: Optional[str] = None
    totalMarks: Optional[float] = Field(None, ge=0)
    passingMarks: Optional[float] = Field(None, ge=0)
    status: EventStatus = EventStatus.UPCOMING
    priority: Priority = Priority.MEDIUM
    isPublished: bool = True
    isFeatured: bool = False
    resultData: Optional[Dict[str, Any]] = None
    admitCardInfo: Optional[Dict[str, Any]] = None
    attachments: List[Dict[str, Any]] = Field(default_factory=list)
    importantDates: List[Dict[str, Any]] = Field(default_factory=list)
    publishDate: Optional[datetime] = Field(default_factory=utcnow)
    expiryDate: Optional[datetime] = None

    @model_validator(mode="after")
    def _passing_within_total(self):
        if self.totalMarks is not None and self.passingMarks is not None and self.passingMarks > self.totalMarks:
            raise ValueError("passingMarks cannot exceed totalMarks")
        return self


# ============================================================================
# ACTIVITIES
# ============================================================================

class ActivitySchema(ContentModel):
    type: ActivityType
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=3000)
    category: ActivityCategory
    subCategory: Optional[str] = None
    status: EventStatus = EventStatus.UPCOMING
    priority: ActivityPriority = ActivityPriority.MEDIUM
    isPublished: bool = True
    isFeatured: bool = False
    eventDetails: Optional[Dict[str, Any]] = None
    achievementDetails: Optional[Dict[str, Any]] = None
    competitionDetails: Optional[Dict[str, Any]] = None
    workshopDetails: Optional[Dict[str, Any]] = None
    photoGallery: List[MediaAsset] = Field(default_factory=list)
    socialMedia: Optional[Dict[str, Any]] = None
    statistics: Optional[Dict[str, Any]] = None
    organizedBy: Optional[Dict[str, Any]] = None
    budget: Optional[Dict[str, Any]] = None
    tags: List[str] = Field(default_factory=list)
    publishDate: Optional[datetime] = Field(default_factory=utcnow)


# ============================================================================
# VIDEOS
# ============================================================================

class VideoSchema(ContentModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    videoUrl: str = Field(..., min_length=1)
    videoId: Optional[str] = None
    thumbnailUrl: Optional[str] = None
    platform: VideoPlatform = VideoPlatform.YOUTUBE
    category: VideoCategory = VideoCategory.OTHER
    duration: str = Field(..., pattern=DURATION_PATTERN)
    views: str = "0"
    uploadDate: Optional[datetime] = Field(default_factory=utcnow)
    isPublished: bool = True
    isFeatured: bool = False
    tags: List[str] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    statistics: Optional[Dict[str, Any]] = None

    derived_fields: ClassVar[Tuple[str, ...]] = ("videoId", "thumbnailUrl")

    @field_validator("views", mode="before")
    @classmethod
    def _views_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, (int, float)) else value

    @model_validator(mode="before")
    @classmethod
    def _youtube_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = apply_youtube_defaults(dict(data))
        return data

    @model_validator(mode="after")
    def _require_video_id(self):
        if not self.videoId:
            raise ValueError("videoId is required when it cannot be derived from videoUrl")
        return self


# ============================================================================
# ROLL NUMBERS
# ============================================================================

class RollNumberSchema(ContentModel):
    name: str = Field(..., min_length=1, max_length=200)
    session: str = Field(..., min_length=1, max_length=100)
    program: RollNumberProgram
    color: RollNumberColor = RollNumberColor.BLUE
    academicYear: str = "2025-26"
    isActive: bool = True
    fileUrl: Optional[str] = None
    fileName: Optional[str] = None
    fileSize: Optional[int] = Field(None, ge=0)
    filePublicId: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


# ============================================================================
# CONTACTS
# ============================================================================

class ContactCreate(ContentModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)
    category: ContactCategory = ContactCategory.GENERAL

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class ContactSchema(ContactCreate):
    status: ContactStatus = ContactStatus.NEW
    priority: ContactPriority = ContactPriority.MEDIUM
    notes: Optional[str] = Field(None, max_length=2000)
    ipAddress: Optional[str] = None
    userAgent: Optional[str] = None


# Fields the admin panel may change on a message
CONTACT_EDITABLE_FIELDS = ("status", "priority", "category", "notes")


class BulkDeleteRequest(BaseModel):
    ids: List[str]


# ============================================================================
# PAGE CONTENT
# ============================================================================

class PageMetaData(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    description: Optional[str] = Field(None, max_length=160)
    keywords: List[str] = Field(default_factory=list)


class PageContentSchema(ContentModel):
    """Editable copy for one static site page; `content` is free-form per page."""
    pageId: PageId
    title: str = Field(..., min_length=1, max_length=200)
    content: Dict[str, Any] = Field(default_factory=dict)
    metaData: PageMetaData = Field(default_factory=PageMetaData)
    isActive: bool = True
