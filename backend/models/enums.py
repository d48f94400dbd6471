"""
Shared option lists for every content type.

Pydantic schemas validate against these enums and GET /api/options serves
the same values to the admin panel, so both layers read one source.
"""
from enum import Enum
from typing import Dict, List, Type

# ============================================================================
# ADMIN
# ============================================================================

class AdminRole(str, Enum):
    SUPER_ADMIN = "super-admin"
    ADMIN = "admin"
    CONTENT_MANAGER = "content-manager"

# ============================================================================
# NEWS
# ============================================================================

class NewsCategory(str, Enum):
    ANNOUNCEMENT = "announcement"
    EVENT = "event"
    NEWS = "news"
    ACHIEVEMENT = "achievement"
    ADMISSION = "admission"

class NewsStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

# ============================================================================
# GALLERY
# ============================================================================

class GalleryCategory(str, Enum):
    CAMPUS = "campus"
    EVENTS = "events"
    SPORTS = "sports"
    ACADEMICS = "academics"
    ACHIEVEMENTS = "achievements"
    FACILITIES = "facilities"

# ============================================================================
# FACULTY
# ============================================================================

class FacultyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

# ============================================================================
# ACADEMIC (shared by admissions and examinations)
# ============================================================================

class ClassLevel(str, Enum):
    HSSC_I = "HSSC-I"
    HSSC_II = "HSSC-II"
    BS_I = "BS-I"
    BS_II = "BS-II"
    BS_III = "BS-III"
    BS_IV = "BS-IV"
    ALL = "All"

class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"

# ============================================================================
# ADMISSIONS
# ============================================================================

class AdmissionType(str, Enum):
    ANNOUNCEMENT = "announcement"
    MERIT_LIST = "merit-list"
    POLICY = "policy"
    SCHEDULE = "schedule"
    FEE_STRUCTURE = "fee-structure"
    REQUIREMENT = "requirement"
    FORM = "form"

class AdmissionProgram(str, Enum):
    HSSC = "HSSC"
    BS = "BS"
    BOTH = "Both"

class AdmissionStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"

# ============================================================================
# EXAMINATIONS
# ============================================================================

class ExaminationType(str, Enum):
    SCHEDULE = "schedule"
    RESULT = "result"
    RULE = "rule"
    ADMIT_CARD = "admit-card"
    APPEAL = "appeal"
    ANNOUNCEMENT = "announcement"

# ============================================================================
# ACTIVITIES
# ============================================================================

class ActivityType(str, Enum):
    EVENT = "event"
    PHOTO_GALLERY = "photo-gallery"
    ACHIEVEMENT = "achievement"
    ANNOUNCEMENT = "announcement"
    COMPETITION = "competition"
    WORKSHOP = "workshop"

class ActivityCategory(str, Enum):
    SPORTS = "Sports"
    ACADEMIC = "Academic"
    CULTURAL = "Cultural"
    SOCIAL = "Social"
    ALUMNI = "Alumni"
    CO_CURRICULAR = "Co-Curricular"
    OTHER = "Other"

class ActivityPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

# ============================================================================
# VIDEOS
# ============================================================================

class VideoPlatform(str, Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    DIRECT = "direct"
    OTHER = "other"

class VideoCategory(str, Enum):
    CAMPUS_LIFE = "Campus Life"
    ACADEMICS = "Academics"
    STUDENT_LIFE = "Student Life"
    SPORTS = "Sports"
    EVENTS = "Events"
    FACILITIES = "Facilities"
    ANNOUNCEMENTS = "Announcements"
    OTHER = "Other"

# ============================================================================
# ROLL NUMBERS
# ============================================================================

class RollNumberProgram(str, Enum):
    HSSC = "HSSC"
    BS = "BS"

class RollNumberColor(str, Enum):
    BLUE = "blue"
    RED = "red"
    GREEN = "green"
    PURPLE = "purple"
    INDIGO = "indigo"
    ORANGE = "orange"

# ============================================================================
# CONTACTS
# ============================================================================

class ContactStatus(str, Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"

class ContactPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ContactCategory(str, Enum):
    GENERAL = "general"
    ADMISSIONS = "admissions"
    ACADEMIC = "academic"
    COMPLAINT = "complaint"
    SUGGESTION = "suggestion"

# ============================================================================
# PAGE CONTENT
# ============================================================================

class PageId(str, Enum):
    HOME = "home"
    ABOUT = "about"
    ACADEMICS = "academics"
    ADMISSIONS = "admissions"
    DEPARTMENTS = "departments"
    PRINCIPAL_MESSAGE = "principal-message"


OPTION_GROUPS: Dict[str, Dict[str, Type[Enum]]] = {
    "admins": {"role": AdminRole},
    "news": {"category": NewsCategory, "status": NewsStatus},
    "gallery": {"category": GalleryCategory},
    "faculty": {"status": FacultyStatus},
    "admissions": {
        "type": AdmissionType,
        "program": AdmissionProgram,
        "class": ClassLevel,
        "status": AdmissionStatus,
        "priority": Priority,
    },
    "examinations": {
        "type": ExaminationType,
        "class": ClassLevel,
        "status": EventStatus,
        "priority": Priority,
    },
    "activities": {
        "type": ActivityType,
        "category": ActivityCategory,
        "status": EventStatus,
        "priority": ActivityPriority,
    },
    "videos": {"platform": VideoPlatform, "category": VideoCategory},
    "roll-numbers": {"program": RollNumberProgram, "color": RollNumberColor},
    "contacts": {
        "status": ContactStatus,
        "priority": ContactPriority,
        "category": ContactCategory,
    },
    "pages": {"pageId": PageId},
}


def option_values() -> Dict[str, Dict[str, List[str]]]:
    """Plain-JSON view of OPTION_GROUPS."""
    return {
        resource: {field: [member.value for member in enum] for field, enum in fields.items()}
        for resource, fields in OPTION_GROUPS.items()
    }
