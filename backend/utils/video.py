"""YouTube helpers and derived fields for video documents."""
import re
from typing import Any, Dict, Optional

YOUTUBE_ID_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/watch\?.*v=([^&\n?#]+)"),
)


def extract_youtube_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    for pattern in YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def youtube_thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def youtube_embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}?rel=0&modestbranding=1"


def format_views(views: Any) -> str:
    """1234 -> "1.2K", 2500000 -> "2.5M"; unparseable values pass through."""
    match = re.match(r"\s*(-?\d+)", str(views if views is not None else ""))
    if not match:
        return str(views) if views is not None else "0"
    count = int(match.group(1))
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)


def apply_youtube_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    """Fill videoId and thumbnailUrl from a YouTube videoUrl when absent."""
    if data.get("platform", "youtube") != "youtube" or not data.get("videoUrl"):
        return data
    video_id = extract_youtube_id(data["videoUrl"])
    if video_id:
        data["videoId"] = video_id
        if not data.get("thumbnailUrl"):
            data["thumbnailUrl"] = youtube_thumbnail(video_id)
    return data


def with_video_fields(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Add embedUrl, autoThumbnail and formattedViews to a serialized video."""
    data = dict(doc)
    is_youtube = data.get("platform") == "youtube" and data.get("videoId")
    data["embedUrl"] = youtube_embed_url(data["videoId"]) if is_youtube else data.get("videoUrl")
    data["autoThumbnail"] = youtube_thumbnail(data["videoId"]) if is_youtube else data.get("thumbnailUrl")
    data["formattedViews"] = format_views(data.get("views", "0"))
    return data
