"""
Media attachments stored on content documents.

Documents are written with an `images` array only. Older records and older
clients expect a single `image: {url, alt}` field, which is synthesized on
read by `with_legacy_image`.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Tuple


class MediaAsset(BaseModel):
    """What the media collaborator returns for one stored file."""
    model_config = ConfigDict(extra="ignore")

    url: str
    thumbnailUrl: Optional[str] = None
    publicId: Optional[str] = None
    originalName: Optional[str] = None
    size: Optional[int] = Field(None, ge=0)
    mimeType: Optional[str] = None
    alt: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def asset_public_id(asset: Optional[Dict[str, Any]]) -> Optional[str]:
    """Public id of a stored asset, accepting the pre-rename `cloudinaryId` key."""
    if not asset:
        return None
    return asset.get("publicId") or asset.get("cloudinaryId")


def with_legacy_image(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Read-path shim between the `images` array and the legacy `image` field."""
    data = dict(doc)
    images = data.get("images") or []
    legacy = data.get("image")

    if not images and isinstance(legacy, dict) and legacy.get("url"):
        # Record predates the images array
        images = [{k: v for k, v in legacy.items() if v is not None}]
        data["images"] = images

    if images:
        first = images[0]
        data["image"] = {"url": first.get("url"), "alt": first.get("alt")}
    else:
        data.pop("image", None)
    return data


def split_kept_media(current: List[Dict[str, Any]], keep: Any) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Partition stored assets by the client's keep-list.

    `keep` lists the assets still shown in the form, as URLs or asset
    objects. None keeps everything.
    """
    if keep is None:
        return list(current), []
    if not isinstance(keep, list):
        keep = [keep]
    keep_urls = {item.get("url") if isinstance(item, dict) else item for item in keep}
    kept = [asset for asset in current if asset.get("url") in keep_urls]
    removed = [asset for asset in current if asset.get("url") not in keep_urls]
    return kept, removed


def superseded_asset(existing: Dict[str, Any], patch: Dict[str, Any], field: str) -> List[Dict[str, Any]]:
    """The stored asset a patch replaces or clears, as a list of zero or one."""
    current = existing.get(field)
    if field not in patch or not isinstance(current, dict) or not current.get("url"):
        return []
    incoming = patch[field]
    incoming_url = incoming.get("url") if isinstance(incoming, dict) else incoming
    return [] if incoming_url == current["url"] else [current]
