"""Serialize MongoDB documents for API responses."""
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from bson import ObjectId

# Never part of a public payload
ADMIN_ONLY_FIELDS = ("createdBy", "lastModifiedBy", "__v")


def _convert(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def serialize_doc(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Convert a raw document: `_id` becomes `id`, ObjectIds and datetimes become strings."""
    if doc is None:
        return None
    data = {k: _convert(v) for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        data["id"] = str(doc["_id"])
    return data


def public_view(doc: Dict[str, Any], hidden: Iterable[str] = ()) -> Dict[str, Any]:
    """Strip administrative fields from an already-serialized document."""
    drop = set(ADMIN_ONLY_FIELDS) | set(hidden)
    return {k: v for k, v in doc.items() if k not in drop}


def public_projection(hidden: Iterable[str] = ()) -> Dict[str, int]:
    """Mongo projection excluding administrative fields at query time."""
    return {field: 0 for field in (*ADMIN_ONLY_FIELDS, *hidden)}
