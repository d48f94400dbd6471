"""
Content Service - generic CRUD over one content collection.

Every resource route builds a ContentService from a ResourceConfig and keeps
only its resource-specific behavior (uploads, slugs, counters). The service
owns the shared rules:

- ids are 24-hex ObjectIds; malformed ids are a ValidationError, unknown
  ids a NotFoundError
- public reads only see published documents and never admin-only fields
- create stamps createdBy/createdAt/updatedAt, update stamps
  lastModifiedBy/updatedAt (last write wins)
- delete removes attached media best-effort, then the document
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type
import logging

from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument

from database import database, db_errors
from models.content import ContentModel, validate_update
from services.media_storage import delete_media_quietly
from services.query_builder import ListSpec, paginate, build_filter, build_sort, parse_page_window
from utils.errors import NotFoundError, ValidationError, from_pydantic
from utils.serialization import public_projection, public_view, serialize_doc

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def _media_from_fields(fields: Sequence[str]) -> Callable[[Document], List[Document]]:
    def extract(doc: Document) -> List[Document]:
        assets: List[Document] = []
        for name in fields:
            value = doc.get(name)
            if isinstance(value, dict):
                assets.append(value)
            elif isinstance(value, list):
                assets.extend(item for item in value if isinstance(item, dict))
        return assets
    return extract


@dataclass
class ResourceConfig:
    name: str
    collection: str
    schema: Type[ContentModel]
    listing: ListSpec
    toggles: Tuple[str, ...] = ()
    media_fields: Tuple[str, ...] = ()
    media_resource_type: str = "image"
    hidden_fields: Tuple[str, ...] = ()
    # Adds derived/compatibility fields to serialized documents
    decorate: Optional[Callable[[Document], Document]] = None
    # Overrides media discovery for resources storing files outside media_fields
    media_of: Optional[Callable[[Document], List[Document]]] = None

    @property
    def published(self) -> Dict[str, Any]:
        return dict(self.listing.published or {})

    def attached_media(self, doc: Document) -> List[Document]:
        extractor = self.media_of or _media_from_fields(self.media_fields)
        return extractor(doc)


def parse_object_id(value: Any, label: str = "resource") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationError(
            f"Invalid {label} ID",
            errors=[{"field": "id", "message": "Must be a 24-character hex id"}],
        )
    return ObjectId(value)


def _actor(admin_id: Optional[str]) -> Any:
    if admin_id and ObjectId.is_valid(admin_id):
        return ObjectId(admin_id)
    return admin_id


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ContentService:
    def __init__(self, config: ResourceConfig):
        self.config = config

    @property
    def collection(self):
        return database.get_db()[self.config.collection]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self, doc: Document, public: bool = False) -> Document:
        data = serialize_doc(doc)
        if self.config.decorate:
            data = self.config.decorate(data)
        if public:
            data = public_view(data, self.config.hidden_fields)
        return data

    def validate(self, data: Mapping[str, Any]) -> Document:
        try:
            return self.config.schema.model_validate(dict(data)).to_document()
        except PydanticValidationError as e:
            raise from_pydantic(e)

    def validate_patch(self, existing: Document, patch: Mapping[str, Any]) -> Document:
        try:
            return validate_update(self.config.schema, existing, dict(patch))
        except PydanticValidationError as e:
            raise from_pydantic(e)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(self, params: Mapping[str, Any], public: bool = False) -> Dict[str, Any]:
        spec = self.config.listing
        window = parse_page_window(params.get("page"), params.get("limit"), spec)
        query = build_filter(spec, params, public=public)
        sort = build_sort(spec, params.get("sortBy"), params.get("sortOrder"), public=public)
        projection = public_projection(self.config.hidden_fields) if public else None

        with db_errors(f"List {self.config.collection}"):
            items, pagination = await paginate(self.collection, query, sort, window, projection)

        return {
            "items": [self.serialize(doc, public) for doc in items],
            "pagination": pagination,
        }

    async def find(self, item_id: Any, public: bool = False) -> Document:
        """Raw document by id; public lookups only match published documents."""
        query: Dict[str, Any] = {"_id": parse_object_id(item_id, self.config.name)}
        if public:
            query.update(self.config.published)
        with db_errors(f"Get {self.config.collection}"):
            doc = await self.collection.find_one(query)
        if not doc:
            raise NotFoundError(f"{self.config.name.capitalize()} not found")
        return doc

    async def get(self, item_id: Any, public: bool = False) -> Document:
        return self.serialize(await self.find(item_id, public), public)

    async def increment(self, query: Dict[str, Any], counter: str, public: bool = True) -> Document:
        """Atomically bump a counter on the matching document and return it."""
        if public:
            query = {**query, **self.config.published}
        with db_errors(f"Update {self.config.collection}"):
            doc = await self.collection.find_one_and_update(
                query,
                {"$inc": {counter: 1}},
                return_document=ReturnDocument.AFTER,
            )
        if not doc:
            raise NotFoundError(f"{self.config.name.capitalize()} not found")
        return self.serialize(doc, public)

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        with db_errors(f"Count {self.config.collection}"):
            return await self.collection.count_documents(query or {})

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any], admin_id: Optional[str], extra: Optional[Document] = None) -> Document:
        """Validate and insert. `extra` carries server-computed fields (slug, counters)."""
        doc = self.validate(data)
        doc.update(extra or {})
        now = _now()
        doc.update({"createdBy": _actor(admin_id), "createdAt": now, "updatedAt": now})

        with db_errors(f"Create {self.config.collection}"):
            result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info(f"{self.config.name} {result.inserted_id} created by {admin_id}")
        return self.serialize(doc)

    async def update(
        self,
        item_id: Any,
        patch: Mapping[str, Any],
        admin_id: Optional[str],
        replaced_media: Iterable[Document] = (),
        extra: Optional[Document] = None,
    ) -> Document:
        existing = await self.find(item_id)
        changes = self.validate_patch(existing, patch)
        changes.update(extra or {})
        changes.update({"lastModifiedBy": _actor(admin_id), "updatedAt": _now()})

        # Old media goes before the new reference is written
        for asset in replaced_media:
            await delete_media_quietly(asset, self.config.media_resource_type)

        with db_errors(f"Update {self.config.collection}"):
            doc = await self.collection.find_one_and_update(
                {"_id": existing["_id"]},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if not doc:
            raise NotFoundError(f"{self.config.name.capitalize()} not found")

        logger.info(f"{self.config.name} {existing['_id']} updated by {admin_id}")
        return self.serialize(doc)

    async def toggle(self, item_id: Any, field_name: str, admin_id: Optional[str]) -> Document:
        if field_name not in self.config.toggles:
            raise ValidationError(f"{field_name} cannot be toggled")
        existing = await self.find(item_id)
        value = not bool(existing.get(field_name))

        with db_errors(f"Update {self.config.collection}"):
            doc = await self.collection.find_one_and_update(
                {"_id": existing["_id"]},
                {"$set": {field_name: value, "lastModifiedBy": _actor(admin_id), "updatedAt": _now()}},
                return_document=ReturnDocument.AFTER,
            )
        if not doc:
            raise NotFoundError(f"{self.config.name.capitalize()} not found")
        logger.info(f"{self.config.name} {existing['_id']} {field_name} -> {value} by {admin_id}")
        return self.serialize(doc)

    async def _remove_media(self, doc: Document) -> None:
        for asset in self.config.attached_media(doc):
            await delete_media_quietly(asset, self.config.media_resource_type)

    async def delete(self, item_id: Any, admin_id: Optional[str] = None) -> Dict[str, Any]:
        existing = await self.find(item_id)
        await self._remove_media(existing)

        with db_errors(f"Delete {self.config.collection}"):
            await self.collection.delete_one({"_id": existing["_id"]})

        logger.info(f"{self.config.name} {existing['_id']} deleted by {admin_id}")
        return {"id": str(existing["_id"])}

    async def bulk_delete(self, ids: Any, admin_id: Optional[str] = None) -> Dict[str, Any]:
        if not isinstance(ids, list) or not ids:
            raise ValidationError(
                "No IDs provided",
                errors=[{"field": "ids", "message": "Provide a non-empty list of ids"}],
            )
        object_ids = [parse_object_id(value, self.config.name) for value in ids]

        with db_errors(f"Bulk delete {self.config.collection}"):
            docs = await self.collection.find({"_id": {"$in": object_ids}}).to_list(length=len(object_ids))
            for doc in docs:
                await self._remove_media(doc)
            result = await self.collection.delete_many({"_id": {"$in": [doc["_id"] for doc in docs]}})

        logger.info(f"{result.deleted_count} {self.config.collection} deleted by {admin_id}")
        return {"deletedCount": result.deleted_count}

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    async def stats(self, group_fields: Sequence[str] = ()) -> Dict[str, Any]:
        """Totals, published and this-month counts, and per-field breakdowns."""
        # Naive UTC, the form the driver returns stored datetimes in
        month_start = _now().replace(day=1, hour=0, minute=0, second=0, microsecond=0, tzinfo=None)

        with db_errors(f"Stats {self.config.collection}"):
            total = await self.collection.count_documents({})
            published = await self.collection.count_documents(self.config.published) if self.config.published else total
            this_month = await self.collection.count_documents({"createdAt": {"$gte": month_start}})

            breakdown: Dict[str, Dict[str, int]] = {}
            for name in group_fields:
                pipeline = [{"$group": {"_id": f"${name}", "count": {"$sum": 1}}}, {"$sort": {"count": -1}}]
                rows = await self.collection.aggregate(pipeline).to_list(length=None)
                breakdown[name] = {str(row["_id"]): row["count"] for row in rows if row["_id"] is not None}

        return {
            "total": total,
            "published": published,
            "unpublished": total - published,
            "thisMonth": this_month,
            "breakdown": breakdown,
        }
