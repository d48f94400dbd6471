"""
Admin Dashboard Routes - overview counts and the recent-changes feed.
"""
from fastapi import APIRouter, Depends, Query
from datetime import datetime, timezone
from typing import Any, Dict, List

from database import database, db_errors
from middleware import require_admin
from utils.serialization import serialize_doc

admin_router = APIRouter(prefix="/api/admin/dashboard", tags=["admin-dashboard"])

# collection -> published constraint
DASHBOARD_COLLECTIONS = {
    "news": {"status": "published"},
    "gallery": {"isActive": True},
    "faculty": {"status": "active"},
    "admissions": {"isPublished": True},
    "examinations": {"isPublished": True},
    "activities": {"isPublished": True},
    "videos": {"isPublished": True},
    "roll_numbers": {"isActive": True},
    "contacts": None,
}

# collection -> (feed type, action verb, title field, extra fields)
FEED_SOURCES = (
    ("news", "news", "created", "title", ("status",)),
    ("gallery", "gallery", "uploaded", "title", ("category",)),
    ("activities", "activity", "created", "title", ("type",)),
    ("videos", "video", "added", "title", ("category",)),
    ("contacts", "contact", "received", "subject", ("name", "email", "category")),
)


async def _category_breakdown(collection) -> List[Dict[str, Any]]:
    pipeline = [{"$group": {"_id": "$category", "count": {"$sum": 1}}}, {"$sort": {"count": -1}}]
    rows = await collection.aggregate(pipeline).to_list(length=None)
    return [{"category": row["_id"], "count": row["count"]} for row in rows]


@admin_router.get("/stats")
async def dashboard_stats(admin: dict = Depends(require_admin)):
    db = database.get_db()
    month_start = datetime.now(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0, tzinfo=None)

    with db_errors("Dashboard stats"):
        totals = {}
        for name, published in DASHBOARD_COLLECTIONS.items():
            entry = {"total": await db[name].count_documents({})}
            if published is not None:
                entry["published"] = await db[name].count_documents(published)
            totals[name] = entry

        news_this_month = await db.news.count_documents({"createdAt": {"$gte": month_start}})
        contacts_this_month = await db.contacts.count_documents({"createdAt": {"$gte": month_start}})
        new_contacts = await db.contacts.count_documents({"status": "new"})

        recent_news = await db.news.find(
            {}, {"title": 1, "status": 1, "createdAt": 1}
        ).sort("createdAt", -1).limit(5).to_list(length=5)
        recent_contacts = await db.contacts.find(
            {}, {"name": 1, "email": 1, "subject": 1, "createdAt": 1}
        ).sort("createdAt", -1).limit(5).to_list(length=5)

        news_by_category = await _category_breakdown(db.news)
        gallery_by_category = await _category_breakdown(db.gallery)

    return {
        "success": True,
        "data": {
            "overview": {
                "totalNews": totals["news"]["total"],
                "publishedNews": totals["news"]["published"],
                "totalGallery": totals["gallery"]["total"],
                "totalContacts": totals["contacts"]["total"],
                "newContacts": new_contacts,
                "newsThisMonth": news_this_month,
                "contactsThisMonth": contacts_this_month,
            },
            "totals": totals,
            "recentActivity": {
                "news": [serialize_doc(doc) for doc in recent_news],
                "contacts": [serialize_doc(doc) for doc in recent_contacts],
            },
            "categoryBreakdown": {
                "news": news_by_category,
                "gallery": gallery_by_category,
            },
        },
    }


@admin_router.get("/activities")
async def dashboard_activities(
    limit: int = Query(20, ge=1, le=100),
    admin: dict = Depends(require_admin),
):
    """Most recent changes across resources, newest first."""
    db = database.get_db()
    feed = []

    with db_errors("Dashboard activities"):
        for collection, kind, action, title_field, extra_fields in FEED_SOURCES:
            projection = {title_field: 1, "createdAt": 1, "updatedAt": 1, **{name: 1 for name in extra_fields}}
            docs = await db[collection].find({}, projection).sort("createdAt", -1).limit(limit).to_list(length=limit)
            for doc in docs:
                entry = {
                    "id": str(doc["_id"]),
                    "type": kind,
                    "action": action,
                    "title": doc.get(title_field),
                    "timestamp": doc.get("createdAt"),
                }
                entry.update({name: doc.get(name) for name in extra_fields})
                feed.append(entry)

    feed.sort(key=lambda entry: entry["timestamp"] or datetime.min, reverse=True)
    return {"success": True, "data": [serialize_doc(entry) for entry in feed[:limit]]}
