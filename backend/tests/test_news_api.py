"""
News API tests - public listing/reading and admin CRUD with image handling.
"""
import asyncio
import io
import json

import pytest
from bson import ObjectId


def create_article(client, headers, **fields):
    payload = {"title": "Sports Day", "content": "Annual sports day results."}
    payload.update(fields)
    r = client.post("/api/admin/news", headers=headers, json=payload)
    assert r.status_code == 201, r.text
    return r.json()["data"]


def image_file(name="photo.jpg", content_type="image/jpeg", data=b"\xff\xd8\xff fake jpeg"):
    return ("images", (name, io.BytesIO(data), content_type))


class TestPublicNews:

    def test_only_published_articles_are_listed(self, client, auth_headers):
        for i in range(12):
            create_article(client, auth_headers, title=f"Published {i}")
        for i in range(3):
            create_article(client, auth_headers, title=f"Draft {i}", status="draft")

        r = client.get("/api/news", params={"page": 2, "limit": 5})
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert len(body["items"]) == 5
        assert body["pagination"]["totalItems"] == 12
        assert body["pagination"]["totalPages"] == 3
        assert body["pagination"]["hasNext"] is True
        assert all(item["status"] == "published" for item in body["items"])

    def test_status_parameter_cannot_expose_drafts(self, client, auth_headers):
        create_article(client, auth_headers, title="Hidden", status="draft")
        r = client.get("/api/news", params={"status": "draft"})
        assert r.json()["pagination"]["totalItems"] == 0

    def test_featured_articles_come_first(self, client, auth_headers):
        create_article(client, auth_headers, title="Regular")
        create_article(client, auth_headers, title="Headline", featured=True)
        create_article(client, auth_headers, title="Newest")

        items = client.get("/api/news").json()["items"]
        assert items[0]["title"] == "Headline"

    def test_search(self, client, auth_headers):
        create_article(client, auth_headers, title="Convocation 2025", content="Degrees awarded.")
        create_article(client, auth_headers, title="Library hours", content="Extended during exams.")

        items = client.get("/api/news", params={"search": "convocation"}).json()["items"]
        assert [item["title"] for item in items] == ["Convocation 2025"]

    def test_read_by_slug_counts_views(self, client, auth_headers):
        article = create_article(client, auth_headers, title="Open House")
        client.get(f"/api/news/{article['slug']}")
        r = client.get(f"/api/news/{article['id']}")
        assert r.status_code == 200
        assert r.json()["data"]["views"] == 2

    def test_public_read_hides_admin_fields(self, client, auth_headers):
        article = create_article(client, auth_headers)
        public = client.get(f"/api/news/{article['id']}").json()["data"]
        admin = client.get(f"/api/admin/news/{article['id']}", headers=auth_headers).json()["data"]
        assert "createdBy" not in public
        assert admin["createdBy"]

    def test_draft_is_not_readable_publicly(self, client, auth_headers):
        draft = create_article(client, auth_headers, status="draft")
        r = client.get(f"/api/news/{draft['id']}")
        assert r.status_code == 404
        assert r.json()["success"] is False

    def test_legacy_single_image_is_exposed_as_images(self, client, test_db):
        legacy_id = ObjectId()
        asyncio.run(test_db.news.insert_one({
            "_id": legacy_id,
            "title": "Old article",
            "content": "From before the images array.",
            "status": "published",
            "slug": "old-article",
            "image": {"url": "https://res.cloudinary.com/demo/image/upload/v1/news/old.jpg", "alt": "Old", "cloudinaryId": "news/old"},
        }))

        data = client.get("/api/news/old-article").json()["data"]
        assert data["images"][0]["url"].endswith("/old.jpg")
        assert data["image"] == {"url": data["images"][0]["url"], "alt": "Old"}


class TestAdminNews:

    def test_excerpt_and_slug_are_generated(self, client, auth_headers):
        article = create_article(client, auth_headers, title="Results Announced!", content="x" * 250)
        assert article["slug"] == "results-announced"
        assert article["excerpt"] == "x" * 200 + "..."
        assert article["views"] == 0

    def test_duplicate_titles_get_distinct_slugs(self, client, auth_headers):
        first = create_article(client, auth_headers, title="Notice")
        second = create_article(client, auth_headers, title="Notice")
        assert first["slug"] == "notice"
        assert second["slug"] == "notice-2"

    def test_create_rejects_invalid_category(self, client, auth_headers):
        r = client.post("/api/admin/news", headers=auth_headers, json={"title": "T", "content": "C", "category": "gossip"})
        assert r.status_code == 400
        assert r.json()["errors"][0]["field"] == "category"

    def test_admin_list_includes_drafts_and_filters(self, client, auth_headers):
        create_article(client, auth_headers, title="Live")
        create_article(client, auth_headers, title="Pending", status="draft")

        everything = client.get("/api/admin/news", headers=auth_headers).json()
        drafts = client.get("/api/admin/news", headers=auth_headers, params={"status": "draft"}).json()
        assert everything["pagination"]["totalItems"] == 2
        assert [item["title"] for item in drafts["items"]] == ["Pending"]

    def test_images_upload_and_replace(self, client, auth_headers, media_storage):
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "Gallery night", "content": "Photos inside."},
            files=[image_file("a.jpg"), image_file("b.png", "image/png")],
        )
        assert r.status_code == 201, r.text
        article = r.json()["data"]
        assert len(article["images"]) == 2
        assert article["image"]["url"] == article["images"][0]["url"]
        first, second = article["images"]

        r = client.put(
            f"/api/admin/news/{article['id']}",
            headers=auth_headers,
            data={"existingImages": json.dumps([first["url"]])},
            files=[image_file("c.jpg")],
        )
        assert r.status_code == 200, r.text
        updated = r.json()["data"]
        assert [img["url"] for img in updated["images"]][0] == first["url"]
        assert len(updated["images"]) == 2
        assert media_storage.deleted == [second["publicId"]]

    def test_disallowed_file_type_uploads_nothing(self, client, auth_headers, media_storage):
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "Bad file", "content": "Body"},
            files=[image_file("virus.exe", "application/octet-stream")],
        )
        assert r.status_code == 400
        assert media_storage.uploads == []

    def test_mixed_batch_with_bad_file_uploads_nothing(self, client, auth_headers, media_storage):
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "Mixed", "content": "Body"},
            files=[image_file("ok.jpg"), image_file("bad.exe", "application/octet-stream")],
        )
        assert r.status_code == 400
        assert media_storage.uploads == []
        assert client.get("/api/admin/news", headers=auth_headers).json()["pagination"]["totalItems"] == 0

    def test_failed_upload_removes_earlier_files_of_the_batch(self, client, auth_headers, media_storage):
        media_storage.fail_uploads_for = {"second.jpg"}
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "Half stored", "content": "Body"},
            files=[image_file("first.jpg"), image_file("second.jpg")],
        )
        assert r.status_code == 500
        assert len(media_storage.uploads) == 1
        assert media_storage.deleted == media_storage.uploads

    def test_too_many_images(self, client, auth_headers, media_storage):
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "Many", "content": "Body"},
            files=[image_file(f"{i}.jpg") for i in range(6)],
        )
        assert r.status_code == 400
        assert media_storage.uploads == []

    def test_invalid_fields_are_rejected_before_upload(self, client, auth_headers, media_storage):
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "No content"},
            files=[image_file()],
        )
        assert r.status_code == 400
        assert media_storage.uploads == []

    def test_partial_update_keeps_other_fields(self, client, auth_headers):
        article = create_article(client, auth_headers, title="Timetable", category="announcement")
        r = client.put(f"/api/admin/news/{article['id']}", headers=auth_headers, json={"content": "Revised timetable."})
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        assert data["category"] == "announcement"
        assert data["content"] == "Revised timetable."
        assert data["slug"] == "timetable"
        assert data["lastModifiedBy"]

    def test_title_change_updates_slug(self, client, auth_headers):
        article = create_article(client, auth_headers, title="Old title")
        data = client.put(f"/api/admin/news/{article['id']}", headers=auth_headers, json={"title": "New title"}).json()["data"]
        assert data["slug"] == "new-title"

    def test_toggle_featured(self, client, auth_headers):
        article = create_article(client, auth_headers)
        r = client.patch(f"/api/admin/news/{article['id']}/toggle-featured", headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["data"] == {"id": article["id"], "featured": True}

    def test_delete_survives_media_host_failure(self, client, auth_headers, media_storage):
        r = client.post(
            "/api/admin/news",
            headers=auth_headers,
            data={"title": "Short lived", "content": "Body"},
            files=[image_file()],
        )
        article = r.json()["data"]
        media_storage.fail_deletes = True

        r = client.delete(f"/api/admin/news/{article['id']}", headers=auth_headers)
        assert r.status_code == 200
        assert client.get(f"/api/admin/news/{article['id']}", headers=auth_headers).status_code == 404

    def test_bulk_delete(self, client, auth_headers):
        ids = [create_article(client, auth_headers, title=f"Bulk {i}")["id"] for i in range(3)]
        r = client.post("/api/admin/news/bulk-delete", headers=auth_headers, json={"ids": ids[:2]})
        assert r.status_code == 200
        assert r.json()["data"]["deletedCount"] == 2
        assert client.get("/api/admin/news", headers=auth_headers).json()["pagination"]["totalItems"] == 1

    def test_bulk_delete_requires_ids(self, client, auth_headers):
        r = client.post("/api/admin/news/bulk-delete", headers=auth_headers, json={"ids": []})
        assert r.status_code == 400
        assert r.json()["message"] == "No IDs provided"

    @pytest.mark.parametrize("item_id, expected", [("not-an-id", 400), (str(ObjectId()), 404)])
    def test_lookup_errors(self, client, auth_headers, item_id, expected):
        r = client.get(f"/api/admin/news/{item_id}", headers=auth_headers)
        assert r.status_code == expected

    def test_stats(self, client, auth_headers):
        create_article(client, auth_headers, category="event")
        create_article(client, auth_headers, category="event", status="draft")
        stats = client.get("/api/admin/news/stats", headers=auth_headers).json()["data"]
        assert stats["total"] == 2
        assert stats["published"] == 1
        assert stats["unpublished"] == 1
        assert stats["thisMonth"] == 2
        assert stats["breakdown"]["category"] == {"event": 2}
