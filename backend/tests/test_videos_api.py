"""
Videos API tests - YouTube derivation, public listing and admin toggles.
"""
import pytest

from utils.video import extract_youtube_id, format_views

VIDEO = {
    "title": "Campus tour",
    "description": "A walk through the new science block.",
    "videoUrl": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "duration": "3:45",
    "category": "Campus Life",
}


def create_video(client, headers, **fields):
    r = client.post("/api/admin/videos", headers=headers, json={**VIDEO, **fields})
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.parametrize("url, expected", [
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ("https://youtu.be/dQw4w9WgXcQ?t=10", "dQw4w9WgXcQ"),
    ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ("https://vimeo.com/12345", None),
])
def test_extract_youtube_id(url, expected):
    assert extract_youtube_id(url) == expected


@pytest.mark.parametrize("views, expected", [(999, "999"), (1234, "1.2K"), ("2500000", "2.5M"), ("n/a", "n/a")])
def test_format_views(views, expected):
    assert format_views(views) == expected


class TestAdminVideos:

    def test_create_derives_youtube_fields(self, client, auth_headers):
        video = create_video(client, auth_headers)
        assert video["videoId"] == "dQw4w9WgXcQ"
        assert video["thumbnailUrl"] == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
        assert video["embedUrl"].startswith("https://www.youtube.com/embed/dQw4w9WgXcQ")

    def test_explicit_thumbnail_is_kept(self, client, auth_headers):
        video = create_video(client, auth_headers, thumbnailUrl="https://cdn.example.com/t.jpg")
        assert video["thumbnailUrl"] == "https://cdn.example.com/t.jpg"

    def test_non_youtube_video_needs_an_id(self, client, auth_headers):
        r = client.post(
            "/api/admin/videos",
            headers=auth_headers,
            json={**VIDEO, "platform": "vimeo", "videoUrl": "https://vimeo.com/12345"},
        )
        assert r.status_code == 400

    def test_bad_duration(self, client, auth_headers):
        r = client.post("/api/admin/videos", headers=auth_headers, json={**VIDEO, "duration": "three minutes"})
        assert r.status_code == 400
        assert r.json()["errors"][0]["field"] == "duration"

    def test_changing_url_rederives_video_id(self, client, auth_headers):
        video = create_video(client, auth_headers)
        r = client.put(
            f"/api/admin/videos/{video['id']}",
            headers=auth_headers,
            json={"videoUrl": "https://youtu.be/abcdefghijk"},
        )
        assert r.status_code == 200, r.text
        assert r.json()["data"]["videoId"] == "abcdefghijk"

    def test_toggles(self, client, auth_headers):
        video = create_video(client, auth_headers)
        published = client.patch(f"/api/admin/videos/{video['id']}/toggle-published", headers=auth_headers).json()
        featured = client.patch(f"/api/admin/videos/{video['id']}/toggle-featured", headers=auth_headers).json()
        assert published["data"]["isPublished"] is False
        assert featured["data"]["isFeatured"] is True

    def test_stats_counts_featured(self, client, auth_headers):
        create_video(client, auth_headers, isFeatured=True)
        create_video(client, auth_headers, category="Sports")
        stats = client.get("/api/admin/videos/stats", headers=auth_headers).json()["data"]
        assert stats["total"] == 2
        assert stats["featured"] == 1
        assert stats["breakdown"]["category"] == {"Campus Life": 1, "Sports": 1}


class TestPublicVideos:

    def test_listing_returns_published_and_categories(self, client, auth_headers):
        create_video(client, auth_headers, category="Sports")
        create_video(client, auth_headers, category="Academics")
        create_video(client, auth_headers, category="Events", isPublished=False)

        body = client.get("/api/videos").json()
        assert body["pagination"]["totalItems"] == 2
        assert body["categories"] == ["Academics", "Sports"]
        assert all("formattedViews" in item for item in body["items"])

    def test_unpublished_video_is_hidden(self, client, auth_headers):
        video = create_video(client, auth_headers, isPublished=False)
        assert client.get(f"/api/videos/{video['id']}").status_code == 404
