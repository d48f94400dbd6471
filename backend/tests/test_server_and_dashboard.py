"""
App-level behavior: health, error envelopes, general rate limit, options and dashboard.
"""
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from server import app
from utils.rate_limiter import GENERAL_MAX_REQUESTS


class TestServer:

    def test_health(self, client):
        r = client.get("/api/health")
        assert r.status_code == 200
        body = r.json()
        assert body["success"] is True
        assert body["timestamp"]

    def test_unknown_endpoint(self, client):
        r = client.get("/api/does-not-exist")
        assert r.status_code == 404
        assert r.json() == {"success": False, "message": "API endpoint not found"}

    def test_malformed_json_body(self, client, auth_headers):
        r = client.post(
            "/api/admin/news",
            headers={**auth_headers, "Content-Type": "application/json"},
            content=b"{not json",
        )
        assert r.status_code == 400
        assert r.json()["success"] is False

    def test_unexpected_error_is_a_generic_500(self, auth_headers):
        client = TestClient(app, raise_server_exceptions=False)
        with patch("routes.news.news_service.list", new_callable=AsyncMock, side_effect=RuntimeError("boom")):
            r = client.get("/api/admin/news", headers=auth_headers)
        assert r.status_code == 500
        assert r.json()["success"] is False
        assert r.json()["message"] == "Internal server error"
        assert "boom" not in r.text

    def test_general_rate_limit(self, client):
        for _ in range(GENERAL_MAX_REQUESTS):
            client.get("/api/health")
        r = client.get("/api/health")
        assert r.status_code == 429
        assert "Retry-After" in r.headers
        assert client.get("/api/health", headers={"X-Forwarded-For": "203.0.113.9"}).status_code == 200


class TestOptions:

    def test_all_option_groups(self, client):
        data = client.get("/api/options").json()["data"]
        assert "published" in data["news"]["status"]
        assert "HSSC-I" in data["examinations"]["class"]

    def test_unknown_resource(self, client):
        assert client.get("/api/options/unknown").status_code == 404


class TestDashboard:

    def test_stats(self, client, auth_headers):
        client.post("/api/admin/news", headers=auth_headers, json={"title": "A", "content": "B", "category": "event"})
        client.post("/api/admin/news", headers=auth_headers, json={"title": "C", "content": "D", "status": "draft"})
        client.post("/api/contact", json={
            "name": "N", "email": "n@example.com", "subject": "S", "message": "M",
        })

        r = client.get("/api/admin/dashboard/stats", headers=auth_headers)
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        assert data["overview"]["totalNews"] == 2
        assert data["overview"]["publishedNews"] == 1
        assert data["overview"]["newContacts"] == 1
        assert data["totals"]["contacts"] == {"total": 1}
        assert len(data["recentActivity"]["news"]) == 2

    def test_activity_feed_is_newest_first(self, client, auth_headers):
        client.post("/api/admin/news", headers=auth_headers, json={"title": "First", "content": "x"})
        client.post("/api/contact", json={"name": "N", "email": "n@example.com", "subject": "Later", "message": "M"})

        feed = client.get("/api/admin/dashboard/activities", headers=auth_headers, params={"limit": 5}).json()["data"]
        assert {entry["type"] for entry in feed} == {"contact", "news"}
        timestamps = [entry["timestamp"] for entry in feed]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_requires_admin(self, client):
        assert client.get("/api/admin/dashboard/stats").status_code == 401
