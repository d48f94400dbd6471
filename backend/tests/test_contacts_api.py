"""
Contact form tests - public submission, rate limiting and the admin inbox.
"""
from utils.rate_limiter import CONTACT_MAX_SUBMISSIONS

MESSAGE = {
    "name": "Priya Shah",
    "email": "Priya@Example.com",
    "subject": "Hostel availability",
    "message": "Are there hostel rooms for first-year students?",
    "category": "admissions",
}


def submit(client, **fields):
    return client.post("/api/contact", json={**MESSAGE, **fields})


class TestContactSubmission:

    def test_submit(self, client):
        r = submit(client, status="resolved", priority="high")
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        assert set(data) == {"id", "name", "email", "subject"}
        assert data["email"] == "priya@example.com"

    def test_sender_cannot_set_triage_fields(self, client, auth_headers):
        message_id = submit(client, status="resolved", priority="high", notes="vip").json()["data"]["id"]
        stored = client.get(f"/api/admin/contacts/{message_id}", headers=auth_headers).json()["data"]
        assert stored["status"] == "new"
        assert stored["priority"] == "medium"
        assert "notes" not in stored
        assert stored["ipAddress"]

    def test_invalid_email(self, client):
        r = submit(client, email="not-an-email")
        assert r.status_code == 400
        assert r.json()["errors"][0]["field"] == "email"

    def test_submissions_are_rate_limited(self, client):
        for _ in range(CONTACT_MAX_SUBMISSIONS):
            assert submit(client).status_code == 201
        r = submit(client)
        assert r.status_code == 429
        assert r.json()["success"] is False

    def test_messages_are_not_publicly_listed(self, client):
        submit(client)
        assert client.get("/api/contact").status_code in (404, 405)


class TestAdminInbox:

    def test_list_and_filter(self, client, auth_headers):
        submit(client)
        submit(client, category="complaint", subject="Noise")
        r = client.get("/api/admin/contacts", headers=auth_headers, params={"category": "complaint"})
        assert r.status_code == 200
        assert [item["subject"] for item in r.json()["items"]] == ["Noise"]

    def test_update_only_touches_triage_fields(self, client, auth_headers):
        message_id = submit(client).json()["data"]["id"]
        r = client.put(
            f"/api/admin/contacts/{message_id}",
            headers=auth_headers,
            json={"status": "replied", "notes": "Called back", "email": "changed@example.com"},
        )
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        assert data["status"] == "replied"
        assert data["notes"] == "Called back"
        assert data["email"] == "priya@example.com"

    def test_invalid_status(self, client, auth_headers):
        message_id = submit(client).json()["data"]["id"]
        r = client.put(f"/api/admin/contacts/{message_id}", headers=auth_headers, json={"status": "archived-forever"})
        assert r.status_code == 400

    def test_delete(self, client, auth_headers):
        message_id = submit(client).json()["data"]["id"]
        assert client.delete(f"/api/admin/contacts/{message_id}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/admin/contacts/{message_id}", headers=auth_headers).status_code == 404
