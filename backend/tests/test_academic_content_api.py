"""
Faculty, admissions, examinations and activities endpoints.
"""
import io

EXAM = {
    "type": "schedule",
    "title": "Final term datesheet",
    "description": "Final term papers start in May.",
    "class": "BS-I",
    "totalMarks": 100,
    "passingMarks": 40,
}

ADMISSION = {
    "type": "announcement",
    "title": "BS admissions open",
    "description": "Applications for the fall intake.",
    "academicYear": "2025-26",
    "program": "BS",
}


class TestFaculty:

    def create_member(self, client, headers, **fields):
        payload = {"name": "Dr. Amina Khan", "designation": "Professor", "department": "Physics"}
        payload.update(fields)
        r = client.post("/api/admin/faculty", headers=headers, json=payload)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    def test_department_listing_shows_active_members_only(self, client, auth_headers):
        self.create_member(client, auth_headers)
        self.create_member(client, auth_headers, name="Mr. Bilal", status="inactive")
        self.create_member(client, auth_headers, name="Ms. Sara", department="Chemistry")

        body = client.get("/api/faculty/department/Physics").json()
        assert body["department"] == "Physics"
        assert [item["name"] for item in body["items"]] == ["Dr. Amina Khan"]

    def test_portrait_upload(self, client, auth_headers):
        r = client.post(
            "/api/admin/faculty",
            headers=auth_headers,
            data={"name": "Dr. Omar", "designation": "Lecturer", "department": "Math"},
            files=[("image", ("omar.png", io.BytesIO(b"\x89PNG"), "image/png"))],
        )
        assert r.status_code == 201, r.text
        assert r.json()["data"]["image"]["alt"] == "Dr. Omar"

    def test_portrait_swap_and_clear_delete_previous_asset(self, client, auth_headers, media_storage):
        member = client.post(
            "/api/admin/faculty",
            headers=auth_headers,
            data={"name": "Dr. Hina", "designation": "Lecturer", "department": "Botany"},
            files=[("image", ("hina.png", io.BytesIO(b"\x89PNG"), "image/png"))],
        ).json()["data"]
        first_id = member["image"]["publicId"]
        replacement = {
            "url": "https://res.cloudinary.com/demo/image/upload/v1/college-cms/faculty/hina-2.jpg",
            "publicId": "college-cms/faculty/hina-2",
        }

        r = client.put(f"/api/admin/faculty/{member['id']}", headers=auth_headers, json={"image": replacement})
        assert r.status_code == 200, r.text
        assert media_storage.deleted == [first_id]

        r = client.put(f"/api/admin/faculty/{member['id']}", headers=auth_headers, json={"image": None})
        assert r.status_code == 200, r.text
        assert r.json()["data"].get("image") is None
        assert media_storage.deleted == [first_id, replacement["publicId"]]

    def test_invalid_email(self, client, auth_headers):
        r = client.post(
            "/api/admin/faculty",
            headers=auth_headers,
            json={"name": "X", "designation": "Y", "department": "Z", "email": "nope"},
        )
        assert r.status_code == 400


class TestExaminations:

    def test_create_keeps_class_field_name(self, client, auth_headers):
        r = client.post("/api/admin/examinations", headers=auth_headers, json=EXAM)
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        assert data["class"] == "BS-I"
        assert "class_level" not in data

    def test_class_is_required(self, client, auth_headers):
        payload = {k: v for k, v in EXAM.items() if k != "class"}
        r = client.post("/api/admin/examinations", headers=auth_headers, json=payload)
        assert r.status_code == 400

    def test_passing_marks_cannot_exceed_total(self, client, auth_headers):
        r = client.post("/api/admin/examinations", headers=auth_headers, json={**EXAM, "passingMarks": 120})
        assert r.status_code == 400

    def test_partial_update_is_checked_against_stored_marks(self, client, auth_headers):
        exam = client.post("/api/admin/examinations", headers=auth_headers, json=EXAM).json()["data"]
        r = client.put(f"/api/admin/examinations/{exam['id']}", headers=auth_headers, json={"totalMarks": 30})
        assert r.status_code == 400

    def test_public_filter_by_class(self, client, auth_headers):
        client.post("/api/admin/examinations", headers=auth_headers, json=EXAM)
        client.post("/api/admin/examinations", headers=auth_headers, json={**EXAM, "class": "HSSC-I"})
        items = client.get("/api/examinations", params={"class": "HSSC-I"}).json()["items"]
        assert [item["class"] for item in items] == ["HSSC-I"]


class TestAdmissions:

    def test_unpublished_by_default(self, client, auth_headers):
        r = client.post("/api/admin/admissions", headers=auth_headers, json=ADMISSION)
        assert r.status_code == 201, r.text
        admission = r.json()["data"]
        assert admission["isPublished"] is False
        assert admission["class"] == "All"
        assert client.get("/api/admissions").json()["pagination"]["totalItems"] == 0

        client.patch(f"/api/admin/admissions/{admission['id']}/toggle-published", headers=auth_headers)
        assert client.get(f"/api/admissions/{admission['id']}").status_code == 200

    def test_nested_sections_are_stored(self, client, auth_headers):
        fees = {"admissionFee": 5000, "currency": "PKR"}
        admission = client.post(
            "/api/admin/admissions", headers=auth_headers, json={**ADMISSION, "feeStructure": fees}
        ).json()["data"]
        assert admission["feeStructure"] == fees


class TestActivities:

    def test_photos_keep_list(self, client, auth_headers, media_storage):
        photos = [("photos", (f"p{i}.jpg", io.BytesIO(b"\xff\xd8\xff"), "image/jpeg")) for i in range(2)]
        r = client.post(
            "/api/admin/activities",
            headers=auth_headers,
            data={"type": "event", "title": "Sports gala", "description": "Inter-college games.", "category": "Sports"},
            files=photos,
        )
        assert r.status_code == 201, r.text
        activity = r.json()["data"]
        keep, drop = activity["photoGallery"]

        r = client.put(
            f"/api/admin/activities/{activity['id']}",
            headers=auth_headers,
            json={"existingPhotos": [keep["url"]]},
        )
        assert r.status_code == 200, r.text
        assert [p["url"] for p in r.json()["data"]["photoGallery"]] == [keep["url"]]
        assert media_storage.deleted == [drop["publicId"]]

    def test_invalid_category(self, client, auth_headers):
        r = client.post(
            "/api/admin/activities",
            headers=auth_headers,
            json={"type": "event", "title": "T", "description": "D", "category": "Gaming"},
        )
        assert r.status_code == 400
