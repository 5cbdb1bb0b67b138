# tests/test_doctor.py
from docportal.config.settings import settings
from tests._helpers import auth, create_draft, register, upload_document


def test_stats_for_doctor_without_courses_are_zero(client):
    token, _ = register(client, "drnew", role="doctor")
    response = client.get("/api/doctor/stats", headers=auth(token))
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["totalDocuments"] == 0
    assert stats["pendingDocuments"] == 0
    assert stats["approvedDocuments"] == 0
    assert stats["rejectedDocuments"] == 0
    assert stats["totalStudents"] == 0
    assert stats["totalCourses"] == 0
    assert stats["courses"] == []
    assert stats["recentDocuments"] == []


def test_all_documents_without_courses(client):
    token, _ = register(client, "drnew", role="doctor")
    body = client.get("/api/doctor/all-documents", headers=auth(token)).json()
    assert body["documents"] == []
    assert body["message"] == "No courses assigned to doctor"


def test_review_outside_courses_is_forbidden(client, student, doctor, other_doctor):
    document = upload_document(client, student["headers"], course="CS101")

    forbidden = client.put(f"/api/doctor/approve-document/{document['id']}", headers=other_doctor["headers"])
    assert forbidden.status_code == 403

    approved = client.put(f"/api/doctor/approve-document/{document['id']}", headers=doctor["headers"])
    assert approved.status_code == 200
    reviewed = approved.json()["document"]
    assert reviewed["status"] == "approved"
    assert reviewed["reviewedById"] == doctor["user"]["id"]
    assert reviewed["reviewedAt"] is not None
    assert reviewed["owner"]["userId"] == "alice"

    mine = client.get("/api/documents/approved", headers=student["headers"]).json()["documents"]
    assert [d["id"] for d in mine] == [document["id"]]


def test_reject_and_re_review(client, student, doctor):
    document = upload_document(client, student["headers"])
    rejected = client.put(f"/api/doctor/reject-document/{document['id']}", headers=doctor["headers"])
    assert rejected.status_code == 200
    assert rejected.json()["document"]["status"] == "rejected"

    reversed_ = client.put(f"/api/doctor/approve-document/{document['id']}", headers=doctor["headers"])
    assert reversed_.status_code == 200
    assert reversed_.json()["document"]["status"] == "approved"


def test_re_review_can_be_disabled(client, student, doctor, monkeypatch):
    monkeypatch.setattr(settings, "allow_re_review", False)
    document = upload_document(client, student["headers"])
    assert client.put(f"/api/doctor/reject-document/{document['id']}", headers=doctor["headers"]).status_code == 200
    again = client.put(f"/api/doctor/approve-document/{document['id']}", headers=doctor["headers"])
    assert again.status_code == 409


def test_drafts_cannot_be_reviewed(client, student, doctor):
    draft = create_draft(client, student["headers"])
    response = client.put(f"/api/doctor/approve-document/{draft['id']}", headers=doctor["headers"])
    assert response.status_code == 409


def test_review_unknown_document(client, doctor):
    assert client.put("/api/doctor/approve-document/31337", headers=doctor["headers"]).status_code == 404


def test_students_cannot_review(client, student):
    document = upload_document(client, student["headers"])
    response = client.put(f"/api/doctor/approve-document/{document['id']}", headers=student["headers"])
    assert response.status_code == 403


def test_course_views_and_stats(client, student, other_student, doctor):
    first = upload_document(client, student["headers"], title="first")
    second = upload_document(client, other_student["headers"], title="second")
    create_draft(client, student["headers"], title="draft only")
    upload_document(client, student["headers"], course="MATH201", title="elsewhere")
    client.put(f"/api/doctor/approve-document/{first['id']}", headers=doctor["headers"])

    everything = client.get("/api/doctor/all-documents", headers=doctor["headers"]).json()
    titles = {d["title"] for d in everything["documents"]}
    assert titles == {"first", "second", "draft only"}
    assert set(everything["documentsByCourse"]) == {"CS101"}
    assert len(everything["documentsByCourse"]["CS101"]) == 3

    pending = client.get("/api/doctor/pending-documents", headers=doctor["headers"]).json()
    assert [d["id"] for d in pending["documents"]] == [second["id"]]
    assert pending["documents"][0]["owner"]["userId"] == "bob"

    stats = client.get("/api/doctor/stats", headers=doctor["headers"]).json()["stats"]
    assert stats["totalDocuments"] == 3
    assert stats["pendingDocuments"] == 1
    assert stats["approvedDocuments"] == 1
    assert stats["rejectedDocuments"] == 0
    assert stats["totalStudents"] == 2
    assert stats["totalCourses"] == 1
    assert stats["courses"] == [
        {"course": "CS101", "total": 3, "pending": 1, "approved": 1, "rejected": 0}
    ]
    assert len(stats["recentDocuments"]) == 3


def test_user_stats_endpoint(client, student, doctor):
    upload_document(client, student["headers"])
    doctor_stats = client.get("/api/users/stats", headers=doctor["headers"]).json()["stats"]
    assert doctor_stats["pendingDocuments"] == 1

    student_stats = client.get("/api/users/stats", headers=student["headers"]).json()["stats"]
    assert student_stats["totalDocuments"] == 0
    assert student_stats["courses"] == []


def test_doctor_directory(client, student, doctor, other_doctor):
    response = client.get("/api/doctor/all", headers=student["headers"])
    assert response.status_code == 200
    ids = {d["id"] for d in response.json()["doctors"]}
    assert ids == {doctor["user"]["id"], other_doctor["user"]["id"]}


def test_doctor_routes_require_doctor_role(client, student):
    assert client.get("/api/doctor/stats", headers=student["headers"]).status_code == 403
    assert client.get("/api/doctor/pending-documents").status_code == 401
