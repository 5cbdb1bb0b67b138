# tests/test_profiles.py
from tests._helpers import upload_document

STUDENT_PROFILE = {
    "studentId": "ST-1001",
    "department": "Computer Science",
    "year": 2,
    "semester": 1,
    "gpa": 3.4,
    "courses": ["CS101", "MATH201"],
}

DOCTOR_PROFILE = {
    "doctorId": "DR-77",
    "department": "Computer Science",
    "specialization": "Databases",
    "courses": ["CS101", "DB300"],
    "officeHours": [{"day": "Monday", "startTime": "10:00", "endTime": "12:00"}],
}


def test_create_and_read_student_profile(client, student, doctor):
    created = client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"])
    assert created.status_code == 201
    body = created.json()
    assert body["studentId"] == "ST-1001"
    assert body["account"]["userId"] == "alice"

    seen_by_doctor = client.get(f"/api/students/{student['user']['id']}", headers=doctor["headers"])
    assert seen_by_doctor.status_code == 200
    assert seen_by_doctor.json()["courses"] == ["CS101", "MATH201"]

    me = client.get("/api/users/profile", headers=student["headers"]).json()["user"]
    assert me["profile"]["studentId"] == "ST-1001"


def test_profile_conflicts(client, student, other_student):
    assert client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"]).status_code == 201
    again = client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"])
    assert again.status_code == 409
    taken = client.post("/api/students", json=STUDENT_PROFILE, headers=other_student["headers"])
    assert taken.status_code == 409


def test_doctor_cannot_create_student_profile(client, doctor):
    response = client.post("/api/students", json=STUDENT_PROFILE, headers=doctor["headers"])
    assert response.status_code == 403


def test_missing_profile_is_not_found(client, student):
    response = client.get(f"/api/students/{student['user']['id']}", headers=student["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"


def test_update_own_profile_only(client, student, other_student):
    client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"])
    student_id = student["user"]["id"]

    updated = client.put(f"/api/students/{student_id}", json={"gpa": 3.9, "year": 3}, headers=student["headers"])
    assert updated.status_code == 200
    assert updated.json()["gpa"] == 3.9
    assert updated.json()["year"] == 3
    assert updated.json()["department"] == "Computer Science"

    foreign = client.put(f"/api/students/{student_id}", json={"gpa": 0.5}, headers=other_student["headers"])
    assert foreign.status_code == 404


def test_invalid_office_hours_are_rejected(client, doctor):
    payload = dict(DOCTOR_PROFILE, officeHours=[{"day": "Funday", "startTime": "10:00", "endTime": "12:00"}])
    response = client.post("/api/doctor", json=payload, headers=doctor["headers"])
    assert response.status_code == 400


def test_doctor_profile_courses_drive_review_scope(client, student, doctor):
    created = client.post("/api/doctor", json=DOCTOR_PROFILE, headers=doctor["headers"])
    assert created.status_code == 201
    assert created.json()["officeHours"] == [{"day": "Monday", "startTime": "10:00", "endTime": "12:00"}]

    document = upload_document(client, student["headers"], course="DB300")
    approved = client.put(f"/api/doctor/approve-document/{document['id']}", headers=doctor["headers"])
    assert approved.status_code == 200

    client.put(f"/api/doctor/{doctor['user']['id']}", json={"courses": ["CS101"]}, headers=doctor["headers"])
    other = upload_document(client, student["headers"], course="DB300")
    denied = client.put(f"/api/doctor/approve-document/{other['id']}", headers=doctor["headers"])
    assert denied.status_code == 403


def test_delete_student_account(client, student, doctor, blob_storage):
    client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"])
    upload_document(client, student["headers"])
    client.post("/api/messages", json={"to": doctor["user"]["id"], "content": "bye"}, headers=student["headers"])
    student_id = student["user"]["id"]

    response = client.delete(f"/api/students/{student_id}", headers=student["headers"])
    assert response.status_code == 200
    assert len(blob_storage.deleted) == 1

    assert client.get(f"/api/students/{student_id}", headers=doctor["headers"]).status_code == 404
    assert client.get("/api/auth/me", headers=student["headers"]).status_code == 401
    assert client.get("/api/messages/doctor", headers=doctor["headers"]).json()["messages"] == []


def test_delete_someone_elses_profile_is_not_found(client, student, other_student):
    client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"])
    response = client.delete(f"/api/students/{student['user']['id']}", headers=other_student["headers"])
    assert response.status_code == 404
    assert client.get("/api/auth/me", headers=student["headers"]).status_code == 200


def test_delete_doctor_keeps_reviewed_documents(client, student, doctor):
    client.post("/api/doctor", json=DOCTOR_PROFILE, headers=doctor["headers"])
    document = upload_document(client, student["headers"])
    client.put(f"/api/doctor/approve-document/{document['id']}", headers=doctor["headers"])

    response = client.delete(f"/api/doctor/{doctor['user']['id']}", headers=doctor["headers"])
    assert response.status_code == 200

    kept = client.get(f"/api/documents/{document['id']}", headers=student["headers"]).json()["document"]
    assert kept["status"] == "approved"
    assert kept["reviewedById"] is None


def test_me_includes_student_profile(client, student):
    client.post("/api/students", json=STUDENT_PROFILE, headers=student["headers"])

    for path in ("/api/auth/me", "/api/users/profile"):
        response = client.get(path, headers=student["headers"])
        assert response.status_code == 200
        profile = response.json()["user"]["profile"]
        assert profile["studentId"] == "ST-1001"
        assert profile["account"]["userId"] == "alice"


def test_me_includes_doctor_profile(client, doctor):
    client.post("/api/doctor", json=DOCTOR_PROFILE, headers=doctor["headers"])

    response = client.get("/api/auth/me", headers=doctor["headers"])
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["courses"] == ["CS101", "DB300"]
    assert user["profile"]["doctorId"] == "DR-77"
    assert user["profile"]["officeHours"][0]["day"] == "Monday"


def test_doctor_profile_without_courses_keeps_review_scope(client, student, doctor):
    payload = {key: value for key, value in DOCTOR_PROFILE.items() if key != "courses"}
    created = client.post("/api/doctor", json=payload, headers=doctor["headers"])
    assert created.status_code == 201
    assert created.json()["courses"] == ["CS101"]

    document = upload_document(client, student["headers"], course="CS101")
    approved = client.put(f"/api/doctor/approve-document/{document['id']}", headers=doctor["headers"])
    assert approved.status_code == 200

    stats = client.get("/api/doctor/stats", headers=doctor["headers"]).json()["stats"]
    assert stats["totalCourses"] == 1
    assert stats["approvedDocuments"] == 1
