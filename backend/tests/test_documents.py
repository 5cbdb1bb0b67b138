# tests/test_documents.py
import os

from docportal.config.settings import settings
from tests._helpers import PDF, create_draft, upload_document


def test_draft_without_file_then_submit(client, student):
    draft = create_draft(client, student["headers"], title="HW1")
    assert draft["status"] == "draft"
    assert draft["file"] is None
    assert draft["ownerId"] == student["user"]["id"]

    response = client.put(f"/api/documents/submit/{draft['id']}", headers=student["headers"])
    assert response.status_code == 200
    assert response.json()["document"]["status"] == "submitted"


def test_submit_can_require_a_file(client, student, monkeypatch):
    monkeypatch.setattr(settings, "require_file_on_submit", True)
    draft = create_draft(client, student["headers"])
    response = client.put(f"/api/documents/submit/{draft['id']}", headers=student["headers"])
    assert response.status_code == 400


def test_upload_requires_file(client, student):
    response = client.post(
        "/api/documents/upload",
        data={"title": "HW", "description": "d", "course": "CS101"},
        headers=student["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Please upload a file"


def test_upload_stores_file_and_cleans_staging(client, student, blob_storage, staging_dir):
    document = upload_document(client, student["headers"])
    assert document["status"] == "submitted"
    assert document["file"].startswith("https://blobs.test/")

    (path, existed, _folder), = blob_storage.uploads
    assert existed
    assert not os.path.exists(path)
    assert list(staging_dir.iterdir()) == []


def test_failed_relay_leaves_no_document_and_no_staged_file(client, student, blob_storage, staging_dir):
    blob_storage.fail_uploads = True
    response = client.post(
        "/api/documents/upload",
        data={"title": "HW", "description": "d", "course": "CS101"},
        files={"file": PDF},
        headers=student["headers"],
    )
    assert response.status_code == 502
    assert response.json()["success"] is False
    assert blob_storage.staged_paths
    assert not any(os.path.exists(p) for p in blob_storage.staged_paths)
    assert list(staging_dir.iterdir()) == []

    listing = client.get("/api/documents", headers=student["headers"])
    assert listing.json()["documents"] == []


def test_rejects_disallowed_file_type(client, student, blob_storage):
    response = client.post(
        "/api/documents/upload",
        data={"title": "HW", "description": "d", "course": "CS101"},
        files={"file": ("notes.exe", b"MZ", "application/x-msdownload")},
        headers=student["headers"],
    )
    assert response.status_code == 400
    assert blob_storage.uploads == []


def test_oversized_file_is_rejected(client, student, blob_storage, staging_dir, monkeypatch):
    monkeypatch.setattr(settings, "max_document_size", 16)
    response = client.post(
        "/api/documents/upload",
        data={"title": "HW", "description": "d", "course": "CS101"},
        files={"file": ("big.pdf", b"%PDF" + b"x" * 64, "application/pdf")},
        headers=student["headers"],
    )
    assert response.status_code == 413
    assert blob_storage.uploads == []
    assert list(staging_dir.iterdir()) == []


def test_missing_fields_are_bad_request(client, student):
    response = client.post(
        "/api/documents/draft",
        data={"title": "HW", "description": "  ", "course": "CS101"},
        headers=student["headers"],
    )
    assert response.status_code == 400


def test_listing_filters_and_counts(client, student):
    first = create_draft(client, student["headers"], title="first")
    second = upload_document(client, student["headers"], title="second")

    everything = client.get("/api/documents", headers=student["headers"]).json()["documents"]
    assert [d["id"] for d in everything] == [second["id"], first["id"]]

    drafts = client.get("/api/documents/drafts", headers=student["headers"]).json()["documents"]
    assert [d["id"] for d in drafts] == [first["id"]]

    approved = client.get("/api/documents/approved", headers=student["headers"]).json()["documents"]
    assert approved == []

    counts = client.get("/api/documents/counts", headers=student["headers"]).json()["counts"]
    assert counts == {"total": 2, "draft": 1, "pending": 1, "approved": 0, "rejected": 0}


def test_other_students_documents_look_missing(client, student, other_student):
    draft = create_draft(client, student["headers"])
    doc_id = draft["id"]
    headers = other_student["headers"]

    assert client.get(f"/api/documents/{doc_id}", headers=headers).status_code == 404
    assert client.get("/api/documents/424242", headers=headers).status_code == 404
    assert client.put(f"/api/documents/draft/{doc_id}", data={"title": "x"}, headers=headers).status_code == 404
    assert client.put(f"/api/documents/submit/{doc_id}", headers=headers).status_code == 404
    assert client.delete(f"/api/documents/{doc_id}", headers=headers).status_code == 404

    still_there = client.get(f"/api/documents/{doc_id}", headers=student["headers"])
    assert still_there.status_code == 200
    assert still_there.json()["document"]["title"] == "Week 1"


def test_submitted_documents_are_not_drafts(client, student):
    document = upload_document(client, student["headers"])
    update = client.put(
        f"/api/documents/draft/{document['id']}", data={"title": "changed"}, headers=student["headers"]
    )
    submit = client.put(f"/api/documents/submit/{document['id']}", headers=student["headers"])
    assert update.status_code == 404
    assert submit.status_code == 404


def test_update_draft_fields_and_replace_file(client, student, blob_storage):
    draft = create_draft(client, student["headers"], with_file=True)
    old_blob = f"raw/{settings.cloudinary_folder}/documents/1"

    response = client.put(
        f"/api/documents/draft/{draft['id']}",
        data={"title": "Renamed", "course": "MATH201"},
        files={"file": PDF},
        headers=student["headers"],
    )
    assert response.status_code == 200
    updated = response.json()["document"]
    assert updated["title"] == "Renamed"
    assert updated["course"] == "MATH201"
    assert updated["description"] == draft["description"]
    assert updated["file"] != draft["file"]
    assert blob_storage.deleted == [old_blob]


def test_update_draft_is_atomic_when_relay_fails(client, student, blob_storage):
    draft = create_draft(client, student["headers"], with_file=True)
    blob_storage.fail_uploads = True

    response = client.put(
        f"/api/documents/draft/{draft['id']}",
        data={"title": "Renamed"},
        files={"file": PDF},
        headers=student["headers"],
    )
    assert response.status_code == 502

    current = client.get(f"/api/documents/{draft['id']}", headers=student["headers"]).json()["document"]
    assert current["title"] == draft["title"]
    assert current["file"] == draft["file"]
    assert blob_storage.deleted == []


def test_delete_document_removes_blob(client, student, blob_storage):
    document = upload_document(client, student["headers"])
    response = client.delete(f"/api/documents/{document['id']}", headers=student["headers"])
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert len(blob_storage.deleted) == 1
    assert client.get(f"/api/documents/{document['id']}", headers=student["headers"]).status_code == 404


def test_blob_delete_failure_does_not_fail_request(client, student, blob_storage):
    document = upload_document(client, student["headers"])
    blob_storage.fail_deletes = True
    response = client.delete(f"/api/documents/{document['id']}", headers=student["headers"])
    assert response.status_code == 200


def test_documents_require_student_role(client, doctor):
    assert client.get("/api/documents", headers=doctor["headers"]).status_code == 403


def test_documents_require_authentication(client):
    assert client.get("/api/documents").status_code == 401
    assert client.post("/api/documents/draft", data={"title": "x"}).status_code == 401


def test_oversized_body_rejected_before_routing_keeps_cors_headers(client, student, blob_storage, monkeypatch):
    monkeypatch.setattr(settings, "max_document_size", 16)
    origin = settings.cors_origins[0]
    response = client.post(
        "/api/documents/upload",
        data={"title": "HW", "description": "d", "course": "CS101"},
        files={"file": ("big.pdf", b"%PDF" + b"x" * (100 * 1024), "application/pdf")},
        headers={**student["headers"], "Origin": origin},
    )
    assert response.status_code == 413
    assert response.json()["success"] is False
    assert response.headers["access-control-allow-origin"] == origin
    assert blob_storage.uploads == []
