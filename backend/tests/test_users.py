# tests/test_users.py
import os

from tests._helpers import PASSWORD

PNG = ("me.png", b"\x89PNG\r\n\x1a\n fake image", "image/png")


def test_profile_pic_upload_replaces_previous(client, student, blob_storage, staging_dir):
    first = client.post("/api/users/profile-pic", files={"profilePic": PNG}, headers=student["headers"])
    assert first.status_code == 200
    first_url = first.json()["profilePic"]
    assert first.json()["user"]["profilePic"] == first_url

    second = client.post("/api/users/profile-pic", files={"profilePic": PNG}, headers=student["headers"])
    assert second.status_code == 200
    assert second.json()["profilePic"] != first_url
    assert len(blob_storage.deleted) == 1
    assert not any(os.path.exists(p) for p in blob_storage.staged_paths)
    assert list(staging_dir.iterdir()) == []

    me = client.get("/api/users/profile", headers=student["headers"]).json()["user"]
    assert me["profilePic"] == second.json()["profilePic"]


def test_profile_pic_requires_a_file(client, student):
    response = client.post("/api/users/profile-pic", headers=student["headers"])
    assert response.status_code == 400


def test_profile_pic_rejects_pdf(client, student, blob_storage):
    response = client.post(
        "/api/users/profile-pic",
        files={"profilePic": ("cv.pdf", b"%PDF", "application/pdf")},
        headers=student["headers"],
    )
    assert response.status_code == 400
    assert blob_storage.uploads == []


def test_profile_pic_relay_failure(client, student, blob_storage):
    blob_storage.fail_uploads = True
    response = client.post("/api/users/profile-pic", files={"profilePic": PNG}, headers=student["headers"])
    assert response.status_code == 502
    me = client.get("/api/users/profile", headers=student["headers"]).json()["user"]
    assert me["profilePic"] is None


def test_change_password(client, student):
    wrong = client.post(
        "/api/users/change-password",
        json={"currentPassword": "not-it", "newPassword": "brand-new-pass"},
        headers=student["headers"],
    )
    assert wrong.status_code == 400

    ok = client.post(
        "/api/users/change-password",
        json={"currentPassword": PASSWORD, "newPassword": "brand-new-pass"},
        headers=student["headers"],
    )
    assert ok.status_code == 200

    old_login = client.post("/api/auth/login", json={"userId": "alice", "password": PASSWORD})
    new_login = client.post("/api/auth/login", json={"userId": "alice", "password": "brand-new-pass"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_users_require_authentication(client):
    assert client.get("/api/users/profile").status_code == 401
    assert client.get("/api/users/stats").status_code == 401


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
