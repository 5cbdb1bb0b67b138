# tests/conftest.py
import os

# must be in place before docportal.config.settings is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./docportal-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from docportal.config.settings import settings
from docportal.core.storage import get_blob_storage
from docportal.main import app
from tests._helpers import auth, register
from tests._stubs import FakeBlobStorage


@pytest.fixture
def blob_storage():
    return FakeBlobStorage()


@pytest.fixture
def staging_dir(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def client(tmp_path, monkeypatch, blob_storage, staging_dir):
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}")
    monkeypatch.setattr(settings, "create_tables", True)
    monkeypatch.setattr(settings, "upload_tmp_dir", str(staging_dir))
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _account(client, user_id, role="student", courses=None):
    token, user = register(client, user_id, role=role, courses=courses)
    return {"token": token, "user": user, "headers": auth(token)}


@pytest.fixture
def student(client):
    return _account(client, "alice", courses=["CS101"])


@pytest.fixture
def other_student(client):
    return _account(client, "bob", courses=["CS101"])


@pytest.fixture
def doctor(client):
    return _account(client, "drsmith", role="doctor", courses=["CS101"])


@pytest.fixture
def other_doctor(client):
    return _account(client, "drjones", role="doctor", courses=["MATH201"])
