import os

# Must be set before visit_tracker is imported: settings are read at import time
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from pathlib import Path
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from visit_tracker.config import get_settings
from visit_tracker.infrastructure.database import Database
from visit_tracker.infrastructure.storage.blob_store import BaseBlobStore
from visit_tracker.main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"

JPEG_HEADER = b"\xff\xd8\xff\xe0"


class InMemoryBlobStore(BaseBlobStore):
    """Blob store double sharing the production validation rules."""

    def __init__(self, allowed_types, max_bytes):
        super().__init__(allowed_types, max_bytes)
        self.objects: Dict[str, bytes] = {}
        self.upload_attempts = 0
        self.deleted: List[str] = []
        self.fail_uploads = False
        self.fail_deletes = False

    def public_url(self, key: str) -> str:
        return f"https://blobs.test/visit-images/{key}"

    def _upload(self, key: str, data: bytes, mime_type: str) -> None:
        from visit_tracker.core.exceptions import StorageException

        self.upload_attempts += 1
        if self.fail_uploads:
            raise StorageException("Failed to upload image")
        self.objects[key] = data

    def _remove(self, key: str) -> None:
        if self.fail_deletes:
            raise ConnectionError("storage unreachable")
        del self.objects[key]
        self.deleted.append(key)


def jpeg_bytes(size: int) -> bytes:
    return JPEG_HEADER + b"\x00" * (size - len(JPEG_HEADER))


@pytest.fixture
def settings(tmp_path: Path):
    return get_settings().model_copy(
        update={
            "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
            "ADMIN_EMAIL": ADMIN_EMAIL,
            "ADMIN_PASSWORD": ADMIN_PASSWORD,
        }
    )


@pytest.fixture
def blob_store(settings):
    return InMemoryBlobStore(settings.ALLOWED_IMAGE_TYPES, settings.MAX_UPLOAD_BYTES)


@pytest.fixture
def client(settings, blob_store):
    app = create_app(settings, blob_store=blob_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.connect()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, name: str, email: str, password: str = "secret1", role: str = "rep") -> dict:
    res = client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert res.status_code == 201, res.text
    return res.json()


def create_visit(client: TestClient, token: str, place_name: str = "Cafe", latitude="40.7128",
                 longitude="-74.0060", image: bytes = None, mime_type: str = "image/jpeg"):
    image = image if image is not None else jpeg_bytes(1024)
    return client.post(
        "/visits",
        headers=auth_header(token),
        data={"placeName": place_name, "latitude": str(latitude), "longitude": str(longitude)},
        files={"image": ("photo.jpg", image, mime_type)},
    )


@pytest.fixture
def admin_token(client) -> str:
    res = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200, res.text
    return res.json()["token"]


@pytest.fixture
def jane(client) -> dict:
    return register(client, "Jane Rep", "JANE@X.com")


@pytest.fixture
def bob(client) -> dict:
    return register(client, "Bob Rep", "bob@x.com")
