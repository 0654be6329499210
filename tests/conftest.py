"""Shared fixtures: in-memory SQLite, a temporary storage root and a test client."""

import os
import shutil
import tempfile

# Point config at throwaway locations before anything imports it
CONFIG_STORAGE_ROOT = tempfile.mkdtemp(prefix="user-mgmt-storage-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_BASE_PATH", CONFIG_STORAGE_ROOT)
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import get_db, init_db, drop_db
from providers.storage_provider import LocalStorageProvider
from schemas.user_schema import UserForm, ImageUpload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x00" * 64
WEBP_BYTES = b"RIFF\x00\x00\x00\x00WEBPVP8 " + b"\x00" * 64

# Differs from the configured /storage so tests can tell which provider built a URL
TEST_PUBLIC_URL = "/media"


@pytest.fixture(scope="session", autouse=True)
def config_storage_root():
    yield CONFIG_STORAGE_ROOT
    shutil.rmtree(CONFIG_STORAGE_ROOT, ignore_errors=True)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorageProvider(str(tmp_path / "public"), TEST_PUBLIC_URL)


@pytest.fixture
def valid_form():
    return UserForm(name="Alice", email="a@x.com", mobile="1234567890", address="1 Main St")


def make_image(content=PNG_BYTES, filename="avatar.png", content_type="image/png"):
    return ImageUpload(filename=filename, content_type=content_type, content=content)


def blob_exists(storage, path):
    return os.path.isfile(os.path.join(storage.root, path))


@pytest.fixture
def client(db, storage):
    from main import app
    from routers.user_router import get_storage

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
