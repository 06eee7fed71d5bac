"""
Pytest configuration and fixtures for catalog tests.
"""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_api.main import app
from catalog_api.models import Base, Brand, Category
from catalog_api.services.media import (
    ImageStore,
    UploadedFile,
    UploadStager,
    get_image_store,
    get_upload_stager,
)
from catalog_shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def image_dir(tmp_path):
    """Permanent image directory for one test."""
    path = tmp_path / "public" / "images" / "products"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def upload_dir(tmp_path):
    """Upload staging directory for one test."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def image_store(image_dir):
    return ImageStore(image_dir)


@pytest.fixture
def upload_stager(upload_dir):
    return UploadStager(upload_dir)


@pytest.fixture(scope="function")
def client(db_session, image_store, upload_stager):
    """
    Create a test client with database session and storage overrides.

    The lifespan handler is not run: tables come from db_session and the
    storage directories from tmp_path.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_store] = lambda: image_store
    app.dependency_overrides[get_upload_stager] = lambda: upload_stager

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_upload(upload_dir):
    """
    Factory for staged uploads, as UploadStager would leave them.

    Usage:
        upload = make_upload("red.png", b"...")
    """
    def _make(original_name: str, content: bytes = b"image-bytes") -> UploadedFile:
        storage_name = uuid.uuid4().hex
        temp_path = upload_dir / storage_name
        temp_path.write_bytes(content)
        return UploadedFile(
            original_name=original_name,
            storage_name=storage_name,
            temp_path=temp_path,
        )

    return _make


@pytest.fixture
def seed_category(db_session):
    """Create a test category."""
    category = Category(name="Sneakers")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def seed_brand(db_session):
    """Create a test brand."""
    brand = Brand(name="Adidas")
    db_session.add(brand)
    db_session.commit()
    db_session.refresh(brand)
    return brand
