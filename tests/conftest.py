"""Pytest fixtures."""

import itertools

import pytest
from fastapi.testclient import TestClient

from findingsweetie.core.config import Settings
from findingsweetie.db.session import Database
from findingsweetie.main import create_app
from findingsweetie.models import User
from findingsweetie.schemas.pet import PetCreate
from findingsweetie.services.pet_service import create_pet


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        vapid_public_key="test-vapid-public-key",
    )


@pytest.fixture
def client(settings):
    """Test client; entering it runs the startup migrations."""
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def database(settings):
    """Migrated database handle for service-level tests."""
    database = Database(settings.database_url)
    database.init_schema()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Create users directly, skipping password hashing."""
    counter = itertools.count(1)

    def _make(email=None, zip_code="12345", **kwargs):
        user = User(
            email=email or f"user{next(counter)}@test.com",
            hashed_password="not-a-real-hash",
            zip_code=zip_code,
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_pet(db):
    def _make(user, status="Lost", pet_type="Dog", **kwargs):
        return create_pet(db, user.id, PetCreate(status=status, pet_type=pet_type, **kwargs))

    return _make
