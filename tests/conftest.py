"""
Pytest configuration and shared fixtures
"""

import base64
import os
import tempfile
import uuid

import pytest

# Settings, Celery and the JWT constants are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["SMTP_HOST"] = ""
os.environ["SUPER_ADMIN_EMAILS"] = "root@example.com"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="homehub-media-")
os.environ["MEDIA_BASE_URL"] = "http://testserver/media"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from homehub.api.config import get_settings, reset_settings  # noqa: E402
from homehub.api.security import create_access_token, hash_password  # noqa: E402
from homehub.db import Base, Profile  # noqa: E402
from homehub.db.session import set_session_factory  # noqa: E402

# Password of every profile created by make_user
TEST_PASSWORD = "Passw0rdX"
PASSWORD_HASH = hash_password(TEST_PASSWORD)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(32))


def data_url(payload: bytes = PNG_BYTES, content_type: str = "image/png") -> str:
    return f"data:{content_type};base64,{base64.b64encode(payload).decode()}"


@pytest.fixture(autouse=True)
def settings(tmp_path, monkeypatch):
    """Fresh settings per test, with media written under tmp_path."""
    monkeypatch.setenv("MEDIA_ROOT", str(tmp_path / "media"))
    reset_settings()
    yield get_settings()
    reset_settings()


@pytest.fixture
def session_factory():
    """In-memory SQLite shared by the test and the app through a single connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    set_session_factory(factory)

    yield factory

    set_session_factory(None)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Create a committed profile. Defaults to an approved FSBO account in Guyana."""

    def _make(user_type="fsbo", email=None, admin_level=None, country_id="GY",
              approval_status="approved", **fields):
        user = Profile(
            email=email or f"{user_type}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=PASSWORD_HASH,
            first_name=fields.pop("first_name", user_type.title()),
            last_name=fields.pop("last_name", "Tester"),
            phone=fields.pop("phone", "5926001234"),
            user_type=user_type,
            admin_level=admin_level,
            country_id=country_id,
            approval_status=approval_status,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def headers_for():
    """Bearer headers for a profile."""

    def _headers(user):
        token = create_access_token(
            {"sub": str(user.id), "email": user.email, "user_type": user.user_type}
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def super_admin(make_user):
    return make_user("admin", email="super@example.com", admin_level="super", country_id=None)


@pytest.fixture
def country_admin(make_user):
    return make_user("admin", email="owner-admin@example.com", admin_level="owner", country_id="GY")


@pytest.fixture
def basic_admin(make_user):
    return make_user("admin", email="basic-admin@example.com", admin_level="basic", country_id="GY")


@pytest.fixture
def agent(make_user):
    return make_user("agent", email="agent@example.com")


@pytest.fixture
def fsbo(make_user):
    return make_user("fsbo", email="fsbo@example.com")


@pytest.fixture
def landlord(make_user):
    return make_user("landlord", email="landlord@example.com")


@pytest.fixture
def buyer(make_user):
    return make_user("buyer", email="buyer@example.com")


@pytest.fixture
def image_upload():
    return {"name": "front view.png", "type": "image/png", "data": data_url()}


@pytest.fixture
def rental_form(image_upload):
    return {
        "property_category": "rental",
        "title": "Two bedroom apartment in Kitty",
        "description": "Bright upstairs apartment close to the seawall, with parking and a water tank.",
        "price": "120,000",
        "property_type": "Apartment",
        "bedrooms": 2,
        "bathrooms": 1,
        "square_footage": "900",
        "location": "Kitty, Georgetown",
        "region": "Georgetown",
        "country": "Guyana",
        "features": ["Air Conditioning", "Parking", "AC"],
        "images": [image_upload],
    }


@pytest.fixture
def sale_form(image_upload):
    return {
        "property_category": "sale",
        "title": "Family home in Bel Air Park",
        "description": "Four bedroom concrete home on a corner lot with a pool and mature garden.",
        "price": 45000000,
        "property_type": "Single Family Home",
        "bedrooms": 4,
        "bathrooms": 3,
        "house_size_value": 2400,
        "region": "Demerara-Mahaica",
        "city": "Georgetown",
        "owner_email": "seller@example.com",
        "owner_whatsapp": "+5926001234",
        "amenities": ["Swimming Pool", "Garden"],
        "images": [image_upload, dict(image_upload, name="kitchen.png")],
        "primary_image_index": 1,
    }
