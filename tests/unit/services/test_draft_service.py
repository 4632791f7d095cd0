"""
Tests for draft saving, publishing and expiry.
"""

from datetime import datetime, timedelta

import pytest

from homehub.api.errors import DraftExpiredError, InvalidRequestError, PermissionDeniedError, ResourceNotFoundError
from homehub.api.services import draft_service
from homehub.db import Property, PropertyDraft


def sale_draft_data():
    return {
        "property_category": "sale",
        "title": "Riverside lot with house",
        "description": "Three bedroom house on a large riverside lot.",
        "price": "32000000",
        "property_type": "House",
        "bedrooms": 3,
        "bathrooms": 2,
        "house_size_value": 1800,
        "region": "Essequibo",
        "city": "Anna Regina",
        "owner_email": "owner@example.com",
        "owner_whatsapp": "+5926009999",
        "images": [
            {"url": "https://cdn.example.com/a.jpg", "alt": "Front"},
            "https://cdn.example.com/b.jpg",
        ],
        "primary_image_index": 1,
    }


def test_draft_title_falls_back_to_type_and_date():
    now = datetime(2026, 3, 14)
    assert draft_service.draft_title({"title": "  My home "}, now) == "My home"
    assert draft_service.draft_title({"property_type": "Apartment"}, now) == "Apartment - 2026-03-14"
    assert draft_service.draft_title({}, now) == "Property - 2026-03-14"


def test_draft_summary():
    data = {"property_type": "House", "city": "Georgetown", "price": 250000, "bedrooms": 3}
    assert draft_service.draft_summary(data) == "House • Georgetown • $250000 • 3BR"
    assert draft_service.draft_summary({}) == "Untitled Draft"


def test_draft_type_for():
    assert draft_service.draft_type_for({"listing_type": "rent"}) == "rent"
    assert draft_service.draft_type_for({"property_category": "rental"}) == "rent"
    assert draft_service.draft_type_for({}, "rent") == "rent"
    assert draft_service.draft_type_for({}) == "sale"


def test_save_new_draft(db, fsbo, settings):
    draft = draft_service.save_draft(db, fsbo, {"title": "Starter home", "city": "Linden"})

    assert draft.save_count == 1
    assert draft.title == "Starter home"
    assert draft.draft_type == "sale"
    assert draft.country_id == "GY"
    expected_expiry = datetime.utcnow() + timedelta(days=settings.draft_lifetime_days)
    assert abs((draft.expires_at - expected_expiry).total_seconds()) < 60


def test_identical_save_does_not_count(db, fsbo):
    data = {"title": "Starter home", "bedrooms": 2}
    draft = draft_service.save_draft(db, fsbo, data)

    again = draft_service.save_draft(db, fsbo, dict(data), draft_id=draft.id)
    assert again.save_count == 1

    changed = draft_service.save_draft(db, fsbo, {"title": "Starter home", "bedrooms": 3}, draft_id=draft.id)
    assert changed.save_count == 2
    assert changed.draft_data == {"title": "Starter home", "bedrooms": 3}


def test_drafts_are_private(db, fsbo, landlord):
    draft = draft_service.save_draft(db, fsbo, {"title": "Mine"})

    with pytest.raises(ResourceNotFoundError):
        draft_service.get_draft(db, landlord, draft.id)
    assert draft_service.list_drafts(db, landlord) == []


def test_publish_as_fsbo_goes_to_review(db, fsbo):
    draft = draft_service.save_draft(db, fsbo, sale_draft_data())

    prop = draft_service.publish_draft(db, fsbo, draft.id)

    assert prop.status == "pending"
    assert prop.price == 32000000
    assert prop.listed_by_type == "owner"
    assert prop.currency == "GYD"
    assert [m.media_url for m in prop.media] == ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]
    assert [m.is_primary for m in prop.media] == [False, True]
    assert db.query(PropertyDraft).count() == 0


def test_publish_as_admin_goes_live(db, make_user):
    admin = make_user("admin", admin_level="basic")
    draft = draft_service.save_draft(db, admin, sale_draft_data())

    prop = draft_service.publish_draft(db, admin, draft.id)

    assert prop.status == "active"
    assert prop.listed_by_type == "admin"
    assert prop.reviewed_by == admin.id


def test_buyer_cannot_publish(db, buyer):
    draft = draft_service.save_draft(db, buyer, sale_draft_data())

    with pytest.raises(PermissionDeniedError):
        draft_service.publish_draft(db, buyer, draft.id)


def test_expired_draft_cannot_be_published(db, fsbo):
    draft = draft_service.save_draft(db, fsbo, sale_draft_data())
    draft.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    with pytest.raises(DraftExpiredError) as exc_info:
        draft_service.publish_draft(db, fsbo, draft.id)
    assert exc_info.value.status_code == 410


def test_incomplete_draft_cannot_be_published(db, fsbo):
    data = sale_draft_data()
    del data["owner_whatsapp"]
    draft = draft_service.save_draft(db, fsbo, data)

    with pytest.raises(InvalidRequestError, match="Missing field: owner_whatsapp"):
        draft_service.publish_draft(db, fsbo, draft.id)
    assert db.query(Property).count() == 0


def test_cleanup_and_statistics(db, fsbo):
    fresh = draft_service.save_draft(db, fsbo, {"title": "Fresh"})
    draft_service.save_draft(db, fsbo, {"title": "Fresh", "city": "Bartica"}, draft_id=fresh.id)
    stale = draft_service.save_draft(db, fsbo, {"title": "Stale"})
    stale.expires_at = datetime.utcnow() - timedelta(days=1)
    db.commit()

    assert draft_service.draft_statistics(db) == {
        "total_drafts": 2,
        "active_drafts": 1,
        "expired_drafts": 1,
        "average_save_count": 1.5,
    }

    assert draft_service.cleanup_expired_drafts(db) == 1
    assert [d.title for d in draft_service.list_drafts(db, fsbo)] == ["Fresh"]


def test_draft_title_accepts_numbers_and_ignores_structures():
    now = datetime(2024, 5, 1)

    assert draft_service.draft_title({"title": 12345}, now) == "12345"
    assert draft_service.draft_title({"title": ["x"], "property_type": "Land"}, now) == "Land - 2024-05-01"
