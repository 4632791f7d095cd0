"""
Tests for legacy property type and amenity normalization.
"""

from homehub.models.normalization import (
    normalize_amenities,
    normalize_property_data,
    normalize_property_type,
)


def test_legacy_property_types_are_mapped():
    assert normalize_property_type("Single Family Home") == "House"
    assert normalize_property_type("Condo") == "Apartment"
    assert normalize_property_type("Industrial") == "Warehouse"


def test_current_property_type_is_unchanged():
    assert normalize_property_type("Apartment") == "Apartment"
    assert normalize_property_type(None) == ""


def test_amenities_are_mapped_and_deduplicated_in_order():
    amenities = ["Air Conditioning", "Parking", "AC", "Swimming Pool", "Pool"]
    assert normalize_amenities(amenities) == ["AC", "Parking", "Pool"]


def test_amenities_that_are_not_a_list_become_empty():
    assert normalize_amenities(None) == []
    assert normalize_amenities("Pool") == []


def test_normalize_property_data_returns_a_copy():
    data = {"property_type": "Villa", "amenities": ["Backup Generator"], "title": "Villa by the sea"}
    normalized = normalize_property_data(data)

    assert normalized == {"property_type": "House", "amenities": ["Generator"], "title": "Villa by the sea"}
    assert data["property_type"] == "Villa"
