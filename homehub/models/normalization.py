"""
Normalization of legacy listing values.
Older listings used longer property type and amenity names; these are mapped
to the current vocabulary whenever a listing is loaded for editing or saved.
"""

from typing import Any, Dict, List, Optional

# Old value -> current value
PROPERTY_TYPE_MAP = {
    # Residential
    "Single Family Home": "House",
    "Villa": "House",
    "Bungalow": "House",
    "Cottage": "House",
    "Duplex": "Multi-family",
    "Condo": "Apartment",
    "Townhouse": "House",
    # Land
    "Residential Farmland": "Residential Land",
    "Farmland": "Land",
    "Agricultural Land": "Land",
    # Commercial
    "Industrial": "Warehouse",
    "Medical": "Office",
}

AMENITY_MAP = {
    "Air Conditioning": "AC",
    "Swimming Pool": "Pool",
    "Security System": "Security",
    "Backup Generator": "Generator",
    "Laundry Room": "Laundry",
    "Internet/WiFi Ready": "Internet",
    "Fence/Gated": "Gated",
    "Solar Panels": "Solar",
    "Conference Room": "Conference",
    "Kitchen/Break Room": "Kitchen",
    "Reception Area": "Reception",
    "Handicap Accessible": "Handicap",
    "Elevator Access": "Elevator",
}


def normalize_property_type(property_type: Optional[str]) -> str:
    if not property_type:
        return ""
    return PROPERTY_TYPE_MAP.get(property_type, property_type)


def normalize_amenities(amenities: Optional[List[str]]) -> List[str]:
    """Map legacy amenity names and drop duplicates, keeping first-seen order."""
    if not amenities or not isinstance(amenities, list):
        return []

    seen = set()
    normalized = []
    for amenity in amenities:
        if not isinstance(amenity, str):
            continue
        value = AMENITY_MAP.get(amenity, amenity)
        if value not in seen:
            seen.add(value)
            normalized.append(value)
    return normalized


def normalize_property_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a listing dict with property type and amenities normalized."""
    normalized = dict(data)
    normalized["property_type"] = normalize_property_type(data.get("property_type"))
    normalized["amenities"] = normalize_amenities(data.get("amenities"))
    return normalized

