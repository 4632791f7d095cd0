"""
Listing field validation and mapping.
Turns a submitted listing form (rental or sale) into Property column values.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from .currency import currency_for_country, parse_price
from .normalization import normalize_amenities, normalize_property_type


class ListingStatus(str, Enum):
    """Property lifecycle states."""

    DRAFT = "draft"
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    UNDER_CONTRACT = "under_contract"
    SOLD = "sold"
    RENTED = "rented"
    OFF_MARKET = "off_market"


class ListingType(str, Enum):
    SALE = "sale"
    RENT = "rent"


class PropertyCategory(str, Enum):
    SALE = "sale"
    RENTAL = "rental"


class UserType(str, Enum):
    ADMIN = "admin"
    AGENT = "agent"
    FSBO = "fsbo"
    LANDLORD = "landlord"
    OWNER = "owner"
    BUYER = "buyer"


class AdminLevel(str, Enum):
    SUPER = "super"
    OWNER = "owner"
    BASIC = "basic"


RENTAL_REQUIRED_FIELDS = [
    "title", "description", "price", "property_type",
    "bedrooms", "bathrooms", "square_footage",
    "location", "images",
]

SALE_REQUIRED_FIELDS = [
    "title", "description", "price", "property_type",
    "bedrooms", "bathrooms", "house_size_value",
    "region", "city", "owner_email", "owner_whatsapp",
    "images",
]

class ListingValidationError(ValueError):
    """Raised when a submitted listing form is incomplete or malformed."""


def derive_site_id(country: Optional[str]) -> str:
    """Pick the site a listing is shown on from free-text country/region."""
    if not country:
        return "portal"
    text = country.lower()
    if "guyana" in text:
        return "guyana"
    if "ghana" in text:
        return "ghana"
    return "portal"


def required_fields(category: str) -> List[str]:
    if category == PropertyCategory.RENTAL.value:
        return RENTAL_REQUIRED_FIELDS
    if category == PropertyCategory.SALE.value:
        return SALE_REQUIRED_FIELDS
    raise ListingValidationError("Invalid property_category. Must be 'rental' or 'sale'")


def check_required(data: Dict[str, Any], fields: List[str]) -> None:
    """Raise on the first missing or empty field."""
    for field in fields:
        value = data.get(field)
        if value is None or value == "" or value == []:
            raise ListingValidationError(f"Missing field: {field}")


def _to_int(data: Dict[str, Any], field: str) -> Optional[int]:
    value = data.get(field)
    if value is None or value == "":
        return None
    try:
        return int(float(str(value).replace(",", "")))
    except (ValueError, OverflowError):
        raise ListingValidationError(f"{field} must be a number")


def _text(data: Dict[str, Any], field: str) -> Optional[str]:
    """Form text as a stripped string; numbers are accepted, lists and objects are not."""
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ListingValidationError(f"{field} must be text")
    return str(value).strip() or None


def _title(data: Dict[str, Any]) -> str:
    title = _text(data, "title")
    if not title:
        raise ListingValidationError("Missing field: title")
    return title[:255]


def _price(data: Dict[str, Any]) -> int:
    price = parse_price(data.get("price"))
    if price is None:
        raise ListingValidationError("Price must be a positive number")
    return price


def map_rental_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Column values for a landlord rental submission."""
    return {
        "title": _title(data),
        "description": _text(data, "description"),
        "price": _price(data),
        "property_type": normalize_property_type(_text(data, "property_type")),
        "bedrooms": _to_int(data, "bedrooms"),
        "bathrooms": _to_int(data, "bathrooms"),
        "house_size_value": _to_int(data, "square_footage"),
        "house_size_unit": "sqft",
        "amenities": normalize_amenities(data.get("features") or data.get("amenities")),
        "location": _text(data, "location"),
        "country": _text(data, "country"),
        "region": _text(data, "region"),
        # Rentals only collect a region
        "city": _text(data, "region"),
        "rental_type": data.get("rental_type") or "monthly",
        "currency": data.get("currency") or "GYD",
        "listing_type": ListingType.RENT.value,
        "listed_by_type": "landlord",
        "property_category": PropertyCategory.RENTAL.value,
        "site_id": derive_site_id(_text(data, "country")),
    }


def map_sale_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Column values for a sale submission (FSBO, owner or agent)."""
    return {
        "title": _title(data),
        "description": _text(data, "description"),
        "price": _price(data),
        "property_type": normalize_property_type(_text(data, "property_type")),
        "bedrooms": _to_int(data, "bedrooms"),
        "bathrooms": _to_int(data, "bathrooms"),
        "house_size_value": _to_int(data, "house_size_value"),
        "house_size_unit": data.get("house_size_unit") or "sqft",
        "land_size_value": _to_int(data, "land_size_value"),
        "land_size_unit": data.get("land_size_unit"),
        "year_built": _to_int(data, "year_built"),
        "amenities": normalize_amenities(data.get("amenities")),
        "location": _text(data, "location"),
        "country": _text(data, "country"),
        "region": _text(data, "region"),
        "city": _text(data, "city"),
        "neighborhood": _text(data, "neighborhood"),
        "owner_email": _text(data, "owner_email"),
        "owner_whatsapp": _text(data, "owner_whatsapp"),
        "currency": data.get("currency") or currency_for_country(data.get("country_id")),
        "listing_type": ListingType.SALE.value,
        "listed_by_type": "owner",
        "property_category": PropertyCategory.SALE.value,
        # Sale forms have no country field; region text carries it
        "site_id": derive_site_id(_text(data, "country") or _text(data, "region")),
    }


def map_listing_fields(data: Dict[str, Any], category: str) -> Dict[str, Any]:
    """Validate required fields and map a listing form to column values."""
    check_required(data, required_fields(category))
    if category == PropertyCategory.RENTAL.value:
        return map_rental_fields(data)
    return map_sale_fields(data)


def sold_status_for(listing_type: str) -> str:
    """Closing status for a listing: sold for sales, rented for rentals."""
    return ListingStatus.RENTED.value if listing_type == ListingType.RENT.value else ListingStatus.SOLD.value
