"""
Domain Models Package
Listing vocabulary, validation and helpers shared by the API and tasks.
"""

from .listing import (
    ListingStatus,
    ListingType,
    PropertyCategory,
    UserType,
    AdminLevel,
    ListingValidationError,
    map_listing_fields,
    derive_site_id,
)
from .quality import CompletionScorer
from .currency import format_currency, currency_for_country, parse_price
from .normalization import normalize_property_type, normalize_amenities, normalize_property_data

__all__ = [
    "ListingStatus",
    "ListingType",
    "PropertyCategory",
    "UserType",
    "AdminLevel",
    "ListingValidationError",
    "map_listing_fields",
    "derive_site_id",
    "CompletionScorer",
    "format_currency",
    "currency_for_country",
    "parse_price",
    "normalize_property_type",
    "normalize_amenities",
    "normalize_property_data",
]
