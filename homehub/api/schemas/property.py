"""
Property request/response schemas.
Pydantic models for listing create/edit, status changes and listing output.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ...models.currency import format_currency
from ...models.normalization import normalize_property_data
from ...models.quality import CompletionScorer

NumberLike = Union[int, float, str]


class ImageUpload(BaseModel):
    """An image sent inline as a base64 data URL."""

    name: str = Field(default="image", max_length=255)
    type: str = Field(default="", description="MIME type, e.g. image/jpeg")
    data: str = Field(..., description="data:<type>;base64,<payload>")


class PropertyForm(BaseModel):
    """
    Listing form fields shared by create and edit.

    Everything is optional here so missing fields are reported as
    "Missing field: <name>" by the listing validator instead of a 422.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[NumberLike] = None
    currency: Optional[str] = Field(None, max_length=8)
    property_type: Optional[str] = None

    bedrooms: Optional[NumberLike] = None
    bathrooms: Optional[NumberLike] = None
    house_size_value: Optional[NumberLike] = None
    house_size_unit: Optional[str] = None
    land_size_value: Optional[NumberLike] = None
    land_size_unit: Optional[str] = None
    year_built: Optional[NumberLike] = None
    amenities: Optional[List[str]] = None

    location: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    neighborhood: Optional[str] = None

    owner_email: Optional[str] = None
    owner_whatsapp: Optional[str] = None

    # Rental form names
    square_footage: Optional[NumberLike] = None
    features: Optional[List[str]] = None
    rental_type: Optional[str] = None


class PropertyCreateRequest(PropertyForm):
    """Request schema for creating a listing."""

    property_category: Optional[str] = Field(None, description="rental or sale")
    status: Optional[str] = Field(None, description="draft or pending (default pending)")
    images: Optional[List[ImageUpload]] = None
    primary_image_index: int = Field(default=0, ge=0)
    strict_duplicate_check: bool = Field(default=False, description="Refuse likely duplicates with 409")


class PropertyUpdateRequest(PropertyForm):
    """Request schema for editing a listing."""


class StatusChangeRequest(BaseModel):
    """Request schema for an owner status change."""

    status: str = Field(..., description="Requested lifecycle status")


class PropertyImage(BaseModel):
    id: UUID
    url: str
    alt_text: Optional[str] = None
    is_primary: bool = False
    display_order: int = 0


class PropertyResponse(BaseModel):
    """Listing as returned by the API."""

    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    price: int
    currency: str
    formatted_price: str
    property_type: Optional[str] = None
    listing_type: str
    listed_by_type: str
    property_category: str
    rental_type: Optional[str] = None

    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    house_size_value: Optional[int] = None
    house_size_unit: Optional[str] = None
    land_size_value: Optional[int] = None
    land_size_unit: Optional[str] = None
    year_built: Optional[int] = None
    amenities: List[str] = Field(default_factory=list)

    location: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    neighborhood: Optional[str] = None
    site_id: str
    country_id: Optional[str] = None

    owner_email: Optional[str] = None
    owner_whatsapp: Optional[str] = None

    status: str
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    is_featured: bool = False
    created_at: datetime
    updated_at: datetime

    images: List[PropertyImage] = Field(default_factory=list)
    completion: Optional[int] = Field(None, description="Listing completeness, 0-100")

    @classmethod
    def from_property(cls, prop) -> "PropertyResponse":
        """Build from a Property row; images are ordered primary first, then by display order."""
        media = sorted(prop.media, key=lambda m: (not m.is_primary, m.display_order))
        images = [
            PropertyImage(
                id=m.id,
                url=m.media_url,
                alt_text=m.alt_text,
                is_primary=m.is_primary,
                display_order=m.display_order,
            )
            for m in media
        ]

        data = normalize_property_data(
            {column.name: getattr(prop, column.name) for column in prop.__table__.columns}
        )
        data["formatted_price"] = format_currency(prop.price, prop.currency)
        data["completion"] = CompletionScorer.percentage({**data, "images": images})
        data["images"] = images
        return cls(**data)


class PropertyCreateResponse(BaseModel):
    success: bool = True
    property_id: UUID
    status: str
    message: str
    duplicate_warning: Optional[Dict[str, Any]] = None


class PropertyListResponse(BaseModel):
    properties: List[PropertyResponse]
    total: int
    limit: Optional[int] = None
    offset: Optional[int] = None


class MyPropertiesResponse(BaseModel):
    properties: List[PropertyResponse]
    total: int
    counts: Dict[str, int]


class PublicPropertyListResponse(PropertyListResponse):
    site: Optional[str] = None
