"""
Public Listing Endpoints
Unauthenticated browsing of live listings.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload

from ...db.models import Property
from ...models.listing import ListingStatus
from ..dependencies import get_db
from ..errors import ResourceNotFoundError
from ..schemas.property import PropertyListResponse, PropertyResponse, PublicPropertyListResponse
from ..services.lifecycle import PUBLIC_STATUSES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/public/properties", tags=["public"])


@router.get("", response_model=PublicPropertyListResponse)
async def list_public_properties(
    listing_type: Optional[str] = Query(None, pattern="^(sale|rent)$"),
    site: Optional[str] = Query(None, description="Site id, e.g. guyana"),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    bedrooms: Optional[int] = Query(None, ge=0, description="Minimum bedrooms"),
    city: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> PublicPropertyListResponse:
    """
    Browse live listings, newest first.

    Only active and under-contract listings are visible.
    """
    query = db.query(Property).filter(Property.status.in_(PUBLIC_STATUSES))
    if listing_type:
        query = query.filter(Property.listing_type == listing_type)
    if site:
        query = query.filter(Property.site_id == site)
    if min_price is not None:
        query = query.filter(Property.price >= min_price)
    if max_price is not None:
        query = query.filter(Property.price <= max_price)
    if bedrooms is not None:
        query = query.filter(Property.bedrooms >= bedrooms)
    if city:
        query = query.filter(Property.city.ilike(city))

    total = query.count()
    properties = (
        query.options(selectinload(Property.media))
        .order_by(Property.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return PublicPropertyListResponse(
        properties=[PropertyResponse.from_property(p) for p in properties],
        total=total,
        limit=limit,
        offset=offset,
        site=site,
    )


@router.get("/top", response_model=PropertyListResponse)
async def top_properties(
    limit: int = Query(5, ge=1, le=50),
    listing_type: Optional[str] = Query(None, pattern="^(sale|rent)$"),
    db: Session = Depends(get_db),
) -> PropertyListResponse:
    """Highest-priced active listings."""
    query = db.query(Property).filter(Property.status == ListingStatus.ACTIVE.value)
    if listing_type:
        query = query.filter(Property.listing_type == listing_type)

    properties = query.order_by(Property.price.desc()).limit(limit).all()
    return PropertyListResponse(
        properties=[PropertyResponse.from_property(p) for p in properties],
        total=len(properties),
        limit=limit,
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_public_property(property_id: UUID, db: Session = Depends(get_db)) -> PropertyResponse:
    prop = (
        db.query(Property)
        .filter(Property.id == property_id, Property.status.in_(PUBLIC_STATUSES))
        .first()
    )
    if prop is None:
        raise ResourceNotFoundError("Property", property_id)
    return PropertyResponse.from_property(prop)
