"""
Property Endpoints
POST /api/v1/properties - Create a listing
GET /api/v1/properties/mine - Caller's listings with per-status counts
GET/PUT/DELETE /api/v1/properties/{id} - Read, edit, delete a listing
PATCH /api/v1/properties/{id}/status - Owner lifecycle change
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...db.models import Profile, Property
from ...models.listing import ListingStatus
from ..dependencies import get_current_user, get_db, get_request_id
from ..errors import InvalidRequestError
from ..permissions import permissions_for
from ..schemas.property import (
    MyPropertiesResponse,
    PropertyCreateRequest,
    PropertyCreateResponse,
    PropertyResponse,
    PropertyUpdateRequest,
    StatusChangeRequest,
)
from ..services import listing_service
from ..services.media_storage import MediaStorage, get_media_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

VALID_STATUSES = {s.value for s in ListingStatus}


@router.post("", response_model=PropertyCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    request: PropertyCreateRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
    request_id: str = Depends(get_request_id),
) -> PropertyCreateResponse:
    """
    Create a rental or sale listing.

    Images are uploaded inline as data URLs. The listing is saved as a draft
    or submitted for review depending on `status`.
    """
    prop, warning = listing_service.create_listing(
        db, current_user, request.model_dump(), storage
    )
    logger.info(
        f"Listing {prop.id} created by {current_user.id} ({prop.status})",
        extra={"request_id": request_id},
    )

    message = (
        "Property saved as draft"
        if prop.status == ListingStatus.DRAFT.value
        else "Property submitted for review"
    )
    return PropertyCreateResponse(
        property_id=prop.id,
        status=prop.status,
        message=message,
        duplicate_warning=warning,
    )


@router.get("/mine", response_model=MyPropertiesResponse)
async def list_my_properties(
    status_filter: Optional[str] = Query(None, alias="status", description="Only this status"),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MyPropertiesResponse:
    """List the caller's listings, newest first."""
    query = db.query(Property).filter(Property.user_id == current_user.id)
    if status_filter:
        if status_filter not in VALID_STATUSES:
            raise InvalidRequestError(f"Unknown status: {status_filter}")
        query = query.filter(Property.status == status_filter)

    properties = query.order_by(Property.created_at.desc()).all()
    return MyPropertiesResponse(
        properties=[PropertyResponse.from_property(p) for p in properties],
        total=len(properties),
        counts=listing_service.status_counts(db, current_user.id),
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """Get one of the caller's listings (admins can read any)."""
    is_admin = permissions_for(current_user).is_admin
    prop = listing_service.get_listing(db, property_id, current_user, allow_admin=is_admin)
    return PropertyResponse.from_property(prop)


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    request: PropertyUpdateRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """
    Edit a listing.

    Editing an active listing sends it back to review unless the editor is an admin.
    """
    is_admin = permissions_for(current_user).is_admin
    prop = listing_service.get_listing(db, property_id, current_user, allow_admin=is_admin)
    prop = listing_service.update_listing(db, prop, current_user, request.model_dump(), is_admin=is_admin)
    return PropertyResponse.from_property(prop)


@router.delete("/{property_id}")
async def delete_property(
    property_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
) -> dict:
    """Delete a listing with its images."""
    is_admin = permissions_for(current_user).is_admin
    prop = listing_service.get_listing(db, property_id, current_user, allow_admin=is_admin)
    listing_service.delete_listing(db, prop, storage)
    return {"success": True, "message": "Property deleted successfully"}


@router.patch("/{property_id}/status", response_model=PropertyResponse)
async def change_property_status(
    property_id: UUID,
    request: StatusChangeRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PropertyResponse:
    """
    Owner status change: submit a draft, resubmit after rejection, mark under
    contract, sold/rented, or take off the market.
    """
    prop = listing_service.get_listing(db, property_id, current_user)
    prop = listing_service.change_status_as_owner(db, prop, request.status)
    return PropertyResponse.from_property(prop)
