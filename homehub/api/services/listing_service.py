"""
Listing Service
Create, edit, delete and move listings through their lifecycle.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...db.models import Profile, Property, PropertyMedia
from ...models.listing import (
    ListingStatus,
    ListingValidationError,
    PropertyCategory,
    UserType,
    check_required,
    map_listing_fields,
    map_rental_fields,
    map_sale_fields,
    required_fields,
)
from ..config import get_settings
from ..errors import ConflictError, InvalidRequestError, PermissionDeniedError, ResourceNotFoundError
from . import lifecycle
from .media_storage import MediaStorage

logger = logging.getLogger(__name__)

# Accounts that need admin approval before they can list
APPROVAL_GATED_TYPES = {UserType.FSBO.value, UserType.LANDLORD.value, UserType.OWNER.value}
# Accounts whose rejection blocks listing; agents are rejected through vetting
REJECTION_BLOCKED_TYPES = APPROVAL_GATED_TYPES | {UserType.AGENT.value}
SUBMITTABLE_STATUSES = {ListingStatus.DRAFT.value, ListingStatus.PENDING.value}
MIN_DUPLICATE_TITLE_LENGTH = 5


def ensure_can_list(user: Profile) -> None:
    """Raise PermissionDeniedError when the account may not create listings."""
    if user.user_type in REJECTION_BLOCKED_TYPES and user.approval_status == "rejected":
        raise PermissionDeniedError(
            "Your account application was rejected; you cannot create listings",
            details={"approval_status": user.approval_status},
        )
    if user.user_type == UserType.BUYER.value:
        raise PermissionDeniedError("Buyer accounts cannot create listings")


def listed_by_for(user: Profile, default: str) -> str:
    if user.user_type == UserType.AGENT.value:
        return "agent"
    if user.user_type == UserType.ADMIN.value:
        return "admin"
    return default


def find_duplicate(db: Session, user_id, title: str, window_hours: Optional[int] = None) -> Optional[Property]:
    """
    Find a recent listing by the same user whose title contains this one.

    Titles shorter than five characters are too generic to compare.
    """
    title = (title or "").strip()
    if len(title) < MIN_DUPLICATE_TITLE_LENGTH:
        return None

    hours = window_hours if window_hours is not None else get_settings().duplicate_window_hours
    since = datetime.utcnow() - timedelta(hours=hours)
    return (
        db.query(Property)
        .filter(
            Property.user_id == user_id,
            Property.title.ilike(f"%{title}%"),
            Property.created_at >= since,
        )
        .order_by(Property.created_at.desc())
        .first()
    )


def _image_limit(category: str) -> int:
    settings = get_settings()
    if category == PropertyCategory.RENTAL.value:
        return settings.max_images_rental
    return settings.max_images_sale


def _check_images(images: List[Any], category: str) -> None:
    limit = _image_limit(category)
    if len(images) > limit:
        raise InvalidRequestError(f"Image limit exceeded ({limit} allowed)", details={"limit": limit})
    if len(images) < 1:
        raise InvalidRequestError("At least one image is required")


def _index(value: Any) -> int:
    """Form index as an int; anything unparseable falls back to 0."""
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def add_media(prop: Property, entries: List[Tuple[str, Optional[str], Optional[str]]],
               primary_index: Any = 0) -> None:
    """Attach (url, storage_path, alt_text) entries in order."""
    primary_index = _index(primary_index)
    if primary_index < 0 or primary_index >= len(entries):
        primary_index = 0
    for index, (url, storage_path, alt_text) in enumerate(entries):
        prop.media.append(
            PropertyMedia(
                media_url=url,
                storage_path=storage_path,
                media_type="image",
                alt_text=alt_text or f"Property image {index + 1}",
                is_primary=index == primary_index,
                display_order=index,
            )
        )


def _map_fields(data: Dict[str, Any], category: str, user: Profile) -> Dict[str, Any]:
    data = dict(data)
    data.setdefault("country_id", user.country_id)
    try:
        fields = map_listing_fields(data, category)
    except ListingValidationError as e:
        raise InvalidRequestError(str(e))
    fields["listed_by_type"] = listed_by_for(user, fields["listed_by_type"])
    return fields


def create_listing(
    db: Session,
    user: Profile,
    data: Dict[str, Any],
    storage: MediaStorage,
) -> Tuple[Property, Optional[Dict[str, Any]]]:
    """
    Create a listing from a submitted form.

    Args:
        db: Database session
        user: Submitting account
        data: Form fields including property_category, images, status
        storage: Where uploaded images are written

    Returns:
        (new property, duplicate warning or None)
    """
    ensure_can_list(user)

    category = data.get("property_category")
    if category not in (PropertyCategory.RENTAL.value, PropertyCategory.SALE.value):
        raise InvalidRequestError("Invalid property_category. Must be 'rental' or 'sale'")

    status = data.get("status") or ListingStatus.PENDING.value
    if status not in SUBMITTABLE_STATUSES:
        raise InvalidRequestError(
            f"New listings can only be saved as draft or pending, not '{status}'",
            details={"allowed": sorted(SUBMITTABLE_STATUSES)},
        )

    fields = _map_fields(data, category, user)
    images = data.get("images") or []
    _check_images(images, category)

    warning = None
    duplicate = find_duplicate(db, user.id, fields["title"])
    if duplicate is not None:
        warning = {
            "message": "A similar listing was created recently",
            "existing_property_id": str(duplicate.id),
            "existing_title": duplicate.title,
        }
        if data.get("strict_duplicate_check"):
            raise ConflictError("Possible duplicate listing", details=warning)
        logger.warning(f"Possible duplicate listing by {user.id}: '{fields['title']}'")

    stored = storage.save_images(str(user.id), images)

    prop = Property(
        user_id=user.id,
        country_id=user.country_id,
        status=status,
        **fields,
    )
    add_media(
        prop,
        [(s.url, s.storage_path, None) for s in stored],
        primary_index=data.get("primary_image_index") or 0,
    )

    db.add(prop)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete_files([s.storage_path for s in stored])
        raise
    db.refresh(prop)

    logger.info(f"Listing {prop.id} created by {user.id} with status {status}")
    return prop, warning


def get_listing(db: Session, property_id, user: Optional[Profile] = None,
                allow_admin: bool = False) -> Property:
    """
    Load a listing, optionally restricted to its owner.

    Raises:
        ResourceNotFoundError: when missing, or not visible to this user
    """
    prop = db.query(Property).filter(Property.id == property_id).first()
    if prop is None:
        raise ResourceNotFoundError("Property", property_id)
    if user is not None and prop.user_id != user.id and not allow_admin:
        raise ResourceNotFoundError("Property", property_id)
    return prop


def update_listing(db: Session, prop: Property, user: Profile, data: Dict[str, Any],
                   is_admin: bool = False) -> Property:
    """
    Apply an edit.

    An active listing edited by its (non-admin) owner goes back to review.
    """
    category = prop.property_category
    fields_required = [f for f in required_fields(category) if f != "images"]
    data = dict(data)
    data.setdefault("country_id", prop.country_id)
    try:
        check_required(data, fields_required)
        mapper = map_rental_fields if category == PropertyCategory.RENTAL.value else map_sale_fields
        fields = mapper(data)
    except ListingValidationError as e:
        raise InvalidRequestError(str(e))

    # Keep who listed it and where it lives
    for key in ("listed_by_type", "listing_type", "property_category"):
        fields.pop(key, None)
    if not data.get("currency"):
        fields.pop("currency", None)

    for key, value in fields.items():
        setattr(prop, key, value)

    if prop.status == ListingStatus.ACTIVE.value and not is_admin:
        prop.status = ListingStatus.PENDING.value
        logger.info(f"Listing {prop.id} edited while active, returned to review")

    prop.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(prop)
    return prop


def delete_listing(db: Session, prop: Property, storage: MediaStorage) -> None:
    """Delete a listing, its media rows and stored files."""
    paths = [m.storage_path for m in prop.media]
    db.delete(prop)
    db.commit()
    removed = storage.delete_files(paths)
    logger.info(f"Listing {prop.id} deleted ({removed} files removed)")


def change_status_as_owner(db: Session, prop: Property, new_status: str) -> Property:
    """Move a listing along the owner lifecycle (submit, under contract, sold, ...)."""
    lifecycle.check_owner_transition(prop.status, new_status, prop.listing_type)
    previous = prop.status
    prop.status = new_status
    prop.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(prop)
    logger.info(f"Listing {prop.id} status {previous} -> {new_status} by owner")
    return prop


def review_listing(db: Session, prop: Property, reviewer: Profile, new_status: str,
                   rejection_reason: Optional[str] = None) -> str:
    """
    Apply a reviewer decision. Caller commits.

    Returns:
        The previous status
    """
    lifecycle.check_reviewer_transition(prop.status, new_status)
    previous = prop.status
    prop.status = new_status
    prop.updated_at = datetime.utcnow()

    if new_status in (ListingStatus.ACTIVE.value, ListingStatus.REJECTED.value):
        prop.reviewed_by = reviewer.id
        prop.reviewed_at = datetime.utcnow()
    if new_status == ListingStatus.REJECTED.value:
        prop.rejection_reason = rejection_reason
    elif new_status == ListingStatus.ACTIVE.value:
        prop.rejection_reason = None

    return previous


def status_counts(db: Session, user_id) -> Dict[str, int]:
    """Number of the user's listings in each status."""
    rows = (
        db.query(Property.status, func.count(Property.id))
        .filter(Property.user_id == user_id)
        .group_by(Property.status)
        .all()
    )
    counts = {status.value: 0 for status in ListingStatus}
    for status, count in rows:
        counts[status] = count
    return counts
