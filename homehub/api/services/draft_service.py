"""
Draft Service
Save, load, publish and expire listing drafts.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ...db.models import Profile, Property, PropertyDraft
from ...models.listing import (
    ListingStatus,
    ListingType,
    ListingValidationError,
    PropertyCategory,
    UserType,
    check_required,
    map_rental_fields,
    map_sale_fields,
    required_fields,
)
from ...models.quality import CompletionScorer
from ..config import get_settings
from ..errors import DraftExpiredError, InvalidRequestError, PermissionDeniedError, ResourceNotFoundError
from .listing_service import add_media, ensure_can_list, listed_by_for

logger = logging.getLogger(__name__)

PUBLISHER_TYPES = {
    UserType.ADMIN.value,
    UserType.LANDLORD.value,
    UserType.AGENT.value,
    UserType.FSBO.value,
    UserType.OWNER.value,
}
AUTO_APPROVE_TYPES = {UserType.ADMIN.value}


def _expiry() -> datetime:
    return datetime.utcnow() + timedelta(days=get_settings().draft_lifetime_days)


def draft_title(data: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """Title from the form, or "<property type> - <date>" when blank."""
    title = data.get("title")
    title = str(title).strip() if isinstance(title, (str, int, float)) else ""
    if title:
        return title[:255]
    now = now or datetime.utcnow()
    return f"{data.get('property_type') or 'Property'} - {now:%Y-%m-%d}"


def draft_type_for(data: Dict[str, Any], fallback: Optional[str] = None) -> str:
    if data.get("listing_type") in (ListingType.SALE.value, ListingType.RENT.value):
        return data["listing_type"]
    if data.get("property_category") == PropertyCategory.RENTAL.value:
        return ListingType.RENT.value
    return fallback or ListingType.SALE.value


def draft_summary(data: Dict[str, Any]) -> str:
    """One-line summary such as "House • Georgetown • $250000 • 3BR"."""
    parts = []
    if data.get("property_type"):
        parts.append(str(data["property_type"]))
    if data.get("city"):
        parts.append(str(data["city"]))
    if data.get("price"):
        parts.append(f"${data['price']}")
    if data.get("bedrooms"):
        parts.append(f"{data['bedrooms']}BR")
    return " • ".join(parts) or "Untitled Draft"


def is_expired(draft: PropertyDraft, now: Optional[datetime] = None) -> bool:
    return draft.expires_at < (now or datetime.utcnow())


def save_draft(db: Session, user: Profile, data: Dict[str, Any],
               draft_id=None, draft_type: Optional[str] = None) -> PropertyDraft:
    """
    Create a draft, or save over an existing one.

    Saving the same form data again only touches the timestamps, so a
    double-submitted autosave does not count as a new save.
    """
    now = datetime.utcnow()

    if draft_id is None:
        draft = PropertyDraft(
            user_id=user.id,
            title=draft_title(data, now),
            draft_type=draft_type_for(data, draft_type),
            draft_data=data,
            country_id=user.country_id,
            save_count=1,
            expires_at=_expiry(),
        )
        db.add(draft)
        db.commit()
        db.refresh(draft)
        logger.info(f"Draft {draft.id} created by {user.id}")
        return draft

    draft = get_draft(db, user, draft_id)
    if draft.draft_data == data:
        draft.updated_at = now
        db.commit()
        db.refresh(draft)
        logger.debug(f"Draft {draft.id} unchanged, skipped save")
        return draft

    draft.draft_data = data
    draft.title = draft_title(data, now)
    draft.draft_type = draft_type_for(data, draft_type or draft.draft_type)
    draft.save_count = (draft.save_count or 0) + 1
    draft.expires_at = _expiry()
    draft.updated_at = now
    db.commit()
    db.refresh(draft)
    logger.info(f"Draft {draft.id} saved (save #{draft.save_count})")
    return draft


def get_draft(db: Session, user: Profile, draft_id) -> PropertyDraft:
    draft = (
        db.query(PropertyDraft)
        .filter(PropertyDraft.id == draft_id, PropertyDraft.user_id == user.id)
        .first()
    )
    if draft is None:
        raise ResourceNotFoundError("Draft", draft_id)
    return draft


def list_drafts(db: Session, user: Profile) -> List[PropertyDraft]:
    return (
        db.query(PropertyDraft)
        .filter(PropertyDraft.user_id == user.id)
        .order_by(PropertyDraft.updated_at.desc())
        .all()
    )


def delete_draft(db: Session, user: Profile, draft_id) -> None:
    draft = get_draft(db, user, draft_id)
    db.delete(draft)
    db.commit()
    logger.info(f"Draft {draft_id} deleted by {user.id}")


def _draft_images(data: Dict[str, Any]) -> Tuple[List[tuple], Any]:
    """
    Images already uploaded from the draft form.

    Returns:
        ((url, storage_path, alt_text) entries, primary index). An image flagged
        ``isPrimary`` wins over ``primary_image_index``.
    """
    images = data.get("images")
    entries = []
    primary = data.get("primary_image_index")
    for image in images if isinstance(images, list) else []:
        if isinstance(image, str):
            entries.append((image, None, None))
        elif isinstance(image, dict):
            url = image.get("url") or image.get("src")
            if not isinstance(url, str) or not url:
                continue
            if image.get("isPrimary") is True or image.get("is_primary") is True:
                primary = len(entries)
            entries.append((url, image.get("storage_path"), image.get("alt") or image.get("alt_text")))
    return entries, primary


def publish_draft(db: Session, user: Profile, draft_id) -> Property:
    """
    Turn a draft into a listing and delete the draft.

    Admins publish straight to active; everyone else goes to review.

    Raises:
        PermissionDeniedError: caller's account type cannot publish
        DraftExpiredError: draft is past its expiry
        InvalidRequestError: draft is missing required listing fields
    """
    if user.user_type not in PUBLISHER_TYPES:
        raise PermissionDeniedError(
            "Only admin, landlord, agent, FSBO or owner accounts can publish properties",
            details={"user_type": user.user_type},
        )
    ensure_can_list(user)

    draft = get_draft(db, user, draft_id)
    if is_expired(draft):
        raise DraftExpiredError(draft_id)

    data = dict(draft.draft_data or {})
    data.setdefault("title", draft.title)
    data.setdefault("country_id", user.country_id)
    category = data.get("property_category") or (
        PropertyCategory.RENTAL.value if draft.draft_type == ListingType.RENT.value else PropertyCategory.SALE.value
    )

    try:
        check_required(data, [f for f in required_fields(category) if f != "images"])
        mapper = map_rental_fields if category == PropertyCategory.RENTAL.value else map_sale_fields
        fields = mapper(data)
    except ListingValidationError as e:
        raise InvalidRequestError(str(e), details={"draft_id": str(draft_id)})

    fields["listed_by_type"] = listed_by_for(user, fields["listed_by_type"])
    status = ListingStatus.ACTIVE.value if user.user_type in AUTO_APPROVE_TYPES else ListingStatus.PENDING.value

    prop = Property(user_id=user.id, country_id=user.country_id, status=status, **fields)
    if status == ListingStatus.ACTIVE.value:
        prop.reviewed_by = user.id
        prop.reviewed_at = datetime.utcnow()
    images, primary_index = _draft_images(data)
    add_media(prop, images, primary_index=primary_index)

    db.add(prop)
    db.delete(draft)
    db.commit()
    db.refresh(prop)

    logger.info(f"Draft {draft_id} published as listing {prop.id} ({status})")
    return prop


def cleanup_expired_drafts(db: Session, now: Optional[datetime] = None) -> int:
    """Delete all expired drafts. Returns the number deleted."""
    now = now or datetime.utcnow()
    deleted = (
        db.query(PropertyDraft)
        .filter(PropertyDraft.expires_at < now)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info(f"Cleaned up {deleted} expired drafts")
    return deleted


def draft_statistics(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    drafts = db.query(PropertyDraft.expires_at, PropertyDraft.save_count).all()
    total = len(drafts)
    expired = sum(1 for expires_at, _ in drafts if expires_at < now)
    average = sum(save_count or 0 for _, save_count in drafts) / total if total else 0

    return {
        "total_drafts": total,
        "active_drafts": total - expired,
        "expired_drafts": expired,
        "average_save_count": round(average, 2),
    }


def completion_for(draft: PropertyDraft) -> int:
    return CompletionScorer.percentage(draft.draft_data or {})
