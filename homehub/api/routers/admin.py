"""
Admin Endpoints
GET /admin/dashboard - Review statistics and permission flags
GET /admin/properties - Review queue
POST /admin/properties/{id}/status - Approve, reject or take down a listing
DELETE /admin/properties/rejected - Bulk delete rejected listings (super admin)
GET /admin/drafts - Drafts across all users
GET /admin/actions - Recent admin actions
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...db.models import AdminAction, AgentVetting, Profile, Property, PropertyDraft
from ...models.listing import ListingStatus
from ..dependencies import get_admin_permissions, get_current_user, get_db, require_super_admin
from ..errors import InvalidRequestError, PermissionDeniedError, ResourceNotFoundError
from ..permissions import AdminPermissions
from ..schemas.admin import (
    AdminActionResponse,
    AdminDraftResponse,
    BulkDeleteResponse,
    DashboardResponse,
    DashboardStatistics,
    ReviewDecisionRequest,
    ReviewDecisionResponse,
)
from ..schemas.auth import UserResponse
from ..schemas.property import PropertyListResponse, PropertyResponse
from ..services import listing_service, notifications
from ..services.audit import record_admin_action
from ..services.media_storage import MediaStorage, get_media_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

VALID_STATUSES = {s.value for s in ListingStatus}


def _scoped(query, column, permissions: AdminPermissions):
    """Restrict a query to the admin's country unless they see all countries."""
    if permissions.can_view_all_countries:
        return query
    return query.filter(column == permissions.country_filter)


@router.get("/dashboard", response_model=DashboardResponse)
async def admin_dashboard(
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> DashboardResponse:
    """Review queue statistics for the admin's scope."""
    base = _scoped(db.query(Property), Property.country_id, permissions)
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    by_listed_by = (
        _scoped(
            db.query(Property.listed_by_type, func.count(Property.id)),
            Property.country_id,
            permissions,
        )
        .group_by(Property.listed_by_type)
        .all()
    )

    statistics = DashboardStatistics(
        pending=base.filter(Property.status == ListingStatus.PENDING.value).count(),
        created_today=base.filter(Property.created_at >= today).count(),
        active=base.filter(Property.status == ListingStatus.ACTIVE.value).count(),
        rejected=base.filter(Property.status == ListingStatus.REJECTED.value).count(),
        by_listed_by_type={listed_by: count for listed_by, count in by_listed_by},
        pending_accounts=_scoped(
            db.query(Profile).filter(
                Profile.user_type.in_(("fsbo", "landlord", "owner")),
                Profile.approval_status == "pending",
            ),
            Profile.country_id,
            permissions,
        ).count(),
        pending_agent_applications=_scoped(
            db.query(AgentVetting).filter(AgentVetting.status == "pending_review"),
            AgentVetting.country,
            permissions,
        ).count(),
    )

    return DashboardResponse(
        profile=UserResponse.model_validate(current_user),
        statistics=statistics,
        permissions=permissions.model_dump(),
    )


@router.get("/properties", response_model=PropertyListResponse)
async def review_queue(
    status_filter: str = Query(ListingStatus.PENDING.value, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> PropertyListResponse:
    """Listings in a status (pending by default), oldest first."""
    if status_filter not in VALID_STATUSES:
        raise InvalidRequestError(f"Unknown status: {status_filter}")

    query = _scoped(
        db.query(Property).filter(Property.status == status_filter),
        Property.country_id,
        permissions,
    )
    total = query.count()
    properties = (
        query.options(selectinload(Property.media))
        .order_by(Property.created_at.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return PropertyListResponse(
        properties=[PropertyResponse.from_property(p) for p in properties],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post("/properties/{property_id}/status", response_model=ReviewDecisionResponse)
async def review_property(
    property_id: UUID,
    request: ReviewDecisionRequest,
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> ReviewDecisionResponse:
    """
    Approve, reject or take down a listing.

    Records the decision in the audit trail and emails the lister.
    """
    new_status = request.status
    if new_status == ListingStatus.ACTIVE.value and not permissions.can_approve_properties:
        raise PermissionDeniedError("You do not have permission to approve properties")
    if new_status == ListingStatus.REJECTED.value and not permissions.can_reject_properties:
        raise PermissionDeniedError("You do not have permission to reject properties")

    prop = db.query(Property).filter(Property.id == property_id).first()
    if prop is None:
        raise ResourceNotFoundError("Property", property_id)
    if not permissions.can_access_country(prop.country_id):
        raise PermissionDeniedError(
            "Property is outside your assigned country",
            details={"country_id": prop.country_id},
        )

    previous = listing_service.review_listing(
        db, prop, current_user, new_status, rejection_reason=request.rejection_reason
    )

    if new_status == ListingStatus.ACTIVE.value:
        action_type, message = "property_approved", "Property approved successfully"
    elif new_status == ListingStatus.REJECTED.value:
        action_type, message = "property_rejected", "Property rejected successfully"
    else:
        action_type, message = "property_status_changed", "Property status updated successfully"

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type=action_type,
        target_type="property",
        target_id=prop.id,
        details={
            "previous_status": previous,
            "new_status": new_status,
            "rejection_reason": request.rejection_reason,
            "title": prop.title,
        },
    )
    db.commit()
    logger.info(f"Admin {current_user.id} changed listing {prop.id}: {previous} -> {new_status}")

    owner = prop.owner
    notifications.notify_listing_reviewed(
        prop.owner_email or (owner.email if owner else None),
        owner.first_name if owner else None,
        prop.title,
        new_status,
        request.rejection_reason,
    )

    return ReviewDecisionResponse(
        property_id=prop.id,
        previous_status=previous,
        status=new_status,
        message=message,
    )


@router.delete("/properties/rejected", response_model=BulkDeleteResponse)
async def delete_rejected_properties(
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(require_super_admin),
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
) -> BulkDeleteResponse:
    """Delete every rejected listing together with its images."""
    rejected = (
        db.query(Property)
        .options(selectinload(Property.media))
        .filter(Property.status == ListingStatus.REJECTED.value)
        .all()
    )
    if not rejected:
        return BulkDeleteResponse(deleted_count=0, message="No rejected properties found to delete")

    paths = [m.storage_path for p in rejected for m in p.media]
    ids = [str(p.id) for p in rejected]
    for prop in rejected:
        db.delete(prop)

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type="properties_bulk_deleted",
        target_type="property",
        target_id="rejected",
        details={"count": len(ids), "property_ids": ids},
    )
    db.commit()
    storage.delete_files(paths)

    logger.info(f"Admin {current_user.id} deleted {len(ids)} rejected listings")
    return BulkDeleteResponse(
        deleted_count=len(ids),
        message=f"Successfully deleted {len(ids)} rejected properties",
    )


@router.get("/drafts", response_model=List[AdminDraftResponse])
async def all_drafts(
    country: Optional[str] = Query(None, description="Country code (super admins)"),
    limit: int = Query(100, ge=1, le=500),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    """Drafts across all users in the admin's scope."""
    query = _scoped(db.query(PropertyDraft), PropertyDraft.country_id, permissions)
    if country and permissions.can_view_all_countries:
        query = query.filter(PropertyDraft.country_id == country.upper())
    drafts = query.order_by(PropertyDraft.updated_at.desc()).limit(limit).all()
    return [AdminDraftResponse.model_validate(d) for d in drafts]


@router.get("/actions", response_model=List[AdminActionResponse])
async def recent_actions(
    limit: int = Query(50, ge=1, le=500),
    action_type: Optional[str] = Query(None),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    """Most recent admin decisions."""
    query = db.query(AdminAction)
    if action_type:
        query = query.filter(AdminAction.action_type == action_type)
    actions = query.order_by(AdminAction.created_at.desc()).limit(limit).all()
    return [AdminActionResponse.model_validate(a) for a in actions]
