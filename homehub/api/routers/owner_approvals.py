"""
Account Approval Endpoints
FSBO, landlord and owner accounts wait for an admin before they are approved.
"""

import logging
from datetime import datetime
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...db.models import Profile
from ..dependencies import get_admin_permissions, get_current_user, get_db
from ..errors import InvalidRequestError, ResourceNotFoundError
from ..permissions import AdminPermissions
from ..schemas.admin import AccountApprovalRequest, AccountApprovalResponse
from ..schemas.auth import UserResponse
from ..services import notifications
from ..services.audit import record_admin_action
from ..services.listing_service import APPROVAL_GATED_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin/users", tags=["account approvals"])

DECISIONS = {"approve": "approved", "reject": "rejected"}


@router.get("/pending", response_model=List[UserResponse])
async def pending_accounts(
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    """Owner-type accounts awaiting approval, oldest first."""
    query = db.query(Profile).filter(
        Profile.user_type.in_(APPROVAL_GATED_TYPES),
        Profile.approval_status == "pending",
    )
    if not permissions.can_view_all_countries:
        query = query.filter(Profile.country_id == permissions.assigned_country_id)
    return [UserResponse.model_validate(p) for p in query.order_by(Profile.created_at.asc()).all()]


@router.post("/{user_id}/approval", response_model=AccountApprovalResponse)
async def decide_account(
    user_id: UUID,
    request: AccountApprovalRequest,
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> AccountApprovalResponse:
    """Approve or reject an account. Rejections need a reason."""
    if request.action not in DECISIONS:
        raise InvalidRequestError("Invalid action. Must be 'approve' or 'reject'")
    if request.action == "reject" and not (request.reason or "").strip():
        raise InvalidRequestError("Rejection reason is required")

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile is None or not permissions.can_access_country(profile.country_id):
        raise ResourceNotFoundError("User", user_id)

    decision = DECISIONS[request.action]
    approved = decision == "approved"
    profile.approval_status = decision
    profile.approval_date = datetime.utcnow()
    profile.approved_by = current_user.id
    profile.approval_notes = request.notes
    profile.rejection_reason = None if approved else request.reason.strip()

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type=f"account_{decision}",
        target_type="profile",
        target_id=profile.id,
        details={"user_type": profile.user_type, "reason": profile.rejection_reason},
    )
    db.commit()
    db.refresh(profile)

    logger.info(f"Account {profile.id} {decision} by {current_user.id}")
    notifications.notify_account_decision(
        profile.email, profile.first_name, approved, profile.rejection_reason
    )

    return AccountApprovalResponse(
        message=f"User {decision} successfully",
        user=UserResponse.model_validate(profile),
    )
