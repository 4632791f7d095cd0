"""
Agent Vetting Endpoints
Admin review of agent applications and the verified-agent badge.
"""

import logging
import secrets
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...db.models import AgentVetting, Profile
from ...models.listing import UserType
from ..dependencies import get_admin_permissions, get_current_user, get_db
from ..errors import InvalidRequestError, PermissionDeniedError, ResourceNotFoundError
from ..permissions import AdminPermissions
from ..schemas.admin import (
    AgentApplicationResponse,
    AgentApprovalResponse,
    AgentDecisionRequest,
    AgentVerificationResponse,
    VerifyAgentRequest,
)
from ..security import hash_password
from ..services import notifications
from ..services.audit import record_admin_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin/agents", tags=["agent vetting"])

OPEN_STATUSES = ("pending_review", "needs_more_info")


def _load_application(db: Session, application_id: UUID, permissions: AdminPermissions) -> AgentVetting:
    application = db.query(AgentVetting).filter(AgentVetting.id == application_id).first()
    if application is None or not permissions.can_access_country(application.country):
        raise ResourceNotFoundError("Agent application", application_id)
    return application


def _load_open_application(db: Session, application_id: UUID, permissions: AdminPermissions) -> AgentVetting:
    application = (
        db.query(AgentVetting)
        .filter(AgentVetting.id == application_id, AgentVetting.status.in_(OPEN_STATUSES))
        .first()
    )
    if application is None or not permissions.can_access_country(application.country):
        raise ResourceNotFoundError("Agent application (not found or not pending)", application_id)
    return application


def _agent_profile_for(db: Session, application: AgentVetting) -> Profile:
    """Profile linked to an application, found by email, or created for it."""
    profile = None
    if application.user_id:
        profile = db.query(Profile).filter(Profile.id == application.user_id).first()
    if profile is None:
        profile = db.query(Profile).filter(Profile.email == application.email.lower()).first()
    if profile is None:
        # Random password; no login until a password is set for the account
        profile = Profile(
            email=application.email.lower(),
            password_hash=hash_password(secrets.token_urlsafe(32)),
            first_name=application.first_name,
            last_name=application.last_name,
            phone=application.phone,
            country_id=application.country,
            user_type=UserType.AGENT.value,
        )
        db.add(profile)
        db.flush()
    return profile


@router.get("", response_model=List[AgentApplicationResponse])
async def list_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    """Agent applications, newest first; country admins only see their own country."""
    query = db.query(AgentVetting)
    if status_filter:
        query = query.filter(AgentVetting.status == status_filter)
    if not permissions.can_view_all_countries:
        query = query.filter(AgentVetting.country == permissions.assigned_country_id)
    applications = query.order_by(AgentVetting.submitted_at.desc()).all()
    return [AgentApplicationResponse.model_validate(a) for a in applications]


@router.get("/{application_id}", response_model=AgentApplicationResponse)
async def get_application(
    application_id: UUID,
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    return AgentApplicationResponse.model_validate(_load_application(db, application_id, permissions))


@router.post("/{application_id}/approve", response_model=AgentApprovalResponse)
async def approve_application(
    application_id: UUID,
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> AgentApprovalResponse:
    """Approve an agent application and activate the agent's profile."""
    application = _load_open_application(db, application_id, permissions)

    now = datetime.utcnow()
    profile = _agent_profile_for(db, application)
    profile.user_type = UserType.AGENT.value
    profile.approval_status = "approved"
    profile.approval_date = now
    profile.approved_by = current_user.id
    profile.rejection_reason = None

    application.user_id = profile.id
    application.status = "approved"
    application.reviewed_by = current_user.id
    application.reviewed_at = now

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type="agent_approved",
        target_type="agent_application",
        target_id=application.id,
        details={"user_id": str(profile.id), "email": profile.email},
    )
    db.commit()

    logger.info(f"Agent application {application.id} approved by {current_user.id}")
    notifications.notify_agent_application(profile.email, profile.first_name, "approved")

    return AgentApprovalResponse(
        message="Agent approved successfully",
        user_id=profile.id,
        email=profile.email,
        name=f"{application.first_name} {application.last_name}".strip(),
    )


@router.post("/{application_id}/reject", response_model=AgentApplicationResponse)
async def reject_application(
    application_id: UUID,
    request: AgentDecisionRequest,
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    """Reject an agent application. A reason is required."""
    if not (request.reason or "").strip():
        raise InvalidRequestError("Rejection reason is required")

    application = _load_open_application(db, application_id, permissions)
    now = datetime.utcnow()
    application.status = "rejected"
    application.rejection_reason = request.reason.strip()
    application.reviewed_by = current_user.id
    application.reviewed_at = now

    if application.user_id:
        profile = db.query(Profile).filter(Profile.id == application.user_id).first()
        if profile is not None:
            profile.approval_status = "rejected"
            profile.rejection_reason = application.rejection_reason

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type="agent_rejected",
        target_type="agent_application",
        target_id=application.id,
        details={"reason": application.rejection_reason},
    )
    db.commit()
    db.refresh(application)

    notifications.notify_agent_application(
        application.email, application.first_name, "rejected", application.rejection_reason
    )
    return AgentApplicationResponse.model_validate(application)


@router.post("/{application_id}/request-info", response_model=AgentApplicationResponse)
async def request_more_info(
    application_id: UUID,
    request: AgentDecisionRequest,
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
):
    """Ask the applicant for more information. A note is required."""
    note = (request.note or "").strip()
    if not note:
        raise InvalidRequestError("A note describing the missing information is required")

    application = _load_open_application(db, application_id, permissions)
    application.status = "needs_more_info"
    application.admin_notes = note
    application.reviewed_by = current_user.id
    application.reviewed_at = datetime.utcnow()

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type="agent_info_requested",
        target_type="agent_application",
        target_id=application.id,
        details={"note": note},
    )
    db.commit()
    db.refresh(application)

    notifications.notify_agent_application(application.email, application.first_name, "needs_more_info", note)
    return AgentApplicationResponse.model_validate(application)


def _load_agent_for_verification(db: Session, profile_id: UUID, permissions: AdminPermissions) -> Profile:
    if not permissions.can_verify_agents:
        raise PermissionDeniedError("Only super admins and country owners can verify agents")

    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None:
        raise ResourceNotFoundError("Profile", profile_id)
    if profile.user_type != UserType.AGENT.value:
        raise InvalidRequestError("Only agents can be verified", details={"user_type": profile.user_type})
    if not permissions.can_access_country(profile.country_id):
        raise PermissionDeniedError("Agent is outside your assigned territory")
    return profile


@router.patch("/{profile_id}/verify", response_model=AgentVerificationResponse)
async def set_agent_verification(
    profile_id: UUID,
    request: VerifyAgentRequest,
    current_user: Profile = Depends(get_current_user),
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> AgentVerificationResponse:
    """Grant or revoke the verified-agent badge."""
    profile = _load_agent_for_verification(db, profile_id, permissions)

    if request.action == "verify":
        profile.is_verified_agent = True
        profile.verified_by = current_user.id
        profile.verified_at = datetime.utcnow()
    else:
        profile.is_verified_agent = False
        profile.verified_by = None
        profile.verified_at = None

    record_admin_action(
        db,
        admin_id=current_user.id,
        action_type=f"agent_{request.action}",
        target_type="profile",
        target_id=profile.id,
    )
    db.commit()
    db.refresh(profile)

    logger.info(f"Agent {profile.id} {request.action} by {current_user.id}")
    return AgentVerificationResponse(
        user_id=profile.id,
        is_verified_agent=profile.is_verified_agent,
        verified_by=profile.verified_by,
        verified_at=profile.verified_at,
    )


@router.get("/{profile_id}/verify", response_model=AgentVerificationResponse)
async def get_agent_verification(
    profile_id: UUID,
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> AgentVerificationResponse:
    profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if profile is None or profile.user_type != UserType.AGENT.value:
        raise ResourceNotFoundError("Agent", profile_id)
    return AgentVerificationResponse(
        user_id=profile.id,
        is_verified_agent=profile.is_verified_agent,
        verified_by=profile.verified_by,
        verified_at=profile.verified_at,
    )
