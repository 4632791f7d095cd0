"""
User-specific routes.
Handles the caller's own agent application.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...db.models import AgentVetting, Profile
from ..dependencies import get_current_user, get_db
from ..errors import ConflictError, ResourceNotFoundError
from ..schemas.admin import AgentApplicationResponse, AgentApplicationUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

RESUBMITTABLE_STATUSES = {"needs_more_info", "rejected"}


def _own_application(db: Session, user: Profile) -> AgentVetting:
    application = (
        db.query(AgentVetting)
        .filter(AgentVetting.user_id == user.id)
        .order_by(AgentVetting.submitted_at.desc())
        .first()
    )
    if application is None:
        raise ResourceNotFoundError("Agent application", str(user.id))
    return application


@router.get("/me/agent-application", response_model=AgentApplicationResponse)
async def get_my_agent_application(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the caller's agent application and its review status."""
    return AgentApplicationResponse.model_validate(_own_application(db, current_user))


@router.put("/me/agent-application", response_model=AgentApplicationResponse)
async def resubmit_agent_application(
    request: AgentApplicationUpdateRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update and resubmit an agent application.

    Only allowed after an admin asked for more information or rejected it;
    the application goes back to pending_review.
    """
    application = _own_application(db, current_user)
    if application.status not in RESUBMITTABLE_STATUSES:
        raise ConflictError(
            f"Application cannot be resubmitted while {application.status}",
            details={"status": application.status},
        )

    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(application, field, value)
    if request.phone:
        current_user.phone = request.phone

    application.status = "pending_review"
    application.submitted_at = datetime.utcnow()
    application.rejection_reason = None
    current_user.approval_status = "pending"
    db.commit()
    db.refresh(application)

    logger.info(f"Agent application {application.id} resubmitted by {current_user.id}")
    return AgentApplicationResponse.model_validate(application)
