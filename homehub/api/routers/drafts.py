"""
Draft Endpoints
Autosaved listing forms: save, list, load, delete, publish, cleanup.
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...db.models import Profile
from ...models.listing import ListingStatus
from ...models.quality import CompletionScorer
from ..dependencies import get_admin_permissions, get_current_user, get_db
from ..permissions import AdminPermissions
from ..schemas.draft import (
    DraftCleanupResponse,
    DraftListResponse,
    DraftPublishResponse,
    DraftResponse,
    DraftSaveRequest,
    DraftStatistics,
    DraftStatisticsResponse,
    DraftSummary,
)
from ..services import draft_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties/drafts", tags=["drafts"])


def _draft_response(draft) -> DraftResponse:
    analysis = CompletionScorer.analyze(draft.draft_data or {})
    response = DraftResponse.model_validate(draft)
    response.completion = analysis["percentage"]
    response.recommendations = analysis["recommendations"]
    return response


@router.post("", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
async def create_draft(
    request: DraftSaveRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DraftResponse:
    """Save a new draft."""
    draft = draft_service.save_draft(db, current_user, request.draft_data, draft_type=request.draft_type)
    return _draft_response(draft)


@router.get("", response_model=DraftListResponse)
async def list_drafts(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DraftListResponse:
    """List the caller's drafts, most recently saved first."""
    now = datetime.utcnow()
    drafts = [
        DraftSummary(
            id=d.id,
            title=d.title or "Untitled Draft",
            draft_type=d.draft_type,
            summary=draft_service.draft_summary(d.draft_data or {}),
            completion=draft_service.completion_for(d),
            save_count=d.save_count,
            last_saved=d.updated_at,
            expires_at=d.expires_at,
            created_at=d.created_at,
            is_expired=draft_service.is_expired(d, now),
        )
        for d in draft_service.list_drafts(db, current_user)
    ]
    return DraftListResponse(drafts=drafts)


# Cleanup routes come before /{draft_id} so "cleanup" is not parsed as an id
@router.post("/cleanup", response_model=DraftCleanupResponse)
async def cleanup_drafts(
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> DraftCleanupResponse:
    """Delete expired drafts (admin)."""
    deleted = draft_service.cleanup_expired_drafts(db)
    return DraftCleanupResponse(deleted_count=deleted, message=f"Cleaned up {deleted} expired drafts")


@router.get("/cleanup", response_model=DraftStatisticsResponse)
async def draft_cleanup_statistics(
    permissions: AdminPermissions = Depends(get_admin_permissions),
    db: Session = Depends(get_db),
) -> DraftStatisticsResponse:
    """Draft totals, expired count and average save count (admin)."""
    return DraftStatisticsResponse(statistics=DraftStatistics(**draft_service.draft_statistics(db)))


@router.get("/{draft_id}", response_model=DraftResponse)
async def get_draft(
    draft_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DraftResponse:
    """Load a draft; draft_data comes back exactly as saved."""
    return _draft_response(draft_service.get_draft(db, current_user, draft_id))


@router.put("/{draft_id}", response_model=DraftResponse)
async def update_draft(
    draft_id: UUID,
    request: DraftSaveRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DraftResponse:
    """Save over an existing draft."""
    draft = draft_service.save_draft(
        db, current_user, request.draft_data, draft_id=draft_id, draft_type=request.draft_type
    )
    return _draft_response(draft)


@router.delete("/{draft_id}")
async def delete_draft(
    draft_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    draft_service.delete_draft(db, current_user, draft_id)
    return {"success": True, "message": "Draft deleted successfully"}


@router.post("/{draft_id}/publish", response_model=DraftPublishResponse)
async def publish_draft(
    draft_id: UUID,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DraftPublishResponse:
    """
    Publish a draft as a listing.

    Admin drafts go live immediately; others wait for review.
    """
    prop = draft_service.publish_draft(db, current_user, draft_id)
    message = (
        "Property published and approved successfully"
        if prop.status == ListingStatus.ACTIVE.value
        else "Property published and is pending approval"
    )
    return DraftPublishResponse(property_id=prop.id, status=prop.status, message=message)
