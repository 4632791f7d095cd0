"""
Draft request/response schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DraftSaveRequest(BaseModel):
    """Autosave payload: the raw form state, stored as-is."""

    draft_data: Dict[str, Any] = Field(..., description="Form fields exactly as entered")
    draft_type: Optional[str] = Field(None, pattern="^(sale|rent)$")


class DraftResponse(BaseModel):
    id: UUID
    title: str
    draft_type: str
    draft_data: Dict[str, Any]
    save_count: int
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    completion: int = 0
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class DraftSummary(BaseModel):
    id: UUID
    title: str
    draft_type: str
    summary: str
    completion: int
    save_count: int
    last_saved: datetime
    expires_at: datetime
    created_at: datetime
    is_expired: bool = False


class DraftListResponse(BaseModel):
    success: bool = True
    drafts: List[DraftSummary]


class DraftPublishResponse(BaseModel):
    success: bool = True
    property_id: UUID
    status: str
    message: str


class DraftCleanupResponse(BaseModel):
    success: bool = True
    deleted_count: int
    message: str


class DraftStatistics(BaseModel):
    total_drafts: int
    active_drafts: int
    expired_drafts: int
    average_save_count: float


class DraftStatisticsResponse(BaseModel):
    success: bool = True
    statistics: DraftStatistics
