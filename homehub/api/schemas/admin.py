"""
Admin request/response schemas.
Review decisions, agent vetting and account approvals.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .auth import UserResponse


class ReviewDecisionRequest(BaseModel):
    """Admin status change on a listing."""

    status: str = Field(..., description="active, rejected or off_market")
    rejection_reason: Optional[str] = Field(None, max_length=2000)


class ReviewDecisionResponse(BaseModel):
    success: bool = True
    property_id: UUID
    previous_status: str
    status: str
    message: str


class BulkDeleteResponse(BaseModel):
    success: bool = True
    deleted_count: int = Field(..., serialization_alias="deletedCount")
    message: str


class DashboardStatistics(BaseModel):
    pending: int = 0
    created_today: int = 0
    active: int = 0
    rejected: int = 0
    by_listed_by_type: Dict[str, int] = Field(default_factory=dict)
    pending_accounts: int = 0
    pending_agent_applications: int = 0


class DashboardResponse(BaseModel):
    profile: UserResponse
    statistics: DashboardStatistics
    permissions: Dict[str, Any]


class AdminActionResponse(BaseModel):
    id: UUID
    admin_id: Optional[UUID] = None
    action_type: str
    target_type: str
    target_id: str
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    model_config = {"from_attributes": True}


class AdminDraftResponse(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    draft_type: str
    country_id: Optional[str] = None
    save_count: int
    expires_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# Agent vetting

class AgentApplicationResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    country: Optional[str] = None
    license_number: Optional[str] = None
    company_name: Optional[str] = None
    years_experience: Optional[int] = None
    specialties: List[str] = Field(default_factory=list)
    references: List[Dict[str, Any]] = Field(default_factory=list)
    status: str
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AgentDecisionRequest(BaseModel):
    """Body for reject (reason) and request-info (note)."""

    reason: Optional[str] = Field(None, max_length=2000)
    note: Optional[str] = Field(None, max_length=2000)


class AgentApprovalResponse(BaseModel):
    success: bool = True
    message: str
    user_id: UUID
    email: str
    name: str


class AgentApplicationUpdateRequest(BaseModel):
    """Applicant resubmission after a request for more information."""

    phone: Optional[str] = Field(None, max_length=50)
    license_number: Optional[str] = Field(None, max_length=100)
    company_name: Optional[str] = Field(None, max_length=255)
    years_experience: Optional[int] = Field(None, ge=0, le=80)
    specialties: Optional[List[str]] = None
    references: Optional[List[Dict[str, Any]]] = None


class VerifyAgentRequest(BaseModel):
    action: str = Field(..., description="verify or revoke")

    @field_validator("action")
    @classmethod
    def validate_action(cls, v: str) -> str:
        if v not in ("verify", "revoke"):
            raise ValueError("action must be 'verify' or 'revoke'")
        return v


class AgentVerificationResponse(BaseModel):
    user_id: UUID
    is_verified_agent: bool
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None


# Owner / FSBO / landlord account approval

class AccountApprovalRequest(BaseModel):
    action: str = Field(..., description="approve or reject")
    reason: Optional[str] = Field(None, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)


class AccountApprovalResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse
