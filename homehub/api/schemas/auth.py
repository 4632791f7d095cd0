"""
Authentication request/response schemas.
Pydantic models for registration, login, and token management.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


def _check_password_strength(v: str) -> str:
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters long")

    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain at least one uppercase letter")

    if not any(c.islower() for c in v):
        raise ValueError("Password must contain at least one lowercase letter")

    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain at least one digit")

    return v


class UserRegisterRequest(BaseModel):
    """Request schema for account registration (agent, FSBO, landlord, owner)."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 characters)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=5, max_length=50)
    country: Optional[str] = Field(None, max_length=8, description="Country code, e.g. GY")

    # Agent application fields
    license_number: Optional[str] = Field(None, max_length=100)
    company_name: Optional[str] = Field(None, max_length=255)
    years_experience: Optional[int] = Field(None, ge=0, le=80)
    specialties: List[str] = Field(default_factory=list)
    references: List[dict] = Field(default_factory=list)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password strength."""
        return _check_password_strength(v)

    @field_validator("country")
    @classmethod
    def upper_country(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class UserResponse(BaseModel):
    """Safe user response schema (no password or sensitive data)."""

    id: UUID = Field(..., description="User unique identifier")
    email: str = Field(..., description="User email address")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    user_type: str = Field(..., description="admin, agent, fsbo, landlord, owner or buyer")
    admin_level: Optional[str] = None
    country_id: Optional[str] = None
    approval_status: str = Field(..., description="pending, approved or rejected")
    is_verified_agent: bool = False
    is_active: bool = Field(..., description="Whether account is active")
    created_at: datetime = Field(..., description="Account creation timestamp")
    last_login: Optional[datetime] = Field(None, description="Last login timestamp")

    model_config = {"from_attributes": True}  # Allow ORM model conversion


class TokenResponse(BaseModel):
    """Response schema for token issuance."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: Optional[str] = Field(None, description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user: Optional[UserResponse] = Field(None, description="User information")


class ChangePasswordRequest(BaseModel):
    """Request schema for changing password."""

    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., min_length=8, description="New password")

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        """Validate new password strength."""
        return _check_password_strength(v)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: dict = Field(..., description="message, type and details")
