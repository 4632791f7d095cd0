"""
Authentication routes.
Handles registration, login, logout, and token refresh.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ...db.models import AgentVetting, Profile
from ...models.listing import UserType
from ..config import get_settings
from ..dependencies import get_current_user, get_db
from ..schemas.auth import (
    ChangePasswordRequest,
    ErrorResponse,
    TokenResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
)
from ..security import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_TOKEN_EXPIRE_DAYS,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
    verify_token,
)
from ..services import notifications

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])

REGISTRABLE_ROLES = {
    UserType.AGENT.value,
    UserType.FSBO.value,
    UserType.LANDLORD.value,
    UserType.OWNER.value,
}


# Helper function to get cookie settings based on environment
def get_cookie_settings() -> dict:
    """
    Get cookie settings based on environment.

    In production (HTTPS), use secure=True and samesite="none" for cross-origin requests.
    In development, use secure=False and samesite="lax" for localhost.
    """
    is_production = get_settings().is_production

    return {
        "httponly": True,
        "secure": is_production,
        "samesite": "none" if is_production else "lax",
        "path": "/",
    }


def _issue_tokens(user: Profile, response: Response, include_refresh: bool = True) -> TokenResponse:
    """Create tokens for a user and set them as httpOnly cookies."""
    token_data = {"sub": str(user.id), "email": user.email, "user_type": user.user_type}
    access_token = create_access_token(token_data)
    refresh_token = create_refresh_token(token_data) if include_refresh else None

    cookie_settings = get_cookie_settings()
    response.set_cookie(
        key="access_token",
        value=access_token,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **cookie_settings,
    )
    if refresh_token:
        response.set_cookie(
            key="refresh_token",
            value=refresh_token,
            max_age=REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
            **cookie_settings,
        )

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register/{role}",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Email already registered"},
        404: {"model": ErrorResponse, "description": "Unknown role"},
    },
)
async def register(
    role: str,
    request: UserRegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Register an agent, FSBO, landlord or owner account and log it in.

    The account starts with approval_status "pending". Agents also get a
    vetting application that admins review.
    """
    if role not in REGISTRABLE_ROLES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown account type: {role}",
        )

    email = request.email.lower()
    existing_user = db.query(Profile).filter(Profile.email == email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email address already registered",
        )

    new_user = Profile(
        email=email,
        password_hash=hash_password(request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        user_type=role,
        country_id=request.country,
        is_active=True,
        approval_status="pending",
    )
    db.add(new_user)
    db.flush()

    if role == UserType.AGENT.value:
        db.add(
            AgentVetting(
                user_id=new_user.id,
                first_name=request.first_name,
                last_name=request.last_name,
                email=email,
                phone=request.phone,
                country=request.country,
                license_number=request.license_number,
                company_name=request.company_name,
                years_experience=request.years_experience,
                specialties=request.specialties,
                references=request.references,
                status="pending_review",
            )
        )

    new_user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(new_user)

    logger.info(f"Registered {role} account {new_user.id}")
    notifications.notify_registration(new_user.email, new_user.first_name, role)

    return _issue_tokens(new_user, response)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    request: UserLoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Login and receive access/refresh tokens.

    Validates credentials and issues JWT tokens as httpOnly cookies.
    """
    user = db.query(Profile).filter(Profile.email == request.email.lower()).first()
    if not user or not verify_password(request.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    return _issue_tokens(user, response)


@router.post("/logout")
async def logout(response: Response) -> dict:
    """
    Logout by clearing auth cookies.
    """
    cookie_settings = get_cookie_settings()
    response.delete_cookie("access_token", **cookie_settings)
    response.delete_cookie("refresh_token", **cookie_settings)
    return {"message": "Successfully logged out"}


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(current_user: Profile = Depends(get_current_user)) -> UserResponse:
    """Get current authenticated user."""
    return UserResponse.model_validate(current_user)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid refresh token"},
    },
)
async def refresh_access_token(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Refresh access token using refresh token.

    Issues a new access token if refresh token is valid.
    """
    if not refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token not found",
        )

    payload = verify_token(refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID in token",
        )

    # Verify user still exists and is active
    user = db.query(Profile).filter(Profile.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return _issue_tokens(user, response, include_refresh=False)


@router.put(
    "/change-password",
    response_model=dict,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated or wrong password"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """
    Change user password.

    Requires valid access token and current password.
    """
    if not verify_password(request.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )

    current_user.password_hash = hash_password(request.new_password)
    current_user.updated_at = datetime.utcnow()
    db.commit()

    return {"message": "Password changed successfully"}
