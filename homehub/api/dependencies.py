"""
Dependency Injection
FastAPI dependencies for database sessions, authentication and admin access.
"""

import logging
import uuid
from typing import Generator, Optional
from uuid import UUID

from fastapi import Cookie, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from .permissions import AdminPermissions, permissions_for
from .security import verify_token
from ..db.models import Profile
from ..db.session import get_session_factory

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """
    Get database session.

    Use as FastAPI dependency:
        @app.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_request_id(request: Request) -> str:
    """Request id set by the logging middleware, or a fresh one."""
    request_id = getattr(request.state, "request_id", None)
    return request_id or str(uuid.uuid4())


def _extract_token(access_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Token from an Authorization: Bearer header, falling back to the access_token cookie."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return access_token or None


def _user_from_token(token: str, db: Session) -> Profile:
    payload = verify_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user ID in token",
        )

    user = db.query(Profile).filter(Profile.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


def get_current_user(
    access_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Profile:
    """
    Get current authenticated user from the JWT in the cookie or bearer header.

    Use as FastAPI dependency to protect routes:
        @app.get("/endpoint")
        def endpoint(current_user: Profile = Depends(get_current_user)):
            ...

    Raises:
        HTTPException: 401 if not authenticated or token invalid
    """
    token = _extract_token(access_token, authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _user_from_token(token, db)


def get_admin_permissions(current_user: Profile = Depends(get_current_user)) -> AdminPermissions:
    """
    Require an admin caller and return their permissions.

    Raises:
        HTTPException: 403 if the caller has no admin level
    """
    permissions = permissions_for(current_user)
    if not permissions.is_admin:
        logger.warning(f"Non-admin {current_user.id} attempted admin access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return permissions


def require_super_admin(permissions: AdminPermissions = Depends(get_admin_permissions)) -> AdminPermissions:
    if not permissions.is_super:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required",
        )
    return permissions
