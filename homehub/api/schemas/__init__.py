"""
API Schemas
Pydantic request and response models.
"""

from .auth import TokenResponse, UserLoginRequest, UserRegisterRequest, UserResponse
from .draft import DraftResponse, DraftSaveRequest
from .property import PropertyCreateRequest, PropertyResponse, PropertyUpdateRequest

__all__ = [
    "UserRegisterRequest",
    "UserLoginRequest",
    "UserResponse",
    "TokenResponse",
    "PropertyCreateRequest",
    "PropertyUpdateRequest",
    "PropertyResponse",
    "DraftSaveRequest",
    "DraftResponse",
]
