"""
API Routers
FastAPI route handlers for different endpoints.
"""

from .admin import router as admin_router
from .agents import router as agents_router
from .auth import router as auth_router
from .drafts import router as drafts_router
from .health import router as health_router
from .owner_approvals import router as owner_approvals_router
from .properties import router as properties_router
from .public import router as public_router
from .users import router as users_router

__all__ = [
    "health_router",
    "auth_router",
    "users_router",
    "drafts_router",
    "properties_router",
    "public_router",
    "admin_router",
    "agents_router",
    "owner_approvals_router",
]
