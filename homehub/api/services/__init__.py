"""
API Services
Business logic services for API endpoints.
"""

from .media_storage import MediaStorage, get_media_storage
from . import audit, draft_service, lifecycle, listing_service, notifications

__all__ = [
    "MediaStorage",
    "get_media_storage",
    "audit",
    "draft_service",
    "lifecycle",
    "listing_service",
    "notifications",
]
