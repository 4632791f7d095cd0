"""
Database ORM Models
SQLAlchemy ORM models for database tables.
"""

from .models import (
    Base,
    Profile,
    Property,
    PropertyMedia,
    PropertyDraft,
    AgentVetting,
    AdminAction,
)

__all__ = [
    "Base",
    "Profile",
    "Property",
    "PropertyMedia",
    "PropertyDraft",
    "AgentVetting",
    "AdminAction",
]
