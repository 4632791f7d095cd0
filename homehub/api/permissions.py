"""
Admin Permissions
Resolve what an admin may do from their admin level and assigned country.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .config import get_settings
from ..models.listing import AdminLevel


class AdminPermissions(BaseModel):
    """Capabilities of an admin account."""

    admin_level: Optional[str] = Field(None, description="Resolved admin level")
    can_view_users: bool = False
    can_edit_users: bool = False
    can_delete_users: bool = False
    can_approve_properties: bool = False
    can_reject_properties: bool = False
    can_verify_agents: bool = False
    can_view_system_settings: bool = False
    can_edit_system_settings: bool = False
    can_manage_admins: bool = False
    can_view_all_countries: bool = False
    assigned_country_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.admin_level is not None

    @property
    def is_super(self) -> bool:
        return self.admin_level == AdminLevel.SUPER.value

    @property
    def country_filter(self) -> Optional[str]:
        """Country to restrict queries to, or None for all countries."""
        if self.can_view_all_countries:
            return None
        return self.assigned_country_id

    def can_access_country(self, country_id: Optional[str]) -> bool:
        if self.can_view_all_countries:
            return True
        if not self.assigned_country_id:
            return False
        return (country_id or "").upper() == self.assigned_country_id.upper()


def is_super_admin(email: Optional[str], admin_level: Optional[str]) -> bool:
    if admin_level == AdminLevel.SUPER.value:
        return True
    return bool(email) and email.lower() in get_settings().super_admin_email_list


def get_admin_permissions(
    user_type: Optional[str],
    email: Optional[str],
    admin_level: Optional[str] = None,
    country_id: Optional[str] = None,
) -> AdminPermissions:
    """
    Build permissions for an account.

    Super admins see everything in every country. Owner (country) admins and
    basic admins review listings in their own country only; only owner admins
    may verify agents. Accounts without an admin level get nothing, which covers
    FSBO owners whose user_type is "owner".
    """
    if is_super_admin(email, admin_level):
        return AdminPermissions(
            admin_level=AdminLevel.SUPER.value,
            can_view_users=True,
            can_edit_users=True,
            can_delete_users=True,
            can_approve_properties=True,
            can_reject_properties=True,
            can_verify_agents=True,
            can_view_system_settings=True,
            can_edit_system_settings=True,
            can_manage_admins=True,
            can_view_all_countries=True,
        )

    if admin_level == AdminLevel.OWNER.value:
        return AdminPermissions(
            admin_level=AdminLevel.OWNER.value,
            can_view_users=True,
            can_approve_properties=True,
            can_reject_properties=True,
            can_verify_agents=True,
            can_view_system_settings=True,
            assigned_country_id=country_id,
        )

    if admin_level == AdminLevel.BASIC.value:
        return AdminPermissions(
            admin_level=AdminLevel.BASIC.value,
            can_view_users=True,
            can_approve_properties=True,
            can_reject_properties=True,
            assigned_country_id=country_id,
        )

    return AdminPermissions()


def permissions_for(profile) -> AdminPermissions:
    """Permissions for a Profile row."""
    if profile.user_type != "admin" and not is_super_admin(profile.email, profile.admin_level):
        return AdminPermissions()
    return get_admin_permissions(profile.user_type, profile.email, profile.admin_level, profile.country_id)
