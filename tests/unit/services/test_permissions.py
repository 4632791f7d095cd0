"""
Tests for admin permission resolution.
"""

from types import SimpleNamespace

from homehub.api.config import reset_settings
from homehub.api.permissions import get_admin_permissions, is_super_admin, permissions_for


def profile(user_type="admin", email="someone@example.com", admin_level=None, country_id="GY"):
    return SimpleNamespace(user_type=user_type, email=email, admin_level=admin_level, country_id=country_id)


def test_super_admin_by_level():
    permissions = get_admin_permissions("admin", "a@example.com", "super")

    assert permissions.is_super
    assert permissions.can_view_all_countries
    assert permissions.can_manage_admins
    assert permissions.country_filter is None
    assert permissions.can_access_country("GH")


def test_super_admin_by_configured_email(monkeypatch):
    monkeypatch.setenv("SUPER_ADMIN_EMAILS", "Boss@Example.com, other@example.com")
    reset_settings()

    assert is_super_admin("boss@example.com", None)
    assert permissions_for(profile(user_type="agent", email="boss@example.com")).is_super


def test_owner_admin_is_country_scoped():
    permissions = get_admin_permissions("admin", "o@example.com", "owner", "GY")

    assert permissions.can_approve_properties
    assert permissions.can_verify_agents
    assert not permissions.can_edit_users
    assert not permissions.can_delete_users
    assert permissions.country_filter == "GY"
    assert permissions.can_access_country("gy")
    assert not permissions.can_access_country("GH")
    assert not permissions.can_access_country(None)


def test_basic_admin_cannot_verify_agents():
    permissions = get_admin_permissions("admin", "b@example.com", "basic", "GY")

    assert permissions.is_admin
    assert permissions.can_approve_properties
    assert permissions.can_reject_properties
    assert not permissions.can_verify_agents
    assert not permissions.can_view_system_settings


def test_non_admins_get_nothing():
    for user_type in ("agent", "fsbo", "landlord", "owner", "buyer"):
        permissions = permissions_for(profile(user_type=user_type, admin_level=None))
        assert not permissions.is_admin
        assert not permissions.can_approve_properties


def test_owner_account_is_not_an_owner_admin():
    # "owner" as a user_type is an FSBO-style account, not the owner admin level
    assert not permissions_for(profile(user_type="owner", admin_level="owner")).is_admin


def test_admin_without_level_has_no_permissions():
    assert not permissions_for(profile(user_type="admin", admin_level=None)).is_admin
