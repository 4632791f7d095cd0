"""
Tests for FSBO / landlord / owner account approval.
"""

from homehub.db import AdminAction, Profile


def decide(client, headers, user_id, **body):
    return client.post(f"/api/v1/admin/users/{user_id}/approval", json=body, headers=headers)


def test_pending_accounts_are_scoped_and_oldest_first(client, make_user, country_admin, super_admin, headers_for):
    first = make_user("fsbo", approval_status="pending")
    second = make_user("landlord", approval_status="pending")
    make_user("agent", approval_status="pending")
    make_user("fsbo")
    make_user("owner", country_id="GH", approval_status="pending")

    scoped = client.get("/api/v1/admin/users/pending", headers=headers_for(country_admin)).json()
    assert [u["id"] for u in scoped] == [str(first.id), str(second.id)]

    everything = client.get("/api/v1/admin/users/pending", headers=headers_for(super_admin)).json()
    assert len(everything) == 3


def test_approve_account(client, db, make_user, basic_admin, headers_for):
    pending = make_user("landlord", approval_status="pending")

    response = decide(client, headers_for(basic_admin), pending.id, action="approve", notes="Checked ID")

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == "User approved successfully"
    assert body["user"]["approval_status"] == "approved"

    db.expire_all()
    profile = db.get(Profile, pending.id)
    assert profile.approved_by == basic_admin.id
    assert profile.approval_notes == "Checked ID"
    assert db.query(AdminAction).one().action_type == "account_approved"


def test_reject_account_needs_reason(client, db, make_user, basic_admin, headers_for, sale_form, create_listing):
    pending = make_user("fsbo", approval_status="pending")

    assert decide(client, headers_for(basic_admin), pending.id, action="reject").status_code == 400

    body = decide(client, headers_for(basic_admin), pending.id, action="reject", reason="Not the owner").json()
    assert body["message"] == "User rejected successfully"

    db.expire_all()
    assert db.get(Profile, pending.id).rejection_reason == "Not the owner"
    assert db.query(AdminAction).one().action_type == "account_rejected"

    # Rejected accounts can no longer list
    create_listing(pending, sale_form, expected_status=403)


def test_invalid_action(client, make_user, basic_admin, headers_for):
    pending = make_user("fsbo", approval_status="pending")

    response = decide(client, headers_for(basic_admin), pending.id, action="suspend")

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid action. Must be 'approve' or 'reject'"


def test_account_outside_country_not_found(client, make_user, basic_admin, headers_for):
    abroad = make_user("owner", country_id="GH", approval_status="pending")

    response = decide(client, headers_for(basic_admin), abroad.id, action="approve")
    assert response.status_code == 404


def test_non_admin_cannot_approve(client, make_user, fsbo, headers_for):
    pending = make_user("fsbo", approval_status="pending")

    assert decide(client, headers_for(fsbo), pending.id, action="approve").status_code == 403
