"""
Tests for listing create, read, edit, delete and owner status changes.
"""

from pathlib import Path
from uuid import UUID

from homehub.db import Property


def set_status(db, property_id, status):
    prop = db.query(Property).filter(Property.id == UUID(property_id)).one()
    prop.status = status
    db.commit()


def test_create_rental(client, landlord, rental_form, headers_for, settings):
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["status"] == "pending"
    assert body["message"] == "Property submitted for review"
    assert body["duplicate_warning"] is None

    listing = client.get(f"/api/v1/properties/{body['property_id']}", headers=headers_for(landlord)).json()
    assert listing["price"] == 120000
    assert listing["currency"] == "GYD"
    assert listing["formatted_price"] == "G$120,000"
    assert listing["listing_type"] == "rent"
    assert listing["listed_by_type"] == "landlord"
    assert listing["city"] == "Georgetown"
    assert listing["house_size_value"] == 900
    assert listing["rental_type"] == "monthly"
    assert listing["site_id"] == "guyana"
    assert listing["amenities"] == ["AC", "Parking"]

    assert len(listing["images"]) == 1
    image = listing["images"][0]
    assert image["is_primary"] is True
    assert image["url"].startswith("http://testserver/media/")
    stored = Path(settings.media_root) / image["url"].split("/media/", 1)[1]
    assert stored.exists()


def test_create_sale_as_draft(client, fsbo, sale_form, headers_for):
    sale_form["status"] = "draft"
    body = client.post("/api/v1/properties", json=sale_form, headers=headers_for(fsbo)).json()

    assert body["status"] == "draft"
    assert body["message"] == "Property saved as draft"

    listing = client.get(f"/api/v1/properties/{body['property_id']}", headers=headers_for(fsbo)).json()
    assert listing["property_type"] == "House"
    assert listing["listed_by_type"] == "owner"
    assert listing["amenities"] == ["Pool", "Garden"]
    assert listing["site_id"] == "portal"
    # Primary image comes first
    assert [img["is_primary"] for img in listing["images"]] == [True, False]
    assert listing["images"][0]["display_order"] == 1


def test_agent_listings_are_listed_by_agent(client, agent, sale_form, create_listing, headers_for):
    body = create_listing(agent, sale_form)
    listing = client.get(f"/api/v1/properties/{body['property_id']}", headers=headers_for(agent)).json()
    assert listing["listed_by_type"] == "agent"


def test_missing_field(client, landlord, rental_form, headers_for):
    del rental_form["bedrooms"]
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Missing field: bedrooms"


def test_invalid_category(client, landlord, rental_form, headers_for):
    rental_form["property_category"] = "lease"
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))

    assert response.status_code == 400
    assert "property_category" in response.json()["error"]["message"]


def test_price_must_be_positive(client, landlord, rental_form, headers_for):
    rental_form["price"] = "-10"
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Price must be a positive number"


def test_image_limits(client, landlord, rental_form, image_upload, headers_for):
    rental_form["images"] = [image_upload] * 16
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Image limit exceeded (15 allowed)"

    rental_form["images"] = []
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))
    assert response.json()["error"]["message"] == "Missing field: images"


def test_bad_image_is_rejected(client, landlord, rental_form, headers_for, db):
    rental_form["images"][0] = {"name": "doc.pdf", "type": "application/pdf", "data": "data:application/pdf;base64,JVBERi0="}
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Image upload failed for file 1"
    assert db.query(Property).count() == 0


def test_new_listing_status_must_be_draft_or_pending(client, landlord, rental_form, headers_for):
    rental_form["status"] = "active"
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))
    assert response.status_code == 400


def test_buyer_cannot_list(client, buyer, rental_form, headers_for):
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(buyer))
    assert response.status_code == 403


def test_rejected_account_cannot_list(client, make_user, rental_form, headers_for):
    rejected = make_user("landlord", approval_status="rejected")
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(rejected))
    assert response.status_code == 403


def test_rejected_agent_cannot_list(client, make_user, sale_form, headers_for):
    rejected = make_user("agent", approval_status="rejected")
    response = client.post("/api/v1/properties", json=sale_form, headers=headers_for(rejected))
    assert response.status_code == 403


def test_overflowing_number_is_a_bad_request(client, landlord, rental_form, headers_for):
    for value in ("inf", "-inf", "1e999"):
        rental_form["bedrooms"] = value
        response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))

        assert response.status_code == 400, value
        assert response.json()["error"]["message"] == "bedrooms must be a number"


def test_pending_account_can_list(client, make_user, rental_form, create_listing):
    pending = make_user("fsbo", approval_status="pending")
    assert create_listing(pending, rental_form)["status"] == "pending"


def test_duplicate_warning_and_strict_check(client, landlord, rental_form, create_listing, headers_for):
    first = create_listing(landlord, rental_form)
    second = create_listing(landlord, rental_form)

    assert second["duplicate_warning"]["existing_property_id"] == first["property_id"]

    rental_form["strict_duplicate_check"] = True
    response = client.post("/api/v1/properties", json=rental_form, headers=headers_for(landlord))
    assert response.status_code == 409


def test_create_requires_auth(client, rental_form):
    assert client.post("/api/v1/properties", json=rental_form).status_code == 401


def test_my_properties_with_counts(client, fsbo, sale_form, rental_form, create_listing, headers_for):
    create_listing(fsbo, sale_form)
    rental_form["status"] = "draft"
    create_listing(fsbo, rental_form)

    body = client.get("/api/v1/properties/mine", headers=headers_for(fsbo)).json()
    assert body["total"] == 2
    assert body["counts"]["pending"] == 1
    assert body["counts"]["draft"] == 1
    assert body["counts"]["sold"] == 0

    drafts_only = client.get("/api/v1/properties/mine?status=draft", headers=headers_for(fsbo)).json()
    assert drafts_only["total"] == 1


def test_other_users_cannot_read_listing(client, fsbo, landlord, basic_admin, sale_form, create_listing, headers_for):
    property_id = create_listing(fsbo, sale_form)["property_id"]

    assert client.get(f"/api/v1/properties/{property_id}", headers=headers_for(landlord)).status_code == 404
    assert client.get(f"/api/v1/properties/{property_id}", headers=headers_for(basic_admin)).status_code == 200


def test_editing_active_listing_returns_it_to_review(client, db, fsbo, sale_form, create_listing, headers_for):
    property_id = create_listing(fsbo, sale_form)["property_id"]
    set_status(db, property_id, "active")

    edit = {k: v for k, v in sale_form.items() if k not in ("images", "property_category", "primary_image_index")}
    edit["price"] = "43,500,000"
    edit["amenities"] = ["Air Conditioning"]
    response = client.put(f"/api/v1/properties/{property_id}", json=edit, headers=headers_for(fsbo))

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["status"] == "pending"
    assert body["price"] == 43500000
    assert body["amenities"] == ["AC"]
    assert body["listed_by_type"] == "owner"


def test_admin_edit_keeps_listing_active(client, db, fsbo, super_admin, sale_form, create_listing, headers_for):
    property_id = create_listing(fsbo, sale_form)["property_id"]
    set_status(db, property_id, "active")

    edit = {k: v for k, v in sale_form.items() if k != "images"}
    edit["title"] = "Family home in Bel Air Park, reduced"
    response = client.put(f"/api/v1/properties/{property_id}", json=edit, headers=headers_for(super_admin))

    assert response.json()["status"] == "active"


def test_edit_missing_field(client, fsbo, sale_form, create_listing, headers_for):
    property_id = create_listing(fsbo, sale_form)["property_id"]
    edit = {k: v for k, v in sale_form.items() if k not in ("images", "city")}

    response = client.put(f"/api/v1/properties/{property_id}", json=edit, headers=headers_for(fsbo))
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Missing field: city"


def test_delete_removes_media_files(client, fsbo, sale_form, create_listing, headers_for, settings):
    property_id = create_listing(fsbo, sale_form)["property_id"]
    listing = client.get(f"/api/v1/properties/{property_id}", headers=headers_for(fsbo)).json()
    paths = [Path(settings.media_root) / img["url"].split("/media/", 1)[1] for img in listing["images"]]
    assert all(p.exists() for p in paths)

    response = client.delete(f"/api/v1/properties/{property_id}", headers=headers_for(fsbo))

    assert response.status_code == 200
    assert not any(p.exists() for p in paths)
    assert client.get(f"/api/v1/properties/{property_id}", headers=headers_for(fsbo)).status_code == 404


def test_owner_status_changes(client, db, fsbo, sale_form, create_listing, headers_for):
    sale_form["status"] = "draft"
    property_id = create_listing(fsbo, sale_form)["property_id"]
    url = f"/api/v1/properties/{property_id}/status"

    submitted = client.patch(url, json={"status": "pending"}, headers=headers_for(fsbo))
    assert submitted.json()["status"] == "pending"

    self_approve = client.patch(url, json={"status": "active"}, headers=headers_for(fsbo))
    assert self_approve.status_code == 409
    assert self_approve.json()["error"]["details"] == {"from": "pending", "to": "active", "allowed": []}

    set_status(db, property_id, "active")
    assert client.patch(url, json={"status": "under_contract"}, headers=headers_for(fsbo)).status_code == 200

    wrong_close = client.patch(url, json={"status": "rented"}, headers=headers_for(fsbo))
    assert wrong_close.status_code == 409

    sold = client.patch(url, json={"status": "sold"}, headers=headers_for(fsbo))
    assert sold.json()["status"] == "sold"
    assert client.patch(url, json={"status": "active"}, headers=headers_for(fsbo)).status_code == 409
