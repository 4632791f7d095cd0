"""
Tests for unauthenticated listing browsing.
"""

import pytest

from homehub.db import Property


@pytest.fixture
def listings(db, fsbo, landlord, sale_form, rental_form, create_listing):
    """One active sale, one active rental, one under contract sale and one pending sale."""
    sale_id = create_listing(fsbo, sale_form)["property_id"]
    rental_id = create_listing(landlord, rental_form)["property_id"]

    sale_form["title"] = "Cottage in Diamond"
    sale_form["price"] = 12000000
    sale_form["bedrooms"] = 2
    contract_id = create_listing(fsbo, sale_form)["property_id"]

    sale_form["title"] = "Lot with view in Linden"
    pending_id = create_listing(fsbo, sale_form)["property_id"]

    statuses = {sale_id: "active", rental_id: "active", contract_id: "under_contract"}
    for prop in db.query(Property).all():
        prop.status = statuses.get(str(prop.id), prop.status)
    db.commit()

    return {"sale": sale_id, "rental": rental_id, "contract": contract_id, "pending": pending_id}


def ids(response):
    return {p["id"] for p in response.json()["properties"]}


def test_only_live_listings_are_public(client, listings):
    response = client.get("/api/v1/public/properties")

    assert response.status_code == 200
    assert response.json()["total"] == 3
    assert ids(response) == {listings["sale"], listings["rental"], listings["contract"]}


def test_filters(client, listings):
    assert ids(client.get("/api/v1/public/properties", params={"listing_type": "rent"})) == {listings["rental"]}
    assert ids(client.get("/api/v1/public/properties", params={"bedrooms": 3})) == {listings["sale"]}
    assert ids(
        client.get("/api/v1/public/properties", params={"listing_type": "sale", "max_price": 20000000})
    ) == {listings["contract"]}


def test_invalid_listing_type_rejected(client, listings):
    response = client.get("/api/v1/public/properties", params={"listing_type": "lease"})

    assert response.status_code == 422
    assert response.json()["error"]["type"] == "ValidationError"


def test_top_listings_by_price(client, listings):
    body = client.get("/api/v1/public/properties/top", params={"limit": 2}).json()

    # Under contract listings are not featured
    assert [p["id"] for p in body["properties"]] == [listings["sale"], listings["rental"]]


def test_public_detail(client, listings):
    live = client.get(f"/api/v1/public/properties/{listings['contract']}")
    assert live.status_code == 200
    assert live.json()["status"] == "under_contract"

    hidden = client.get(f"/api/v1/public/properties/{listings['pending']}")
    assert hidden.status_code == 404
