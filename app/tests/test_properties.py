from sqlalchemy import func, select
from app.models.inquiry import ContactInquiry
from app.models.property import Property
from app.models.property_details import PropertyAmenity, PropertyFeature
from app.models.property_photo import PropertyPhoto
from app.models.review import Review
from app.models.user import User


def _count(db, model):
    db.expire_all()
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def _create(client, payload):
    res = client.post("/api/properties", json=payload)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def test_create_property_returns_listing_shape(client, property_payload):
    res = client.post("/api/properties", json=property_payload())
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Property created successfully"

    data = body["data"]
    assert data["zip_code"] == data["zipCode"] == "15232"
    assert data["propertyType"] == "House"
    assert data["listingType"] == "sell"
    assert data["squareFeet"] == 1800
    assert data["status"] == "active"
    assert data["features"] == ["Garage", "Fireplace"]
    assert data["amenities"] == ["Central Air"]
    assert data["coordinates"] == {"lat": 40.45, "lng": -79.93}
    assert data["ownerName"] == "Dana Smith"
    assert data["ownerPreferredContact"] == "email"
    assert data["reviews"] == []


def test_create_property_validation_error_envelope(client, db_session, property_payload):
    res = client.post("/api/properties", json=property_payload(zipCode="undefined"))
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "ZIP code is required and cannot be empty"
    assert "zipCode" in body["error"]
    assert _count(db_session, Property) == 0


def test_malformed_json_is_a_400(client):
    res = client.post(
        "/api/properties",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_photos_are_ordered_and_first_is_primary(client, db_session, property_payload):
    data = _create(
        client,
        property_payload(
            photos=[
                {"url": "https://img/a.jpg", "name": "a.jpg"},
                {"url": "https://img/b.jpg", "name": "b.jpg"},
                {"url": "https://img/c.jpg", "name": "c.jpg"},
            ]
        ),
    )
    assert [p["name"] for p in data["photos"]] == ["a.jpg", "b.jpg", "c.jpg"]
    assert [p["displayOrder"] for p in data["photos"]] == [1, 2, 3]
    assert [p["isPrimary"] for p in data["photos"]] == [True, False, False]

    rows = db_session.execute(
        select(PropertyPhoto).order_by(PropertyPhoto.display_order)
    ).scalars().all()
    assert [(r.photo_name, r.display_order, r.is_primary) for r in rows] == [
        ("a.jpg", 1, True),
        ("b.jpg", 2, False),
        ("c.jpg", 3, False),
    ]


def test_oversized_photo_persists_nothing(client, db_session, property_payload, monkeypatch):
    from app.config import settings

    monkeypatch.setattr(settings, "MAX_PHOTO_BYTES", 1024)
    res = client.post(
        "/api/properties",
        json=property_payload(
            photos=[
                {"url": "https://img/a.jpg", "name": "a.jpg"},
                {"url": "data:image/png;base64," + "A" * 2048, "name": "huge.png"},
            ]
        ),
    )
    assert res.status_code == 400
    assert "huge.png" in res.json()["message"]
    assert _count(db_session, Property) == 0
    assert _count(db_session, PropertyFeature) == 0
    assert _count(db_session, PropertyAmenity) == 0
    assert _count(db_session, PropertyPhoto) == 0


def test_store_failure_mid_create_rolls_back(client, db_session, property_payload, monkeypatch):
    from sqlalchemy.exc import IntegrityError
    from app.services.property_service import PropertyService

    def _fail(self, db, property_id, features, amenities, photos):
        db.add(PropertyFeature(property_id=property_id, feature_name="Garage"))
        db.flush()
        raise IntegrityError("INSERT INTO property_photos", {}, Exception("NOT NULL constraint failed: property_photos.photo_url"))

    monkeypatch.setattr(PropertyService, "_insert_children", _fail)
    res = client.post("/api/properties", json=property_payload())
    assert res.status_code == 500
    body = res.json()
    assert body["message"] == "Failed to create property"
    assert body["error"] == "NOT NULL constraint failed: property_photos.photo_url"
    assert _count(db_session, Property) == 0
    assert _count(db_session, PropertyFeature) == 0


def test_get_property_and_not_found(client, property_payload):
    created = _create(client, property_payload())
    res = client.get(f"/api/properties/{created['id']}")
    assert res.status_code == 200
    assert res.json()["data"]["title"] == "Renovated Colonial"

    res = client.get("/api/properties/9999")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Property not found"}


def test_update_without_features_keeps_them(client, property_payload):
    created = _create(client, property_payload())
    res = client.put(f"/api/properties/{created['id']}", json={"price": 299000})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["price"] == 299000
    assert data["features"] == ["Garage", "Fireplace"]
    assert data["updatedAt"] is not None


def test_update_with_empty_features_clears_them(client, db_session, property_payload):
    created = _create(client, property_payload())
    res = client.put(
        f"/api/properties/{created['id']}", json={"title": "Updated", "features": []}
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["title"] == "Updated"
    assert data["features"] == []
    assert data["amenities"] == ["Central Air"]
    assert _count(db_session, PropertyFeature) == 0


def test_update_replaces_photos(client, property_payload):
    created = _create(client, property_payload(photos=["https://img/a.jpg"]))
    res = client.put(
        f"/api/properties/{created['id']}",
        json={"photos": ["https://img/x.jpg", "https://img/y.jpg"]},
    )
    assert res.status_code == 200
    photos = res.json()["data"]["photos"]
    assert [p["url"] for p in photos] == ["https://img/x.jpg", "https://img/y.jpg"]
    assert photos[0]["isPrimary"] is True


def test_update_with_nothing_to_update(client, property_payload):
    created = _create(client, property_payload())
    res = client.put(f"/api/properties/{created['id']}", json={"unknown": 1})
    assert res.status_code == 400
    assert res.json()["message"] == "No fields to update"


def test_update_missing_property(client):
    res = client.put("/api/properties/424242", json={"price": 10})
    assert res.status_code == 404
    assert res.json()["message"] == "Property not found"


def test_update_keeps_coordinates_when_only_one_sent(client, property_payload):
    created = _create(client, property_payload())
    res = client.put(f"/api/properties/{created['id']}", json={"latitude": 10, "price": 5})
    assert res.json()["data"]["coordinates"] == {"lat": 40.45, "lng": -79.93}


def test_delete_cascades_to_related_rows(client, db_session, property_payload):
    created = _create(client, property_payload(photos=["https://img/a.jpg"]))
    property_id = created["id"]
    db_session.add(ContactInquiry(property_id=property_id, name="Lee", email="lee@example.com"))
    db_session.add(Review(property_id=property_id, name="Lee", rating=5, review_text="Great"))
    db_session.commit()

    res = client.delete(f"/api/properties/{property_id}")
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Property deleted successfully"}

    for model in (Property, PropertyFeature, PropertyAmenity, PropertyPhoto, ContactInquiry, Review):
        assert _count(db_session, model) == 0
    assert client.get(f"/api/properties/{property_id}").status_code == 404
    assert client.delete(f"/api/properties/{property_id}").status_code == 404


def test_list_filters_and_order(client, property_payload):
    _create(client, property_payload(title="Cheap", price=100000, city="Pittsburgh", bedrooms=1))
    _create(client, property_payload(title="Mid", price=300000, city="Sewickley", bedrooms=3))
    _create(client, property_payload(title="Pricey", price=900000, city="Pittsburgh", bedrooms=5))

    res = client.get("/api/properties")
    body = res.json()
    assert body["success"] is True
    assert body["total"] == 3
    assert [p["title"] for p in body["listings"]] == ["Pricey", "Mid", "Cheap"]

    res = client.get("/api/properties", params={"minPrice": 200000, "maxPrice": 900000})
    assert [p["title"] for p in res.json()["listings"]] == ["Pricey", "Mid"]

    res = client.get("/api/properties", params={"city": "pitts", "bedrooms": 2})
    assert [p["title"] for p in res.json()["listings"]] == ["Pricey"]

    # Unparseable numbers are ignored
    res = client.get("/api/properties", params={"minPrice": "lots"})
    assert res.json()["total"] == 3


def test_properties_by_owner(client, db_session, property_payload):
    owner = User(email="owner@example.com", first_name="Olive", last_name="Owner", phone="412-555-0100")
    db_session.add(owner)
    db_session.commit()

    _create(client, property_payload(title="Linked", ownerEmail=None, ownerName=None, owner_id=owner.id))
    _create(client, property_payload(title="Denormalized", ownerEmail="owner@example.com"))
    _create(client, property_payload(title="Someone else", ownerEmail="other@example.com"))

    res = client.get("/api/properties/owner", params={"ownerEmail": "owner@example.com"})
    assert res.status_code == 200
    listings = res.json()["listings"]
    assert sorted(p["title"] for p in listings) == ["Denormalized", "Linked"]
    linked = next(p for p in listings if p["title"] == "Linked")
    assert linked["ownerName"] == "Olive Owner"
    assert linked["ownerPhone"] == "412-555-0100"

    res = client.get("/api/properties/owner")
    assert res.status_code == 400
    assert res.json()["message"] == "ownerEmail query parameter is required"


def test_property_reviews(client, db_session, property_payload):
    created = _create(client, property_payload())
    db_session.add(Review(property_id=created["id"], name="Ann", rating=4, review_text="Nice"))
    db_session.commit()

    res = client.get(f"/api/properties/{created['id']}/reviews")
    assert res.status_code == 200
    assert res.json()["total"] == 1
    assert res.json()["reviews"][0]["name"] == "Ann"


def test_create_inquiry(client, db_session, property_payload):
    created = _create(client, property_payload())
    res = client.post(
        "/api/inquiries",
        json={
            "property_id": created["id"],
            "name": "Sam",
            "email": "sam@example.com",
            "phone": "412-555-0101",
            "message": "Is it still available?",
            "inquiry_type": "showing",
        },
    )
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Inquiry submitted successfully"
    assert body["data"]["inquiry_type"] == "showing"
    assert _count(db_session, ContactInquiry) == 1

    res = client.post("/api/inquiries", json={"name": "No email"})
    assert res.status_code == 400


def test_out_of_range_integer_is_a_400_and_persists_nothing(client, db_session, property_payload):
    res = client.post("/api/properties", json=property_payload(bedrooms=1e20))
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Bedrooms is too large. Maximum value is 2147483647"
    assert _count(db_session, Property) == 0

    created = _create(client, property_payload())
    res = client.put(f"/api/properties/{created['id']}", json={"squareFeet": 10**12})
    assert res.status_code == 400
    assert res.json()["message"] == "Square feet is too large. Maximum value is 2147483647"
