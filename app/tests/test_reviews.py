import pytest
from app.models.review import Review
from app.services.review_service import ReviewService, calculate_stats, round_rating


def _review(**overrides):
    payload = {
        "name": "Priya",
        "email": "priya@example.com",
        "location": "Squirrel Hill",
        "rating": 5,
        "review_text": "Found our home in two weeks.",
        "property_type": "House",
    }
    payload.update(overrides)
    return payload


def test_create_and_list_reviews(client):
    res = client.post("/api/reviews", json=_review())
    assert res.status_code == 201
    created = res.json()["data"]
    assert created["status"] == "approved"
    assert created["text"] == "Found our home in two weeks."

    res = client.get("/api/reviews")
    body = res.json()
    assert body["success"] is True
    assert body["total"] == 1
    assert body["reviews"][0]["name"] == "Priya"


def test_review_text_alias(client):
    res = client.post("/api/reviews", json=_review(review_text=None, text="Very helpful"))
    assert res.status_code == 201
    assert res.json()["data"]["review_text"] == "Very helpful"


@pytest.mark.parametrize("rating", [0, 6, 4.5, "five"])
def test_rating_must_be_integer_between_one_and_five(client, rating):
    res = client.post("/api/reviews", json=_review(rating=rating))
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_review_without_text_is_rejected(client):
    res = client.post("/api/reviews", json=_review(review_text="  "))
    assert res.status_code == 400


def test_moderation_hides_review_from_default_list(client):
    review_id = client.post("/api/reviews", json=_review()).json()["data"]["id"]

    res = client.put(f"/api/reviews/{review_id}/status", json={"status": "rejected"})
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "rejected"

    assert client.get("/api/reviews").json()["total"] == 0
    assert client.get("/api/reviews", params={"status": "rejected"}).json()["total"] == 1
    assert client.get("/api/reviews", params={"status": "all"}).json()["total"] == 1

    res = client.put(f"/api/reviews/{review_id}/status", json={"status": "published"})
    assert res.status_code == 400


def test_delete_review(client):
    review_id = client.post("/api/reviews", json=_review()).json()["data"]["id"]
    assert client.delete(f"/api/reviews/{review_id}").json() == {
        "success": True,
        "message": "Review deleted successfully",
    }
    res = client.delete(f"/api/reviews/{review_id}")
    assert res.status_code == 404
    assert res.json()["message"] == "Review not found"

    res = client.put(f"/api/reviews/{review_id}/status", json={"status": "approved"})
    assert res.status_code == 404


def test_stats_agree_between_store_and_list(client, db_session):
    for rating in [5, 5, 4, 3, 5]:
        db_session.add(Review(name="R", rating=rating, review_text="ok", status="approved"))
    db_session.add(Review(name="Pending", rating=1, review_text="spam", status="pending"))
    db_session.commit()

    store_stats = ReviewService(db_session).get_stats()
    listed = client.get("/api/reviews").json()["reviews"]
    client_stats = calculate_stats(listed)

    expected = {
        "totalReviews": 5,
        "averageRating": 4.4,
        "fiveStarReviews": 3,
        "fourStarReviews": 1,
        "threeStarReviews": 1,
        "twoStarReviews": 0,
        "oneStarReviews": 0,
    }
    assert store_stats == expected
    assert client_stats == expected
    assert client.get("/api/reviews/stats").json() == {"success": True, **expected}


def test_stats_with_no_reviews(client):
    assert client.get("/api/reviews/stats").json() == {
        "success": True,
        "totalReviews": 0,
        "averageRating": 0,
        "fiveStarReviews": 0,
        "fourStarReviews": 0,
        "threeStarReviews": 0,
        "twoStarReviews": 0,
        "oneStarReviews": 0,
    }


@pytest.mark.parametrize(
    "value,expected",
    [(4.25, 4.3), (4.35, 4.4), (4.44, 4.4), (3.0, 3.0), (None, 0)],
)
def test_round_rating_half_up(value, expected):
    assert round_rating(value) == expected


def test_calculate_stats_accepts_plain_ratings():
    stats = calculate_stats([1, 2, 2])
    assert stats["totalReviews"] == 3
    assert stats["averageRating"] == 1.7
    assert stats["twoStarReviews"] == 2


def test_stats_route_documents_its_response_model(client):
    schema = client.get("/openapi.json").json()
    response = schema["paths"]["/api/reviews/stats"]["get"]["responses"]["200"]
    assert response["content"]["application/json"]["schema"]["$ref"].endswith("/ReviewStats")
    assert "averageRating" in schema["components"]["schemas"]["ReviewStats"]["properties"]
