"""Tests for review endpoints and the detail join."""
import uuid


def test_reviews_embedded_in_detail_in_order(client, make_book):
    book = make_book()
    other = make_book()
    for n in range(3):
        resp = client.post(
            f"/api/books/{book['id']}/reviews",
            json={"user": f"u{n}", "rating": n + 2, "comment": f"c{n}"},
        )
        assert resp.status_code == 201
    client.post(f"/api/books/{other['id']}/reviews", json={"user": "x", "rating": 1, "comment": "elsewhere"})

    detail = client.get(f"/api/books/{book['id']}").get_json()["data"]
    assert [r["user"] for r in detail["reviews"]] == ["u0", "u1", "u2"]
    assert all(r["bookId"] == book["id"] for r in detail["reviews"])

    listed = client.get(f"/api/books/{book['id']}/reviews").get_json()
    assert listed["count"] == 3


def test_review_defaults(client, make_book):
    book = make_book()
    review = client.post(
        f"/api/books/{book['id']}/reviews",
        json={"user": "u", "rating": 5, "comment": "great", "title": "Wow"},
    ).get_json()["data"]
    assert review["verified"] is False
    assert len(review["date"]) == 10
    assert review["title"] == "Wow"


def test_review_does_not_recompute_book_rating(client, make_book):
    book = make_book(rating=3.5, reviewCount=10)
    client.post(f"/api/books/{book['id']}/reviews", json={"user": "u", "rating": 1, "comment": "meh"})
    detail = client.get(f"/api/books/{book['id']}").get_json()["data"]
    assert detail["rating"] == 3.5
    assert detail["reviewCount"] == 10


def test_review_validation_and_missing_book(client, make_book):
    book = make_book()
    bad = client.post(f"/api/books/{book['id']}/reviews", json={"user": "u", "rating": 6})
    assert bad.status_code == 400
    assert "rating" in bad.get_json()["details"]
    assert "comment" in bad.get_json()["details"]

    missing = client.post(
        f"/api/books/{uuid.uuid4()}/reviews", json={"user": "u", "rating": 3, "comment": "c"}
    )
    assert missing.status_code == 404
    assert client.get("/api/books/bad-id/reviews").status_code == 400
