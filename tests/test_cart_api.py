"""Tests for the session-scoped cart endpoints."""
import uuid

import pytest


def _add(client, book_id, quantity=None, session_id=None):
    body = {"bookId": book_id}
    if quantity is not None:
        body["quantity"] = quantity
    if session_id is not None:
        body["sessionId"] = session_id
    return client.post("/api/cart", json=body)


def test_full_cart_scenario(client):
    """Create, add twice, set quantity, remove."""
    created = client.post(
        "/api/books",
        json={"isbn": "111", "title": "A", "author": "B", "description": "d", "price": 9.99},
    )
    assert created.status_code == 201
    book_id = created.get_json()["data"]["id"]

    first = _add(client, book_id, 2)
    assert first.status_code == 200
    line = first.get_json()["data"]
    assert line["quantity"] == 2
    assert line["book"]["title"] == "A"

    second = _add(client, book_id, 3)
    assert second.get_json()["data"]["id"] == line["id"]
    assert second.get_json()["data"]["quantity"] == 5

    cart = client.get("/api/cart").get_json()
    assert cart["count"] == 1
    assert cart["data"][0]["quantity"] == 5

    updated = client.put("/api/cart", json={"itemId": line["id"], "quantity": 1})
    assert updated.status_code == 200
    assert updated.get_json()["data"]["quantity"] == 1

    removed = client.delete(f"/api/cart?itemId={line['id']}")
    assert removed.status_code == 200
    assert removed.get_json()["success"] is True

    cart = client.get("/api/cart").get_json()
    assert cart["data"] == []
    assert cart["count"] == 0


def test_repeated_adds_accumulate_on_one_line(client, make_book):
    book = make_book()
    quantities = [1, 4, 2, 7]
    for q in quantities:
        _add(client, book["id"], q, "s1")

    cart = client.get("/api/cart?sessionId=s1").get_json()
    assert len(cart["data"]) == 1
    assert cart["data"][0]["quantity"] == sum(quantities)


def test_add_defaults_quantity_and_session(client, make_book):
    book = make_book()
    line = _add(client, book["id"]).get_json()["data"]
    assert line["quantity"] == 1
    assert line["sessionId"] == "default-session"


def test_sessions_are_isolated(client, make_book):
    book = make_book()
    _add(client, book["id"], 1, "alice")
    _add(client, book["id"], 2, "bob")

    alice = client.get("/api/cart?sessionId=alice").get_json()["data"]
    bob = client.get("/api/cart?sessionId=bob").get_json()["data"]
    assert [i["quantity"] for i in alice] == [1]
    assert [i["quantity"] for i in bob] == [2]
    assert alice[0]["id"] != bob[0]["id"]


@pytest.mark.parametrize("quantity", [0, -3, "two", 1.5, None])
def test_add_rejects_bad_quantity(client, make_book, quantity):
    book = make_book()
    resp = client.post("/api/cart", json={"bookId": book["id"], "quantity": quantity})
    assert resp.status_code == 400
    assert client.get("/api/cart").get_json()["data"] == []


def test_add_rejects_missing_or_malformed_book_id(client):
    assert client.post("/api/cart", json={"quantity": 1}).status_code == 400
    assert _add(client, "nope").status_code == 400


def test_add_unknown_book_is_404(client):
    resp = _add(client, str(uuid.uuid4()))
    assert resp.status_code == 404
    assert client.get("/api/cart").get_json()["data"] == []


def test_add_out_of_stock_book_is_404(client, make_book):
    book = make_book(inStock=False)
    resp = _add(client, book["id"])
    assert resp.status_code == 404
    assert "out of stock" in resp.get_json()["error"]
    assert client.get("/api/cart").get_json()["data"] == []


def test_update_quantity_below_one_leaves_line_unchanged(client, make_book):
    book = make_book()
    line = _add(client, book["id"], 3).get_json()["data"]

    resp = client.put("/api/cart", json={"itemId": line["id"], "quantity": 0})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Validation failed: quantity: Quantity must be at least 1"
    assert client.get("/api/cart").get_json()["data"][0]["quantity"] == 3


def test_update_is_absolute(client, make_book):
    book = make_book()
    line = _add(client, book["id"], 3).get_json()["data"]
    resp = client.put("/api/cart", json={"itemId": line["id"], "quantity": 10})
    assert resp.get_json()["data"]["quantity"] == 10


def test_other_session_cannot_touch_line(client, make_book):
    book = make_book()
    line = _add(client, book["id"], 2, "owner").get_json()["data"]

    put = client.put("/api/cart", json={"itemId": line["id"], "quantity": 9, "sessionId": "intruder"})
    assert put.status_code == 404
    delete = client.delete(f"/api/cart?itemId={line['id']}&sessionId=intruder")
    assert delete.status_code == 404

    cart = client.get("/api/cart?sessionId=owner").get_json()["data"]
    assert [i["quantity"] for i in cart] == [2]


def test_remove_errors(client):
    assert client.delete("/api/cart").status_code == 400
    assert client.delete("/api/cart?itemId=bad").status_code == 400
    assert client.delete(f"/api/cart?itemId={uuid.uuid4()}").status_code == 404


def test_lines_for_deleted_books_are_hidden(client, make_book):
    kept = make_book(title="Kept")
    gone = make_book(title="Gone")
    _add(client, kept["id"])
    _add(client, gone["id"])

    client.delete(f"/api/books?id={gone['id']}")

    cart = client.get("/api/cart").get_json()
    assert [i["book"]["title"] for i in cart["data"]] == ["Kept"]
    assert cart["count"] == 1


def test_cart_totals(client, make_book):
    a = make_book(price=10)
    b = make_book(price=2.5)
    _add(client, a["id"], 2)
    _add(client, b["id"], 3)

    cart = client.get("/api/cart").get_json()
    assert cart["count"] == 2
    assert cart["totalItems"] == 5
    assert cart["subtotal"] == 27.5


def test_clear_cart_removes_only_that_session(client, make_book):
    a = make_book()
    b = make_book()
    _add(client, a["id"], 1, "s1")
    _add(client, b["id"], 1, "s1")
    _add(client, a["id"], 1, "s2")

    resp = client.delete("/api/cart/all?sessionId=s1")
    assert resp.status_code == 200
    assert resp.get_json()["removed"] == 2

    assert client.get("/api/cart?sessionId=s1").get_json()["data"] == []
    assert len(client.get("/api/cart?sessionId=s2").get_json()["data"]) == 1


def test_oversized_quantity_is_rejected(client, make_book):
    book = make_book()
    resp = _add(client, book["id"], 10**30)
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"
    assert client.get("/api/cart").get_json()["data"] == []

    line = _add(client, book["id"], 1).get_json()["data"]
    put = client.put("/api/cart", json={"itemId": line["id"], "quantity": 10**30})
    assert put.status_code == 400
    assert client.get("/api/cart").get_json()["data"][0]["quantity"] == 1


def test_add_cannot_push_line_past_max_quantity(client, make_book):
    from models.cart_item import MAX_QUANTITY

    book = make_book()
    assert _add(client, book["id"], MAX_QUANTITY).status_code == 200

    resp = _add(client, book["id"], 1)
    assert resp.status_code == 400
    assert str(MAX_QUANTITY) in resp.get_json()["error"]
    assert client.get("/api/cart").get_json()["data"][0]["quantity"] == MAX_QUANTITY
