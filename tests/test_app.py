"""Tests for app wiring: health, error envelope, admin guard, config, seed command."""
from api import create_app
from api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from api.seed import SAMPLE_BOOKS, seed_catalog_command


def test_health_reports_database(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "version": "1.0.0", "database": "ok"}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    payload = resp.get_json()
    assert payload["success"] is False
    assert payload["code"] == "NOT_FOUND"


def test_non_object_body_is_rejected(client):
    resp = client.post("/api/cart", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Request body must be a JSON object"


def test_admin_token_guards_catalog_mutations():
    app = create_app("testing")
    app.config["ADMIN_TOKEN"] = "s3cret"
    client = app.test_client()
    body = {"title": "T", "author": "A", "description": "d", "price": 1, "isbn": "guarded"}

    assert client.post("/api/books", json=body).status_code == 401
    wrong = client.post("/api/books", json=body, headers={"Authorization": "Bearer nope"})
    assert wrong.status_code == 401
    assert wrong.get_json()["code"] == "UNAUTHORIZED"

    ok = client.post("/api/books", json=body, headers={"Authorization": "Bearer s3cret"})
    assert ok.status_code == 201

    # Reads and the cart stay public
    assert client.get("/api/books").status_code == 200
    assert client.get("/api/cart").status_code == 200


def test_get_config_selection():
    assert get_config("testing") is TestingConfig
    assert get_config("prod") is ProductionConfig
    assert get_config("dev") is DevelopmentConfig
    assert TestingConfig.DATABASE_URL == "sqlite://"


def test_seed_catalog_command_is_idempotent(app):
    runner = app.test_cli_runner()
    first = runner.invoke(seed_catalog_command)
    assert first.exit_code == 0
    assert f"Seeded {len(SAMPLE_BOOKS)} books." in first.output

    second = runner.invoke(seed_catalog_command)
    assert "nothing to do" in second.output

    client = app.test_client()
    listing = client.get("/api/books?search=orwell").get_json()
    assert listing["pagination"]["total"] == 1
    book_id = listing["data"][0]["id"]
    assert len(client.get(f"/api/books/{book_id}").get_json()["data"]["reviews"]) == 1
