"""Shared fixtures: a fresh in-memory app per test."""
import itertools

import pytest

from api import create_app

_isbn_counter = itertools.count(1000)


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    app.extensions["storage"].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_book(client):
    """POST a valid book, overriding any fields; returns the created payload."""

    def _make(**overrides):
        body = {
            "title": "Untitled",
            "author": "Anonymous",
            "description": "d",
            "price": 9.99,
            "isbn": f"isbn-{next(_isbn_counter)}",
        }
        body.update(overrides)
        resp = client.post("/api/books", json=body)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _make
