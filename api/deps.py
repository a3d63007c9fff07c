"""Accessors for the services create_app() registers on the application."""
from flask import current_app, request

from services import CartService, CatalogService
from services.exceptions import ValidationError


def get_catalog_service() -> CatalogService:
    return current_app.extensions["catalog_service"]


def get_cart_service() -> CartService:
    return current_app.extensions["cart_service"]


def get_storage():
    return current_app.extensions["storage"]


def json_body() -> dict:
    """Request JSON as a dict; an absent body counts as empty."""
    payload = request.get_json(silent=True)
    if payload is None:
        if request.get_data():
            raise ValidationError("Malformed JSON body")
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload
