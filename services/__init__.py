"""Catalog and cart services. Both take the DBStorage they work against."""
from services.catalog import CatalogService
from services.cart import CartService

__all__ = ["CatalogService", "CartService"]
