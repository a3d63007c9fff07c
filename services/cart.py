"""
Session-scoped shopping cart.

A session only ever sees and mutates its own lines; a line owned by another
session is reported as missing rather than forbidden.
"""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import contains_eager

from models import Book, CartItem
from models.cart_item import MAX_QUANTITY
from models.base_model import utcnow
from services.catalog import require_id
from services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default-session"


def require_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}")
    return quantity


class CartService:
    def __init__(self, storage, default_session_id: str = DEFAULT_SESSION_ID):
        self.storage = storage
        self.default_session_id = default_session_id

    def resolve_session(self, session_id) -> str:
        return session_id or self.default_session_id

    def _owned_item(self, session_id: str, item_id: str) -> CartItem:
        require_id(item_id, "cart item ID")
        item = (
            self.storage.get_session()
            .query(CartItem)
            .filter(CartItem.id == item_id, CartItem.session_id == session_id)
            .one_or_none()
        )
        if item is None:
            raise NotFoundError("Cart item not found")
        return item

    def _find_line(self, session_id: str, book_id: str) -> CartItem:
        return (
            self.storage.get_session()
            .query(CartItem)
            .populate_existing()
            .filter(CartItem.session_id == session_id, CartItem.book_id == book_id)
            .one()
        )

    def list_cart(self, session_id=None) -> List[CartItem]:
        """Lines of the session whose book still exists, oldest first."""
        session_id = self.resolve_session(session_id)
        # Inner join drops lines whose book was deleted
        return (
            self.storage.get_session()
            .query(CartItem)
            .join(Book, CartItem.book_id == Book.id)
            .options(contains_eager(CartItem.book))
            .filter(CartItem.session_id == session_id)
            .order_by(CartItem.added_at.asc(), CartItem.id.asc())
            .all()
        )

    def add_item(self, book_id, quantity=1, session_id=None) -> CartItem:
        """Insert the line or add ``quantity`` to the existing one.

        The increment is a single UPDATE so concurrent adds for the same
        (session, book) cannot lose updates; when two first adds race on the
        insert, the loser hits the unique index and retries the increment.
        """
        session_id = self.resolve_session(session_id)
        require_id(book_id, "book ID")
        quantity = require_quantity(quantity)

        book = self.storage.get(Book, book_id)
        if book is None or not book.in_stock:
            raise NotFoundError("Book not found or out of stock")

        if not self._increment(session_id, book_id, quantity):
            self.storage.new(
                CartItem(session_id=session_id, book_id=book_id, quantity=quantity, added_at=utcnow())
            )
            try:
                self.storage.save()
            except IntegrityError:
                logger.info("Concurrent add for session=%s book=%s; incrementing instead", session_id, book_id)
                if not self._increment(session_id, book_id, quantity):
                    raise

        item = self._find_line(session_id, book_id)
        logger.debug("Cart %s: book %s now x%d", session_id, book_id, item.quantity)
        return item

    def _increment(self, session_id: str, book_id: str, quantity: int) -> bool:
        """Add to an existing line; False when the session has no line for the book."""
        session = self.storage.get_session()
        result = session.execute(
            update(CartItem)
            .where(
                CartItem.session_id == session_id,
                CartItem.book_id == book_id,
                CartItem.quantity <= MAX_QUANTITY - quantity,
            )
            .values(quantity=CartItem.quantity + quantity, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            self.storage.save()
            return True
        line_id = (
            session.query(CartItem.id)
            .filter(CartItem.session_id == session_id, CartItem.book_id == book_id)
            .first()
        )
        if line_id is not None:
            # Line exists; the sum would pass the cap
            raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}")
        return False

    def update_quantity(self, item_id, quantity, session_id=None) -> CartItem:
        """Set the line's quantity to exactly ``quantity``."""
        session_id = self.resolve_session(session_id)
        quantity = require_quantity(quantity)
        item = self._owned_item(session_id, item_id)
        item.quantity = quantity
        self.storage.new(item)
        self.storage.save()
        return item

    def remove_item(self, item_id, session_id=None) -> CartItem:
        session_id = self.resolve_session(session_id)
        item = self._owned_item(session_id, item_id)
        self.storage.delete(item)
        self.storage.save()
        return item

    def clear_cart(self, session_id=None) -> int:
        """Delete every line of the session in one statement."""
        session_id = self.resolve_session(session_id)
        removed = (
            self.storage.get_session()
            .query(CartItem)
            .filter(CartItem.session_id == session_id)
            .delete(synchronize_session=False)
        )
        self.storage.save()
        logger.info("Cleared %d line(s) from cart %s", removed, session_id)
        return removed

    @staticmethod
    def summarize(items: List[CartItem]) -> dict:
        """Totals the navbar badge and cart page show."""
        return {
            "count": len(items),
            "totalItems": sum(i.quantity for i in items),
            "subtotal": round(sum(i.subtotal for i in items), 2),
        }
