from sqlalchemy import Column, String, Integer, DateTime, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow

# Largest quantity a line may hold (signed 32-bit INTEGER)
MAX_QUANTITY = 2**31 - 1


class CartItem(BaseModel, Base):
    """One line of an anonymous shopper's cart.

    ``book`` resolves to the referenced Book or None once that book has been
    deleted; nothing cascades from the catalog into carts.
    """

    __tablename__ = "cart_items"

    session_id = Column(String(255), nullable=False)
    book_id = Column(String(36), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    book = relationship(
        "Book",
        primaryjoin="foreign(CartItem.book_id) == Book.id",
        viewonly=True,
        lazy="joined",
    )

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
        # At most one line per (session, book)
        Index("ux_cart_items_session_book", "session_id", "book_id", unique=True),
    )

    @property
    def subtotal(self) -> float:
        if self.book is None:
            return 0.0
        return round(self.quantity * (self.book.price or 0), 2)
