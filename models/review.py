from sqlalchemy import Boolean, Column, String, Float, Text, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Review(BaseModel, Base):
    __tablename__ = "reviews"

    # Application-level reference; a deleted book leaves its reviews orphaned
    book_id = Column(String(36), nullable=False)
    user = Column(String(255), nullable=False)
    rating = Column(Float, nullable=False)
    title = Column(String(255), nullable=True)
    comment = Column(Text, nullable=False)
    date = Column(String(32), nullable=False)
    verified = Column(Boolean, nullable=False, default=False)

    book = relationship(
        "Book",
        primaryjoin="foreign(Review.book_id) == Book.id",
        viewonly=True,
    )

    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("ix_reviews_book_id", "book_id"),
    )
