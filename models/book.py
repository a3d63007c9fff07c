from sqlalchemy import (
    Boolean,
    Column,
    String,
    Integer,
    ForeignKey,
    Float,
    Numeric,
    Text,
    CheckConstraint,
    Index,
)
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base

DEFAULT_IMAGE = "/images/default.jpg"


class BookGenre(Base):
    """One genre label of a book; composite key keeps the set semantics."""

    __tablename__ = "book_genres"

    book_id = Column(String(36), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), primary_key=True)


class BookTag(Base):
    __tablename__ = "book_tags"

    book_id = Column(String(36), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), primary_key=True)


class Book(BaseModel, Base):
    __tablename__ = "books"

    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    image = Column(String(500), nullable=False, default=DEFAULT_IMAGE)
    # Uniqueness enforced here; the catalog service checks first for a friendlier error
    isbn = Column(String(32), nullable=False, unique=True, index=True)
    date_published = Column(String(32), nullable=True)
    pages = Column(Integer, nullable=True)
    language = Column(String(64), nullable=True)
    publisher = Column(String(255), nullable=True)
    # Denormalized; never recomputed from reviews
    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, nullable=False, default=True)
    featured = Column(Boolean, nullable=False, default=False)

    # Genre and tag sets are owned by the book and go away with it
    genre_entries = relationship(
        "BookGenre", cascade="all, delete-orphan", order_by="BookGenre.name", lazy="selectin"
    )
    tag_entries = relationship(
        "BookTag", cascade="all, delete-orphan", order_by="BookTag.name", lazy="selectin"
    )
    genre = association_proxy("genre_entries", "name", creator=lambda name: BookGenre(name=name))
    tags = association_proxy("tag_entries", "name", creator=lambda name: BookTag(name=name))

    # Reviews reference books at the application level only: no cascade on delete
    reviews = relationship(
        "Review",
        primaryjoin="Book.id == foreign(Review.book_id)",
        viewonly=True,
        order_by="Review.created_at",
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_books_price_nonnegative"),
        CheckConstraint("(pages IS NULL) OR (pages >= 1)", name="ck_books_pages_positive"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_books_rating_range"),
        CheckConstraint("review_count >= 0", name="ck_books_review_count_nonnegative"),
        Index("ix_books_title", "title"),
        Index("ix_books_author", "author"),
    )

    def set_genre(self, names):
        existing = {e.name: e for e in self.genre_entries}
        self.genre_entries = [existing.get(n) or BookGenre(name=n) for n in names]

    def set_tags(self, names):
        existing = {e.name: e for e in self.tag_entries}
        self.tag_entries = [existing.get(n) or BookTag(name=n) for n in names]
