"""
Catalog queries and catalog management.

Filtering, pagination and the review join live here so the HTTP layer only
parses arguments and shapes responses.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from models import Book, BookGenre, BookTag, Review, is_valid_id
from services.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ISBN_UNIQUE_MESSAGE = "isbn must be unique: a book with this ISBN already exists"

# Sorting allowlist: API field -> column
SORT_COLUMNS = {
    "created_at": Book.created_at,
    "title": Book.title,
    "price": Book.price,
    "rating": Book.rating,
}

SIMPLE_FIELDS = (
    "title",
    "author",
    "description",
    "price",
    "image",
    "isbn",
    "date_published",
    "pages",
    "language",
    "publisher",
    "rating",
    "review_count",
    "in_stock",
    "featured",
)


def require_id(value, label: str = "id") -> str:
    """Reject identifiers the store could never have produced, before querying."""
    if not value:
        raise ValidationError(f"Missing {label}")
    if not is_valid_id(value):
        raise ValidationError(f"Invalid {label} format")
    return value


def build_order_by(sort: Optional[str]):
    fields = [s.strip() for s in (sort or "created_at").split(",") if s.strip()]
    order_by = []
    for f in fields:
        desc = f.startswith("-")
        key = f[1:] if desc else f
        col = SORT_COLUMNS.get(key)
        if col is None:
            raise ValidationError(f"Unsupported sort field: {key}")
        order_by.append(col.desc() if desc else col.asc())
    # id as a tie-breaker keeps pages stable
    order_by.append(Book.id.asc())
    return order_by


class CatalogService:
    def __init__(self, storage):
        self.storage = storage

    # ------------------------------------------------------------------ queries

    def filtered_query(
        self,
        genre: Optional[str] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        in_stock: Optional[bool] = None,
    ):
        query = self.storage.get_session().query(Book)

        if genre:
            # Case-insensitive membership in the genre set
            query = query.filter(
                Book.genre_entries.any(func.lower(BookGenre.name) == genre.strip().lower())
            )

        if search:
            term = search.lower()
            # Substring of title OR author OR any tag; wildcards in the term are literal
            query = query.filter(
                func.lower(Book.title).contains(term, autoescape=True)
                | func.lower(Book.author).contains(term, autoescape=True)
                | Book.tag_entries.any(func.lower(BookTag.name).contains(term, autoescape=True))
            )

        if featured is not None:
            query = query.filter(Book.featured.is_(featured))

        if in_stock is not None:
            query = query.filter(Book.in_stock.is_(in_stock))

        return query

    def list_books(
        self,
        page: int = 1,
        limit: int = 10,
        genre: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        featured: Optional[bool] = None,
        in_stock: Optional[bool] = None,
    ) -> Tuple[List[Book], dict]:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be >= 1")
        order_by = build_order_by(sort)

        query = self.filtered_query(genre=genre, search=search, featured=featured, in_stock=in_stock)
        # Count and page are separate reads; they can disagree under concurrent writes
        total = query.count()
        rows = (
            query.order_by(*order_by)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        pagination = {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        }
        return rows, pagination

    def get_book(self, book_id: str) -> Book:
        require_id(book_id, "book ID")
        book = self.storage.get(Book, book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def get_book_detail(self, book_id: str) -> Book:
        """Book with its reviews loaded in one extra round-trip."""
        require_id(book_id, "book ID")
        book = (
            self.storage.get_session()
            .query(Book)
            .options(selectinload(Book.reviews))
            .filter(Book.id == book_id)
            .one_or_none()
        )
        if book is None:
            raise NotFoundError("Book not found")
        return book

    # --------------------------------------------------------------- management

    def _isbn_taken(self, isbn: str, exclude_id: Optional[str] = None) -> bool:
        q = self.storage.get_session().query(Book.id).filter(Book.isbn == isbn)
        if exclude_id:
            q = q.filter(Book.id != exclude_id)
        return q.first() is not None

    def _commit_book(self, book: Book):
        self.storage.new(book)
        try:
            self.storage.save()
        except IntegrityError as err:
            # Lost a race with a concurrent insert of the same ISBN
            if "isbn" in str(getattr(err, "orig", err)).lower():
                raise ConflictError(ISBN_UNIQUE_MESSAGE) from err
            raise

    def create_book(self, data: dict) -> Book:
        if self._isbn_taken(data["isbn"]):
            raise ConflictError(ISBN_UNIQUE_MESSAGE)

        book = Book(**{k: data[k] for k in SIMPLE_FIELDS if k in data})
        book.set_genre(data.get("genre", []))
        book.set_tags(data.get("tags", []))
        self._commit_book(book)
        logger.info("Created book %s (isbn=%s)", book.id, book.isbn)
        return book

    def update_book(self, book_id: str, data: dict) -> Book:
        book = self.get_book(book_id)

        if "isbn" in data and data["isbn"] != book.isbn and self._isbn_taken(data["isbn"], book.id):
            raise ConflictError(ISBN_UNIQUE_MESSAGE)

        for field in SIMPLE_FIELDS:
            if field in data:
                setattr(book, field, data[field])
        if "genre" in data:
            book.set_genre(data["genre"])
        if "tags" in data:
            book.set_tags(data["tags"])

        self._commit_book(book)
        logger.info("Updated book %s", book.id)
        return book

    def delete_book(self, book_id: str) -> Book:
        book = self.get_book(book_id)
        # Reviews and cart lines keep pointing at the id; readers filter them out
        self.storage.delete(book)
        self.storage.save()
        logger.info("Deleted book %s", book_id)
        return book

    # ------------------------------------------------------------------ reviews

    def list_reviews(self, book_id: str) -> List[Review]:
        return list(self.get_book_detail(book_id).reviews)

    def add_review(self, book_id: str, data: dict) -> Review:
        book = self.get_book(book_id)
        review = Review(book_id=book.id, **data)
        self.storage.new(review)
        self.storage.save()
        logger.info("Added review %s to book %s", review.id, book.id)
        return review
