"""`flask --app api seed-catalog`: add sample books and reviews to an empty catalog."""
import click
from flask.cli import with_appcontext

from models import Book
from models.schemas.book import BookCreateSchema
from models.schemas.review import ReviewCreateSchema
from .deps import get_catalog_service, get_storage

SAMPLE_BOOKS = [
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "price": 12.99, "isbn": "9780743273565",
     "description": "A classic novel of the Jazz Age.", "genre": ["Fiction", "Classics"],
     "tags": ["jazz age", "american dream"], "pages": 180, "language": "English", "featured": True},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "price": 14.99, "isbn": "9780061120084",
     "description": "A gripping tale of racial injustice.", "genre": ["Fiction", "Classics"],
     "tags": ["justice", "coming of age"], "pages": 336, "language": "English"},
    {"title": "1984", "author": "George Orwell", "price": 11.99, "isbn": "9780451524935",
     "description": "A dystopian social science fiction novel.", "genre": ["Fiction", "Science Fiction"],
     "tags": ["dystopia", "surveillance"], "pages": 328, "language": "English", "featured": True},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "price": 10.99, "isbn": "9780141439518",
     "description": "A romantic novel of manners.", "genre": ["Fiction", "Romance"],
     "tags": ["regency", "marriage"], "pages": 480, "language": "English"},
    {"title": "Sapiens: A Brief History of Humankind", "author": "Yuval Noah Harari", "price": 18.99,
     "isbn": "9780062316097", "description": "A journey through humanity's history.",
     "genre": ["Non-Fiction", "History"], "tags": ["anthropology", "evolution"], "pages": 464,
     "language": "English"},
    {"title": "Clean Code", "author": "Robert C. Martin", "price": 37.49, "isbn": "9780132350884",
     "description": "A handbook of agile software craftsmanship.", "genre": ["Technology"],
     "tags": ["programming", "software engineering"], "pages": 464, "language": "English",
     "inStock": False},
]

SAMPLE_REVIEWS = {
    "9780743273565": [
        {"user": "reader42", "rating": 5, "title": "Timeless", "comment": "Still sharp a century later.", "verified": True},
        {"user": "bookworm", "rating": 4, "comment": "Beautiful prose, unlikeable people."},
    ],
    "9780451524935": [
        {"user": "winston", "rating": 5, "comment": "Unsettlingly relevant."},
    ],
}


@click.command("seed-catalog")
@with_appcontext
def seed_catalog_command():
    """Insert the sample catalog unless books already exist."""
    session = get_storage().get_session()
    if session.query(Book).count() > 0:
        click.echo("Catalog already has books; nothing to do.")
        return

    catalog = get_catalog_service()
    book_schema = BookCreateSchema()
    review_schema = ReviewCreateSchema()
    for raw in SAMPLE_BOOKS:
        book = catalog.create_book(book_schema.load(raw))
        for review in SAMPLE_REVIEWS.get(book.isbn, []):
            catalog.add_review(book.id, review_schema.load(review))
    click.echo(f"Seeded {len(SAMPLE_BOOKS)} books.")
