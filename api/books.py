from __future__ import annotations

from typing import Optional, Tuple

from flask import Blueprint, current_app, request, jsonify

from models.schemas.book import BookCreateSchema, BookUpdateSchema, BookOutSchema, BookDetailSchema
from services.exceptions import ValidationError
from utils.decorators import admin_required
from .deps import get_catalog_service, json_body

bp = Blueprint("books", __name__)

# Schemas
book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_out_schema = BookOutSchema()
books_out_schema = BookOutSchema(many=True)
book_detail_schema = BookDetailSchema()


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(current_app.config["DEFAULT_PAGE_SIZE"])))
    except ValueError:
        raise ValidationError("page and limit must be integers")
    max_limit = current_app.config["MAX_PAGE_SIZE"]
    page = max(page, 1)
    limit = max(1, min(limit, max_limit))
    return page, limit


def parse_bool_param(name: str) -> Optional[bool]:
    val = request.args.get(name)
    if val is None or val == "":
        return None
    val = val.lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    raise ValidationError(f"{name} must be true or false")


@bp.get("/books")
def list_books():
    """
    List books with pagination, genre filter and search
    ---
    tags:
      - Books
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
      - in: query
        name: genre
        type: string
        description: "Case-insensitive genre membership"
      - in: query
        name: search
        type: string
        description: "Case-insensitive substring of title, author or any tag"
      - in: query
        name: sort
        type: string
        description: "Comma-separated fields; prefix with '-' for desc. Allowed: created_at, title, price, rating"
        default: "created_at"
      - in: query
        name: featured
        type: boolean
      - in: query
        name: inStock
        type: boolean
    responses:
      200:
        description: Page of books with pagination metadata
      400:
        description: Invalid page, limit, sort or flag
    """
    page, limit = parse_pagination()
    books, pagination = get_catalog_service().list_books(
        page=page,
        limit=limit,
        genre=request.args.get("genre") or None,
        search=request.args.get("search") or None,
        sort=request.args.get("sort"),
        featured=parse_bool_param("featured"),
        in_stock=parse_bool_param("inStock"),
    )
    return jsonify({"success": True, "data": books_out_schema.dump(books), "pagination": pagination})


@bp.get("/books/<book_id>")
def get_book(book_id: str):
    """
    Get a single book with its reviews
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200:
        description: Book found
      400:
        description: Invalid book ID format
      404:
        description: Not found
    """
    book = get_catalog_service().get_book_detail(book_id)
    return jsonify({"success": True, "data": book_detail_schema.dump(book)})


@bp.post("/books")
@admin_required
def create_book():
    """
    Create a new book
    ---
    tags:
      - Books
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, author, description, price, isbn]
          properties:
            title: { type: string, maxLength: 255 }
            author: { type: string, maxLength: 255 }
            description: { type: string }
            price: { type: number, minimum: 0 }
            isbn: { type: string }
            image: { type: string }
            genre: { type: array, items: { type: string } }
            tags: { type: array, items: { type: string } }
            datePublished: { type: string }
            pages: { type: integer, minimum: 1 }
            language: { type: string }
            publisher: { type: string }
            rating: { type: number, minimum: 0, maximum: 5 }
            reviewCount: { type: integer, minimum: 0 }
            inStock: { type: boolean, default: true }
            featured: { type: boolean, default: false }
    responses:
      201:
        description: Created
      400:
        description: Validation error or duplicate ISBN
      401:
        description: Missing or wrong admin token
    """
    data = book_create_schema.load(json_body())
    book = get_catalog_service().create_book(data)
    return jsonify({"success": True, "data": book_out_schema.dump(book)}), 201


@bp.put("/books")
@admin_required
def update_book():
    """
    Update a book (partial)
    ---
    tags:
      - Books
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: query
        name: id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200:
        description: Updated
      400:
        description: Missing or malformed id, validation error, duplicate ISBN
      404:
        description: Not found
    """
    book_id = request.args.get("id")
    if not book_id:
        raise ValidationError("Missing book id")
    data = book_update_schema.load(json_body(), partial=True)
    book = get_catalog_service().update_book(book_id, data)
    return jsonify({"success": True, "data": book_out_schema.dump(book)})


@bp.delete("/books")
@admin_required
def delete_book():
    """
    Delete a book
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - in: query
        name: id
        type: string
        required: true
    responses:
      200:
        description: Deleted; reviews and cart lines are left in place
      400:
        description: Missing or malformed id
      404:
        description: Not found
    """
    book_id = request.args.get("id")
    if not book_id:
        raise ValidationError("Missing book id")
    book = get_catalog_service().delete_book(book_id)
    return jsonify({"success": True, "message": "Book deleted successfully", "data": book_out_schema.dump(book)})
