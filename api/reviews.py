from flask import Blueprint, jsonify

from models.schemas.review import ReviewCreateSchema, ReviewOutSchema
from .deps import get_catalog_service, json_body

bp = Blueprint("reviews", __name__)

review_create_schema = ReviewCreateSchema()
review_out_schema = ReviewOutSchema()
reviews_out_schema = ReviewOutSchema(many=True)


@bp.get("/books/<book_id>/reviews")
def list_reviews(book_id: str):
    """
    List the reviews of a book
    ---
    tags:
      - Reviews
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200:
        description: Reviews in the order they were written
      400:
        description: Invalid book ID format
      404:
        description: Book not found
    """
    reviews = get_catalog_service().list_reviews(book_id)
    return jsonify({"success": True, "data": reviews_out_schema.dump(reviews), "count": len(reviews)})


@bp.post("/books/<book_id>/reviews")
def create_review(book_id: str):
    """
    Write a review for a book
    ---
    tags:
      - Reviews
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [user, rating, comment]
          properties:
            user: { type: string }
            rating: { type: number, minimum: 0, maximum: 5 }
            title: { type: string }
            comment: { type: string }
            date: { type: string, description: "Defaults to today (YYYY-MM-DD)" }
            verified: { type: boolean, default: false }
    responses:
      201:
        description: Created
      400:
        description: Validation error or invalid book ID
      404:
        description: Book not found
    """
    data = review_create_schema.load(json_body())
    review = get_catalog_service().add_review(book_id, data)
    return jsonify({"success": True, "data": review_out_schema.dump(review)}), 201
