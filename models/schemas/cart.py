from marshmallow import Schema, fields, validate

from models.cart_item import MAX_QUANTITY
from models.schemas.book import BookOutSchema

QUANTITY_MESSAGE = "Quantity must be at least 1"
QUANTITY_MAX_MESSAGE = f"Quantity must be at most {MAX_QUANTITY}"

quantity_range = [
    validate.Range(min=1, error=QUANTITY_MESSAGE),
    validate.Range(max=MAX_QUANTITY, error=QUANTITY_MAX_MESSAGE),
]


class CartAddSchema(Schema):
    book_id = fields.String(data_key="bookId", required=True)
    quantity = fields.Integer(load_default=1, strict=True, validate=quantity_range)
    session_id = fields.String(data_key="sessionId", load_default=None)


class CartUpdateSchema(Schema):
    item_id = fields.String(data_key="itemId", required=True)
    quantity = fields.Integer(required=True, strict=True, validate=quantity_range)
    session_id = fields.String(data_key="sessionId", load_default=None)


class CartItemOutSchema(Schema):
    id = fields.String()
    session_id = fields.String(data_key="sessionId")
    book_id = fields.String(data_key="bookId")
    quantity = fields.Integer()
    added_at = fields.DateTime(data_key="addedAt")
    book = fields.Nested(
        BookOutSchema(only=("id", "title", "author", "price", "image", "isbn", "in_stock")),
        allow_none=True,
    )
    subtotal = fields.Float()
