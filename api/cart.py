from flask import Blueprint, request, jsonify

from models.schemas.cart import CartAddSchema, CartUpdateSchema, CartItemOutSchema
from services.exceptions import ValidationError
from .deps import get_cart_service, json_body

bp = Blueprint("cart", __name__)

cart_add_schema = CartAddSchema()
cart_update_schema = CartUpdateSchema()
cart_item_schema = CartItemOutSchema()
cart_items_schema = CartItemOutSchema(many=True)


@bp.get("/cart")
def get_cart():
    """
    List the lines of a session's cart
    ---
    tags:
      - Cart
    parameters:
      - in: query
        name: sessionId
        type: string
        default: default-session
    responses:
      200:
        description: "Lines joined with their book, plus count (lines), totalItems (sum of quantities) and subtotal"
    """
    cart = get_cart_service()
    items = cart.list_cart(request.args.get("sessionId"))
    return jsonify({"success": True, "data": cart_items_schema.dump(items), **cart.summarize(items)})


@bp.post("/cart")
def add_to_cart():
    """
    Add a book to the cart, or increase the quantity of its existing line
    ---
    tags:
      - Cart
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [bookId]
          properties:
            bookId: { type: string }
            quantity: { type: integer, minimum: 1, maximum: 2147483647, default: 1 }
            sessionId: { type: string, default: default-session }
    responses:
      200:
        description: Resulting cart line
      400:
        description: Invalid input
      404:
        description: Book not found or out of stock
    """
    data = cart_add_schema.load(json_body())
    item = get_cart_service().add_item(data["book_id"], data["quantity"], data["session_id"])
    return jsonify({"success": True, "message": "Item added to cart successfully", "data": cart_item_schema.dump(item)})


@bp.put("/cart")
def update_cart_item():
    """
    Set the quantity of a cart line
    ---
    tags:
      - Cart
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [itemId, quantity]
          properties:
            itemId: { type: string }
            quantity: { type: integer, minimum: 1, maximum: 2147483647 }
            sessionId: { type: string, default: default-session }
    responses:
      200:
        description: Updated line
      400:
        description: Quantity below 1 or malformed input
      404:
        description: Line not found in this session's cart
    """
    data = cart_update_schema.load(json_body())
    item = get_cart_service().update_quantity(data["item_id"], data["quantity"], data["session_id"])
    return jsonify({"success": True, "message": "Cart item updated successfully", "data": cart_item_schema.dump(item)})


@bp.delete("/cart")
def remove_cart_item():
    """
    Remove one line from the cart
    ---
    tags:
      - Cart
    parameters:
      - in: query
        name: itemId
        type: string
        required: true
      - in: query
        name: sessionId
        type: string
        default: default-session
    responses:
      200:
        description: Removed
      400:
        description: Missing or malformed itemId
      404:
        description: Line not found in this session's cart
    """
    item_id = request.args.get("itemId")
    if not item_id:
        raise ValidationError("Cart item ID is required")
    get_cart_service().remove_item(item_id, request.args.get("sessionId"))
    return jsonify({"success": True, "message": "Item removed from cart successfully"})


@bp.delete("/cart/all")
def clear_cart():
    """
    Remove every line of a session's cart in one operation
    ---
    tags:
      - Cart
    parameters:
      - in: query
        name: sessionId
        type: string
        default: default-session
    responses:
      200:
        description: Number of removed lines
    """
    removed = get_cart_service().clear_cart(request.args.get("sessionId"))
    return jsonify({"success": True, "message": "Cart cleared", "removed": removed})
