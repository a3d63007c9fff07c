"""Persistent models. Importing the package registers every mapper on Base."""
from models.base_model import Base, BaseModel, is_valid_id
from models.book import Book, BookGenre, BookTag
from models.review import Review
from models.cart_item import CartItem
from models.db_storage import DBStorage

__all__ = [
    "Base",
    "BaseModel",
    "Book",
    "BookGenre",
    "BookTag",
    "CartItem",
    "DBStorage",
    "Review",
    "is_valid_id",
]
