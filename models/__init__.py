from models.base_model import Base
from models.subject import Subject
from models.author import Author
from models.payment_method import PaymentMethod
from models.book import Book, BookAuthor, BookPrice
from models.db_storage import DBStorage

__all__ = [
    "Base",
    "Subject",
    "Author",
    "PaymentMethod",
    "Book",
    "BookAuthor",
    "BookPrice",
    "DBStorage",
]
