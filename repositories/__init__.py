"""
Storage access layer: one repository per table, each bound to the shared DBStorage.

Usage:
    from repositories import SubjectRepository, BookRepository
"""

from .subject_repository import SubjectRepository
from .author_repository import AuthorRepository
from .payment_method_repository import PaymentMethodRepository
from .book_repository import BookRepository, BookAuthorRepository, BookPriceRepository
from .report_repository import ReportRepository

__all__ = [
    "SubjectRepository",
    "AuthorRepository",
    "PaymentMethodRepository",
    "BookRepository",
    "BookAuthorRepository",
    "BookPriceRepository",
    "ReportRepository",
]
