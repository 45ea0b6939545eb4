"""
Catalog services wired to a single DBStorage.

Usage:
    storage = DBStorage(url); storage.reload()
    services = build_services(storage)
    services.subjects.create({"description": "Fiction"})
"""

from dataclasses import dataclass

from repositories import (
    AuthorRepository,
    BookAuthorRepository,
    BookPriceRepository,
    BookRepository,
    PaymentMethodRepository,
    ReportRepository,
    SubjectRepository,
)

from .author_service import AuthorService
from .book_service import BookAuthorDetail, BookDetail, BookPriceDetail, BookService
from .payment_method_service import PaymentMethodService
from .report_service import ReportService
from .subject_service import SubjectService


@dataclass
class CatalogServices:
    subjects: SubjectService
    authors: AuthorService
    payment_methods: PaymentMethodService
    books: BookService
    reports: ReportService


def build_services(storage) -> CatalogServices:
    subjects = SubjectRepository(storage)
    authors = AuthorRepository(storage)
    payment_methods = PaymentMethodRepository(storage)
    books = BookRepository(storage)
    book_authors = BookAuthorRepository(storage)
    book_prices = BookPriceRepository(storage)

    return CatalogServices(
        subjects=SubjectService(subjects, books, storage),
        authors=AuthorService(authors, books, storage),
        payment_methods=PaymentMethodService(payment_methods),
        books=BookService(books, book_authors, book_prices, subjects, authors, payment_methods, storage),
        reports=ReportService(ReportRepository(storage)),
    )


__all__ = [
    "CatalogServices",
    "build_services",
    "SubjectService",
    "AuthorService",
    "PaymentMethodService",
    "BookService",
    "BookDetail",
    "BookAuthorDetail",
    "BookPriceDetail",
    "ReportService",
]
