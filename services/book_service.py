"""
Book lifecycle.

A book write touches three tables: the book row, its ordered author links and
its prices. Create and update run the whole sequence inside one
`storage.transaction()`, so any failure (missing reference, duplicate link,
constraint race) leaves no partial book behind.

Author links and prices are never diffed on update: both sets are deleted and
re-inserted from the request, and author order is the 1-based position in
`author_ids`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping

from exceptions import (
    DuplicateResource,
    ForeignKeyViolation,
    InvalidOperation,
    NotFound,
    UniqueKeyViolation,
)
from models.book import Book, BookAuthor, BookPrice
from models.schemas.book import BookCreateSchema, BookUpdateSchema
from services.validation import load_or_fail

logger = logging.getLogger(__name__)


@dataclass
class BookAuthorDetail:
    author_id: int
    name: str
    order: int


@dataclass
class BookPriceDetail:
    id: int
    payment_method_id: int
    payment_method_name: str | None
    value: Decimal


@dataclass
class BookDetail:
    id: int
    title: str
    publisher: str | None
    publication_year: int | None
    isbn: str | None
    subject_id: int
    subject_description: str | None
    active: bool
    registered_at: datetime | None
    authors: list[BookAuthorDetail] = field(default_factory=list)
    prices: list[BookPriceDetail] = field(default_factory=list)


class BookService:
    resource_type = "Book"

    def __init__(self, books, book_authors, book_prices, subjects, authors, payment_methods, storage):
        self._books = books
        self._book_authors = book_authors
        self._book_prices = book_prices
        self._subjects = subjects
        self._authors = authors
        self._payment_methods = payment_methods
        self._storage = storage
        self._create_schema = BookCreateSchema()
        self._update_schema = BookUpdateSchema()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, book_id: int) -> BookDetail:
        book = self._books.get_by_id(book_id)
        if book is None:
            raise NotFound(self.resource_type, book_id)
        return self._expand(book)

    def get_all(self) -> list[BookDetail]:
        return [self._expand(book) for book in self._books.get_all()]

    def get_by_active(self, active: bool = True) -> list[BookDetail]:
        return [self._expand(book) for book in self._books.get_by_active(active)]

    def get_by_subject(self, subject_id: int) -> list[BookDetail]:
        return [self._expand(book) for book in self._books.get_by_subject(subject_id)]

    def get_by_author(self, author_id: int) -> list[BookDetail]:
        return [self._expand(book) for book in self._books.get_by_author(author_id)]

    def _expand(self, book: Book) -> BookDetail:
        # One lookup per related row; fine at catalog scale
        subject = self._subjects.get_by_id(book.subject_id)

        authors = []
        for link in self._book_authors.get_by_book(book.id):
            author = self._authors.get_by_id(link.author_id)
            if author is not None:
                authors.append(BookAuthorDetail(author_id=author.id, name=author.name, order=link.order))

        prices = []
        for price in self._book_prices.get_by_book(book.id):
            method = self._payment_methods.get_by_id(price.payment_method_id)
            prices.append(BookPriceDetail(
                id=price.id,
                payment_method_id=price.payment_method_id,
                payment_method_name=method.name if method else None,
                value=price.value,
            ))

        return BookDetail(
            id=book.id,
            title=book.title,
            publisher=book.publisher,
            publication_year=book.publication_year,
            isbn=book.isbn,
            subject_id=book.subject_id,
            subject_description=subject.description if subject else None,
            active=book.active,
            registered_at=book.registered_at,
            authors=authors,
            prices=prices,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, payload: Mapping[str, Any]) -> BookDetail:
        data = load_or_fail(self._create_schema, payload)
        isbn = data["isbn"]

        with self._storage.transaction(self.resource_type):
            if isbn and self._books.get_by_isbn(isbn) is not None:
                logger.warning("Rejected book with duplicate isbn=%s", isbn)
                raise DuplicateResource(self.resource_type, "isbn", isbn)

            self._check_references(data)

            book = Book(
                title=data["title"],
                publisher=data["publisher"],
                publication_year=data["publication_year"],
                isbn=isbn,
                subject_id=data["subject_id"],
                active=True,
            )
            try:
                self._books.insert(book)
            except UniqueKeyViolation as exc:
                raise DuplicateResource(self.resource_type, "isbn", isbn) from exc

            self._insert_authors(book.id, data["author_ids"])
            self._insert_prices(book.id, data["prices"])
            book_id = book.id

        logger.info("Book created id=%s title=%r isbn=%s", book_id, data["title"], isbn)
        return self.get_by_id(book_id)

    def update(self, book_id: int, payload: Mapping[str, Any]) -> BookDetail:
        data = load_or_fail(self._update_schema, payload)
        isbn = data["isbn"]

        with self._storage.transaction(self.resource_type):
            book = self._books.get_by_id(book_id)
            if book is None:
                logger.warning("Rejected update of missing book id=%s", book_id)
                raise NotFound(self.resource_type, book_id)

            if isbn and isbn != book.isbn:
                existing = self._books.get_by_isbn(isbn)
                if existing is not None and existing.id != book_id:
                    logger.warning("Rejected book update to duplicate isbn=%s id=%s", isbn, book_id)
                    raise DuplicateResource(self.resource_type, "isbn", isbn)

            self._check_references(data)

            book.title = data["title"]
            book.publisher = data["publisher"]
            book.publication_year = data["publication_year"]
            book.isbn = isbn
            book.subject_id = data["subject_id"]
            book.active = data["active"]
            try:
                self._books.update(book)
            except UniqueKeyViolation as exc:
                raise DuplicateResource(self.resource_type, "isbn", isbn) from exc

            self._book_authors.delete_by_book(book_id)
            self._insert_authors(book_id, data["author_ids"])
            self._book_prices.delete_by_book(book_id)
            self._insert_prices(book_id, data["prices"])

        logger.info("Book updated id=%s title=%r", book_id, data["title"])
        return self.get_by_id(book_id)

    def delete(self, book_id: int) -> None:
        book = self._books.get_by_id(book_id)
        if book is None:
            logger.warning("Rejected delete of missing book id=%s", book_id)
            raise NotFound(self.resource_type, book_id)
        title = book.title

        try:
            with self._storage.transaction(self.resource_type):
                self._books.delete(book_id)
        except ForeignKeyViolation as exc:
            # links and prices cascade, so this only fires if the schema changes underneath us
            raise InvalidOperation(
                f"Book '{title}' cannot be deleted because related records still reference it."
            ) from exc

        logger.info("Book deleted id=%s title=%r", book_id, title)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_references(self, data: dict) -> None:
        """Subject, every author and every payment method must exist; the first missing one wins."""
        subject_id = data["subject_id"]
        if self._subjects.get_by_id(subject_id) is None:
            logger.warning("Rejected book write with missing subject id=%s", subject_id)
            raise NotFound("Subject", subject_id)

        for author_id in data["author_ids"]:
            if self._authors.get_by_id(author_id) is None:
                logger.warning("Rejected book write with missing author id=%s", author_id)
                raise NotFound("Author", author_id)

        for price in data["prices"]:
            payment_method_id = price["payment_method_id"]
            if self._payment_methods.get_by_id(payment_method_id) is None:
                logger.warning("Rejected book write with missing payment method id=%s", payment_method_id)
                raise NotFound("PaymentMethod", payment_method_id)

    def _insert_authors(self, book_id: int, author_ids: list[int]) -> None:
        for position, author_id in enumerate(author_ids, start=1):
            try:
                self._book_authors.insert(BookAuthor(book_id=book_id, author_id=author_id, order=position))
            except UniqueKeyViolation as exc:
                author = self._authors.get_by_id(author_id)
                name = author.name if author else author_id
                raise InvalidOperation(f"Author '{name}' is already linked to this book.") from exc

    def _insert_prices(self, book_id: int, prices: list[dict]) -> None:
        for price in prices:
            payment_method_id = price["payment_method_id"]
            try:
                self._book_prices.insert(BookPrice(
                    book_id=book_id,
                    payment_method_id=payment_method_id,
                    value=price["value"],
                ))
            except UniqueKeyViolation as exc:
                method = self._payment_methods.get_by_id(payment_method_id)
                name = method.name if method else payment_method_id
                raise InvalidOperation(
                    f"A price for payment method '{name}' is already set for this book."
                ) from exc
