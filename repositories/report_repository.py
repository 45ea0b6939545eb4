"""
Tabular projections consumed by the reporting front end.

Each method returns plain dicts, one per row, already flattened the way the
report layouts expect (author names joined in author order).
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from models.author import Author
from models.book import Book, BookAuthor, BookPrice
from models.payment_method import PaymentMethod
from models.subject import Subject

AUTHOR_SEPARATOR = ", "


class ReportRepository:
    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def _author_names_by_book(self, book_ids) -> dict[int, str]:
        if not book_ids:
            return {}
        rows = (
            self.session.query(BookAuthor.book_id, Author.name)
            .join(Author, Author.id == BookAuthor.author_id)
            .filter(BookAuthor.book_id.in_(book_ids))
            .order_by(BookAuthor.book_id.asc(), BookAuthor.order.asc())
            .all()
        )
        names = defaultdict(list)
        for book_id, name in rows:
            names[book_id].append(name)
        return {book_id: AUTHOR_SEPARATOR.join(values) for book_id, values in names.items()}

    def books_by_subject(self, subject_id: int | None = None, year_from: int | None = None,
                         year_to: int | None = None, active_only: bool | None = True) -> list[dict]:
        query = (
            self.session.query(Subject, Book)
            .join(Book, Book.subject_id == Subject.id)
        )
        if subject_id is not None:
            query = query.filter(Subject.id == subject_id)
        if year_from is not None:
            query = query.filter(Book.publication_year >= year_from)
        if year_to is not None:
            query = query.filter(Book.publication_year <= year_to)
        if active_only:
            query = query.filter(Book.active.is_(True))

        rows = query.order_by(Subject.description.asc(), Book.title.asc()).all()
        authors = self._author_names_by_book([book.id for _, book in rows])
        return [
            {
                "subject_id": subject.id,
                "subject": subject.description,
                "book_id": book.id,
                "title": book.title,
                "publisher": book.publisher,
                "isbn": book.isbn,
                "publication_year": book.publication_year,
                "authors": authors.get(book.id, ""),
                "active": book.active,
            }
            for subject, book in rows
        ]

    def authors_by_book(self, author_id: int | None = None) -> list[dict]:
        # Outer joins keep authors without books in the report
        query = (
            self.session.query(Author, BookAuthor, Book, Subject)
            .outerjoin(BookAuthor, BookAuthor.author_id == Author.id)
            .outerjoin(Book, Book.id == BookAuthor.book_id)
            .outerjoin(Subject, Subject.id == Book.subject_id)
        )
        if author_id is not None:
            query = query.filter(Author.id == author_id)

        rows = query.order_by(Author.name.asc(), BookAuthor.order.asc()).all()
        return [
            {
                "author_id": author.id,
                "author": author.name,
                "book_id": book.id if book else None,
                "title": book.title if book else None,
                "publisher": book.publisher if book else None,
                "subject": subject.description if subject else None,
                "publication_year": book.publication_year if book else None,
                "isbn": book.isbn if book else None,
                "author_order": link.order if link else None,
            }
            for author, link, book, subject in rows
        ]

    def books_with_prices(self, min_value: Decimal | None = None, max_value: Decimal | None = None,
                          payment_method_id: int | None = None, active_only: bool | None = True) -> list[dict]:
        query = (
            self.session.query(Book, BookPrice, PaymentMethod, Subject)
            .join(BookPrice, BookPrice.book_id == Book.id)
            .join(PaymentMethod, PaymentMethod.id == BookPrice.payment_method_id)
            .outerjoin(Subject, Subject.id == Book.subject_id)
        )
        if min_value is not None:
            query = query.filter(BookPrice.value >= min_value)
        if max_value is not None:
            query = query.filter(BookPrice.value <= max_value)
        if payment_method_id is not None:
            query = query.filter(BookPrice.payment_method_id == payment_method_id)
        if active_only:
            query = query.filter(Book.active.is_(True))

        rows = query.order_by(Book.title.asc(), PaymentMethod.name.asc()).all()
        authors = self._author_names_by_book(sorted({book.id for book, _, _, _ in rows}))
        return [
            {
                "book_id": book.id,
                "title": book.title,
                "publisher": book.publisher,
                "isbn": book.isbn,
                "publication_year": book.publication_year,
                "subject": subject.description if subject else None,
                "authors": authors.get(book.id, ""),
                "payment_method_id": method.id,
                "payment_method": method.name,
                "price": price.value,
            }
            for book, price, method, subject in rows
        ]
