from __future__ import annotations

from sqlalchemy import func

from exceptions.storage import storage_errors
from models.book import Book, BookAuthor, BookPrice


class BookRepository:
    """Storage access for the books table."""

    model_name = "Book"

    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def get_by_id(self, book_id: int) -> Book | None:
        return self.session.get(Book, book_id)

    def get_all(self) -> list[Book]:
        return self.session.query(Book).order_by(Book.title.asc(), Book.id.asc()).all()

    def get_by_active(self, active: bool = True) -> list[Book]:
        return (
            self.session.query(Book)
            .filter(Book.active.is_(active))
            .order_by(Book.title.asc(), Book.id.asc())
            .all()
        )

    def get_by_subject(self, subject_id: int) -> list[Book]:
        return (
            self.session.query(Book)
            .filter(Book.subject_id == subject_id)
            .order_by(Book.title.asc(), Book.id.asc())
            .all()
        )

    def get_by_author(self, author_id: int) -> list[Book]:
        return (
            self.session.query(Book)
            .join(BookAuthor, BookAuthor.book_id == Book.id)
            .filter(BookAuthor.author_id == author_id)
            .order_by(Book.title.asc(), Book.id.asc())
            .all()
        )

    def get_by_isbn(self, isbn: str) -> Book | None:
        return self.session.query(Book).filter(Book.isbn == isbn).first()

    def count_by_subject(self, subject_id: int) -> int:
        return self.session.query(func.count(Book.id)).filter(Book.subject_id == subject_id).scalar()

    def count_by_author(self, author_id: int) -> int:
        return (
            self.session.query(func.count(func.distinct(BookAuthor.book_id)))
            .filter(BookAuthor.author_id == author_id)
            .scalar()
        )

    def insert(self, book: Book) -> int:
        with storage_errors(self.session, self.model_name):
            self.session.add(book)
            self.session.flush()
        return book.id

    def update(self, book: Book) -> None:
        with storage_errors(self.session, self.model_name):
            self.session.flush()

    def delete(self, book_id: int) -> bool:
        # book_authors / book_prices rows go with it (ON DELETE CASCADE)
        with storage_errors(self.session, self.model_name):
            deleted = (
                self.session.query(Book)
                .filter(Book.id == book_id)
                .delete(synchronize_session="fetch")
            )
        return deleted > 0


class BookAuthorRepository:
    """Storage access for the ordered book/author links."""

    model_name = "BookAuthor"

    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def get_by_book(self, book_id: int) -> list[BookAuthor]:
        return (
            self.session.query(BookAuthor)
            .filter(BookAuthor.book_id == book_id)
            .order_by(BookAuthor.order.asc())
            .all()
        )

    def insert(self, link: BookAuthor) -> int:
        with storage_errors(self.session, self.model_name):
            self.session.add(link)
            self.session.flush()
        return link.id

    def delete_by_book(self, book_id: int) -> int:
        with storage_errors(self.session, self.model_name):
            return (
                self.session.query(BookAuthor)
                .filter(BookAuthor.book_id == book_id)
                .delete(synchronize_session="fetch")
            )


class BookPriceRepository:
    """Storage access for per-payment-method book prices."""

    model_name = "BookPrice"

    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def get_by_book(self, book_id: int) -> list[BookPrice]:
        return (
            self.session.query(BookPrice)
            .filter(BookPrice.book_id == book_id)
            .order_by(BookPrice.id.asc())
            .all()
        )

    def insert(self, price: BookPrice) -> int:
        with storage_errors(self.session, self.model_name):
            self.session.add(price)
            self.session.flush()
        return price.id

    def delete_by_book(self, book_id: int) -> int:
        with storage_errors(self.session, self.model_name):
            return (
                self.session.query(BookPrice)
                .filter(BookPrice.book_id == book_id)
                .delete(synchronize_session="fetch")
            )
