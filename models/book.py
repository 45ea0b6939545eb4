from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)

from models.base_model import ActiveMixin, BaseModel, Base, utcnow


class Book(ActiveMixin, BaseModel, Base):
    __tablename__ = "books"

    title = Column(String(255), nullable=False)
    publisher = Column(String(255), nullable=True)
    publication_year = Column(Integer, nullable=True)
    # Optional, but unique when present (NULLs never collide)
    isbn = Column(String(20), nullable=True)

    # Subject: RESTRICT deletion while books reference it
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False)

    __table_args__ = (
        UniqueConstraint("isbn", name="uq_books_isbn"),
        CheckConstraint(
            "(publication_year IS NULL) OR (publication_year >= 1000)",
            name="ck_books_publication_year",
        ),
        Index("ix_books_title", "title"),
        Index("ix_books_subject_id", "subject_id"),
    )


class BookAuthor(BaseModel, Base):
    """Ordered link between a book and one of its authors (order is 1-based)."""

    __tablename__ = "book_authors"

    # Links go away with their book; an author stays RESTRICTed while linked
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="RESTRICT"), nullable=False)
    order = Column("author_order", Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("book_id", "author_id", name="uq_book_authors_book_author"),
        CheckConstraint("author_order >= 1", name="ck_book_authors_order_positive"),
        Index("ix_book_authors_author_id", "author_id"),
    )


class BookPrice(BaseModel, Base):
    """Price of a book for one payment method."""

    __tablename__ = "book_prices"

    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    payment_method_id = Column(
        Integer, ForeignKey("payment_methods.id", ondelete="RESTRICT"), nullable=False
    )
    value = Column(Numeric(10, 2), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("book_id", "payment_method_id", name="uq_book_prices_book_payment_method"),
        CheckConstraint("value > 0", name="ck_book_prices_value_positive"),
    )
