from decimal import Decimal

import pytest

from exceptions import DuplicateResource, InvalidOperation, NotFound, ValidationFailure
from models.book import Book, BookAuthor, BookPrice


def _row_counts(storage):
    session = storage.get_session()
    return (
        session.query(Book).count(),
        session.query(BookAuthor).count(),
        session.query(BookPrice).count(),
    )


class TestBookCreate:
    def test_create_returns_expanded_detail(self, services, make_subject, make_author, payment_methods, book_payload):
        subject = make_subject("Software")
        hunt, thomas = make_author("Andrew Hunt"), make_author("David Thomas")
        book = services.books.create(book_payload(
            subject_id=subject.id,
            author_ids=[hunt.id, thomas.id],
            isbn="9780201616224",
            prices=[
                {"payment_method_id": payment_methods["Cash"].id, "value": "45.99"},
                {"payment_method_id": payment_methods["Credit Card"].id, "value": 49},
            ],
        ))

        assert book.id > 0
        assert book.active is True
        assert book.subject_description == "Software"
        assert [(a.name, a.order) for a in book.authors] == [("Andrew Hunt", 1), ("David Thomas", 2)]
        assert sorted((p.payment_method_name, p.value) for p in book.prices) == [
            ("Cash", Decimal("45.99")),
            ("Credit Card", Decimal("49.00")),
        ]

    def test_author_order_follows_request_order(self, services, make_author, book_payload):
        a, b, c = make_author("A"), make_author("B"), make_author("C")
        book = services.books.create(book_payload(author_ids=[a.id, b.id, c.id]))

        fetched = services.books.get_by_id(book.id)
        assert [x.author_id for x in fetched.authors] == [a.id, b.id, c.id]
        assert [x.order for x in fetched.authors] == [1, 2, 3]

    def test_missing_subject_creates_nothing(self, services, storage, book_payload):
        with pytest.raises(NotFound) as exc:
            services.books.create(book_payload(subject_id=999999))
        assert exc.value.resource_type == "Subject"
        assert exc.value.resource_id == 999999
        assert _row_counts(storage) == (0, 0, 0)

    def test_missing_author_creates_nothing(self, services, storage, make_author, book_payload):
        author = make_author()
        with pytest.raises(NotFound) as exc:
            services.books.create(book_payload(author_ids=[author.id, 777]))
        assert exc.value.resource_type == "Author"
        assert _row_counts(storage) == (0, 0, 0)

    def test_missing_payment_method_creates_nothing(self, services, storage, book_payload):
        with pytest.raises(NotFound) as exc:
            services.books.create(book_payload(prices=[{"payment_method_id": 555, "value": "10.00"}]))
        assert exc.value.resource_type == "PaymentMethod"
        assert _row_counts(storage) == (0, 0, 0)

    def test_repeated_author_rolls_back_whole_book(self, services, storage, make_author, book_payload):
        author = make_author("Repeated")
        with pytest.raises(InvalidOperation) as exc:
            services.books.create(book_payload(author_ids=[author.id, author.id]))
        assert "Repeated" in exc.value.message
        assert _row_counts(storage) == (0, 0, 0)

    def test_repeated_payment_method_rolls_back_whole_book(self, services, storage, payment_methods, book_payload):
        cash = payment_methods["Cash"].id
        with pytest.raises(InvalidOperation) as exc:
            services.books.create(book_payload(prices=[
                {"payment_method_id": cash, "value": "10.00"},
                {"payment_method_id": cash, "value": "12.00"},
            ]))
        assert "Cash" in exc.value.message
        assert _row_counts(storage) == (0, 0, 0)

    def test_duplicate_isbn(self, services, book_payload):
        services.books.create(book_payload(isbn="978-03064061570"))
        with pytest.raises(DuplicateResource) as exc:
            services.books.create(book_payload(isbn="978-03064061570", title="Another"))
        assert exc.value.field == "isbn"

    def test_duplicate_isbn_race(self, services, book_payload, monkeypatch):
        services.books.create(book_payload(isbn="9780306406157"))
        monkeypatch.setattr(services.books._books, "get_by_isbn", lambda isbn: None)
        with pytest.raises(DuplicateResource):
            services.books.create(book_payload(isbn="9780306406157", title="Another"))
        assert len(services.books.get_all()) == 1

    def test_books_without_isbn_do_not_collide(self, services, book_payload):
        services.books.create(book_payload(isbn=None))
        services.books.create(book_payload(isbn="  "))
        assert [b.isbn for b in services.books.get_all()] == [None, None]

    @pytest.mark.parametrize("author_ids", [[], [0], [3, -1]])
    def test_invalid_author_lists_are_rejected(self, services, storage, book_payload, author_ids):
        with pytest.raises(ValidationFailure) as exc:
            services.books.create(book_payload(author_ids=author_ids))
        assert "author_ids" in exc.value.messages
        assert _row_counts(storage)[0] == 0

    def test_empty_price_list_is_rejected(self, services, book_payload):
        with pytest.raises(ValidationFailure) as exc:
            services.books.create(book_payload(prices=[]))
        assert "prices" in exc.value.messages


class TestBookUpdate:
    def test_update_replaces_author_set_and_renumbers(self, services, make_author, book_payload):
        a, b, c = make_author("A"), make_author("B"), make_author("C")
        book = services.books.create(book_payload(author_ids=[a.id, b.id, c.id]))

        updated = services.books.update(book.id, book_payload(subject_id=book.subject_id, author_ids=[c.id, a.id]))
        assert [(x.author_id, x.order) for x in updated.authors] == [(c.id, 1), (a.id, 2)]
        assert services.books.get_by_author(b.id) == []

    def test_update_replaces_prices(self, services, payment_methods, book_payload):
        book = services.books.create(book_payload())
        debit = payment_methods["Debit Card"].id
        updated = services.books.update(book.id, book_payload(
            subject_id=book.subject_id,
            author_ids=[book.authors[0].author_id],
            prices=[{"payment_method_id": debit, "value": "30.50"}],
        ))
        assert [(p.payment_method_id, p.value) for p in updated.prices] == [(debit, Decimal("30.50"))]

    def test_update_fields_and_active_flag(self, services, book_payload):
        book = services.books.create(book_payload())
        updated = services.books.update(book.id, book_payload(
            subject_id=book.subject_id,
            author_ids=[book.authors[0].author_id],
            title="Second Edition",
            publication_year=2019,
            active=False,
        ))
        assert updated.title == "Second Edition"
        assert updated.publication_year == 2019
        assert updated.active is False
        assert [b.id for b in services.books.get_by_active(False)] == [book.id]
        assert services.books.get_by_active(True) == []

    def test_update_keeps_own_isbn(self, services, book_payload):
        book = services.books.create(book_payload(isbn="9780306406157"))
        updated = services.books.update(book.id, book_payload(
            subject_id=book.subject_id, author_ids=[book.authors[0].author_id], isbn="9780306406157",
        ))
        assert updated.isbn == "9780306406157"

    def test_update_to_foreign_isbn_is_rejected(self, services, book_payload):
        services.books.create(book_payload(isbn="9780306406157"))
        other = services.books.create(book_payload(isbn="9781234567897", title="Other"))
        with pytest.raises(DuplicateResource):
            services.books.update(other.id, book_payload(
                subject_id=other.subject_id, author_ids=[other.authors[0].author_id], isbn="9780306406157",
            ))
        assert services.books.get_by_id(other.id).isbn == "9781234567897"

    def test_failed_update_leaves_book_untouched(self, services, make_author, book_payload):
        a, b = make_author("A"), make_author("B")
        book = services.books.create(book_payload(author_ids=[a.id, b.id], title="Original"))

        with pytest.raises(InvalidOperation):
            services.books.update(book.id, book_payload(
                subject_id=book.subject_id, author_ids=[b.id, b.id], title="Changed",
            ))

        fetched = services.books.get_by_id(book.id)
        assert fetched.title == "Original"
        assert [(x.author_id, x.order) for x in fetched.authors] == [(a.id, 1), (b.id, 2)]

    def test_update_with_missing_subject(self, services, book_payload):
        book = services.books.create(book_payload())
        with pytest.raises(NotFound) as exc:
            services.books.update(book.id, book_payload(subject_id=999999, author_ids=[book.authors[0].author_id]))
        assert exc.value.resource_type == "Subject"

    def test_update_missing_book(self, services, book_payload):
        with pytest.raises(NotFound) as exc:
            services.books.update(4040, book_payload())
        assert exc.value.resource_type == "Book"


class TestBookReadsAndDelete:
    def test_filters_by_subject_and_author(self, services, make_subject, make_author, book_payload):
        fiction, history = make_subject("Fiction"), make_subject("History")
        a, b = make_author("A"), make_author("B")
        one = services.books.create(book_payload(subject_id=fiction.id, author_ids=[a.id], title="One"))
        two = services.books.create(book_payload(subject_id=history.id, author_ids=[a.id, b.id], title="Two"))

        assert [x.id for x in services.books.get_by_subject(fiction.id)] == [one.id]
        assert [x.id for x in services.books.get_by_author(a.id)] == [one.id, two.id]
        assert [x.id for x in services.books.get_by_author(b.id)] == [two.id]

    def test_delete_cascades_links_and_prices(self, services, storage, book_payload):
        book = services.books.create(book_payload())
        services.books.delete(book.id)
        assert _row_counts(storage) == (0, 0, 0)
        with pytest.raises(NotFound):
            services.books.get_by_id(book.id)

    def test_delete_missing_book(self, services):
        with pytest.raises(NotFound):
            services.books.delete(1)
