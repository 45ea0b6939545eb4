import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from exceptions import (
    ErrorKind,
    ForeignKeyViolation,
    TransientReason,
    TransientStorageFailure,
    UniqueKeyViolation,
    storage_errors,
)
from exceptions.storage import classify_integrity_error, classify_transient_error, extract_columns


class FakeDriverError(Exception):
    """Stands in for a DB-API exception; optional pgcode / errno like real drivers."""

    def __init__(self, message, pgcode=None, errno=None):
        args = (errno, message) if errno is not None else (message,)
        super().__init__(*args)
        self.pgcode = pgcode
        self._message = message

    def __str__(self):
        return self._message


class FakeSession:
    def __init__(self):
        self.rollbacks = 0

    def rollback(self):
        self.rollbacks += 1


def integrity(message, **kwargs):
    return IntegrityError("INSERT ...", {}, FakeDriverError(message, **kwargs))


def operational(message, **kwargs):
    return OperationalError("UPDATE ...", {}, FakeDriverError(message, **kwargs))


class TestIntegrityClassification:
    def test_sqlite_unique(self):
        exc = integrity("UNIQUE constraint failed: subjects.description")
        assert classify_integrity_error(exc)[0] is UniqueKeyViolation
        assert extract_columns(exc) == ["description"]

    def test_sqlite_composite_unique_columns(self):
        exc = integrity("UNIQUE constraint failed: book_authors.book_id, book_authors.author_id")
        assert extract_columns(exc) == ["book_id", "author_id"]

    def test_sqlite_foreign_key(self):
        assert classify_integrity_error(integrity("FOREIGN KEY constraint failed"))[0] is ForeignKeyViolation

    def test_postgres_codes_win_over_message(self):
        exc = integrity("something vague", pgcode="23505")
        assert classify_integrity_error(exc)[0] is UniqueKeyViolation
        exc = integrity("something vague", pgcode="23503")
        assert classify_integrity_error(exc)[0] is ForeignKeyViolation

    def test_postgres_detail_columns(self):
        exc = integrity('duplicate key value violates unique constraint "uq_authors_name"\n'
                        'DETAIL:  Key (name)=(Jorge Amado) already exists.', pgcode="23505")
        assert extract_columns(exc) == ["name"]

    def test_mysql_duplicate_entry(self):
        exc = integrity("Duplicate entry 'Fiction' for key 'uq_subjects_description'", errno=1062)
        assert classify_integrity_error(exc)[0] is UniqueKeyViolation

    def test_check_constraint_is_unclassified(self):
        assert classify_integrity_error(integrity("CHECK constraint failed: ck_book_prices_value_positive")) == (None, None)


class TestTransientClassification:
    @pytest.mark.parametrize("exc, reason", [
        (operational("deadlock detected", pgcode="40P01"), TransientReason.DEADLOCK),
        (operational("could not serialize access", pgcode="40001"), TransientReason.DEADLOCK),
        (operational("canceling statement due to statement timeout", pgcode="57014"), TransientReason.TIMEOUT),
        (operational("Deadlock found when trying to get lock", errno=1213), TransientReason.DEADLOCK),
        (operational("Lock wait timeout exceeded", errno=1205), TransientReason.TIMEOUT),
        (operational("database is locked"), TransientReason.TIMEOUT),
        (PoolTimeoutError("QueuePool limit reached"), TransientReason.TIMEOUT),
    ])
    def test_known_transient_failures(self, exc, reason):
        assert classify_transient_error(exc) is reason

    def test_connection_refused_is_not_transient(self):
        assert classify_transient_error(operational("could not connect to server")) is None


class TestStorageErrorsContext:
    def test_unique_violation_rolls_back_and_raises_typed_error(self):
        session = FakeSession()
        with pytest.raises(UniqueKeyViolation) as exc:
            with storage_errors(session, "Subject"):
                raise integrity("UNIQUE constraint failed: subjects.description")
        assert session.rollbacks == 1
        assert exc.value.fields == ["description"]
        assert exc.value.kind is ErrorKind.UNIQUE_KEY_VIOLATION
        assert "constraint" not in str(exc.value.details())

    def test_foreign_key_violation(self):
        session = FakeSession()
        with pytest.raises(ForeignKeyViolation):
            with storage_errors(session, "Subject"):
                raise integrity("FOREIGN KEY constraint failed")
        assert session.rollbacks == 1

    def test_deadlock_becomes_transient_failure(self):
        session = FakeSession()
        with pytest.raises(TransientStorageFailure) as exc:
            with storage_errors(session, "Book"):
                raise operational("deadlock detected", pgcode="40P01")
        assert exc.value.kind is ErrorKind.STORAGE_DEADLOCK
        assert session.rollbacks == 1

    def test_timeout_kind(self):
        assert TransientStorageFailure(TransientReason.TIMEOUT).kind is ErrorKind.STORAGE_TIMEOUT

    def test_unclassified_errors_propagate_unchanged(self):
        session = FakeSession()
        original = integrity("NOT NULL constraint failed: books.title")
        with pytest.raises(IntegrityError) as exc:
            with storage_errors(session):
                raise original
        assert exc.value is original
        assert session.rollbacks == 1

    def test_other_exceptions_pass_through_without_rollback(self):
        session = FakeSession()
        with pytest.raises(KeyError):
            with storage_errors(session):
                raise KeyError("boom")
        assert session.rollbacks == 0
