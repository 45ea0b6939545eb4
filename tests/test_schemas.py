from datetime import date
from decimal import Decimal

import pytest
from marshmallow import ValidationError

from models.schemas.book import BookCreateSchema, BookPriceInSchema
from models.schemas.common import validate_isbn, validate_price_value, validate_publication_year
from models.schemas.report import BooksBySubjectQuerySchema, BooksWithPricesQuerySchema


class TestIsbn:
    @pytest.mark.parametrize("isbn", ["9780306406157", "978-03064061570", "978-0306406157X", None, "", "  "])
    def test_accepted(self, isbn):
        validate_isbn(isbn)

    @pytest.mark.parametrize("isbn", ["123", "ABC123DEF456", "978-0306406157", "978-030640615X", "97803064061570", "978 03064061570", "978-0306406157x"])
    def test_rejected(self, isbn):
        with pytest.raises(ValidationError):
            validate_isbn(isbn)


class TestPriceValue:
    @pytest.mark.parametrize("value", [Decimal("45.99"), Decimal("0.01"), Decimal("10"), Decimal("10.5"), Decimal("45.990"), Decimal("99999999.99")])
    def test_accepted(self, value):
        validate_price_value(value)

    @pytest.mark.parametrize("value", [Decimal("45.999"), Decimal("0"), Decimal("-1.00"), Decimal("NaN"),
                                       Decimal("Infinity"), Decimal("1e30"), Decimal("99999999999999999999999999999"), Decimal("100000000.00")])
    def test_rejected(self, value):
        with pytest.raises(ValidationError):
            validate_price_value(value)

    def test_schema_keeps_two_places_exact(self):
        loaded = BookPriceInSchema().load({"payment_method_id": 1, "value": "45.99"})
        assert loaded["value"] == Decimal("45.99")

    def test_schema_rejects_three_places(self):
        with pytest.raises(ValidationError) as exc:
            BookPriceInSchema().load({"payment_method_id": 1, "value": "45.999"})
        assert "value" in exc.value.messages

    @pytest.mark.parametrize("value", ["1e30", 1e30, "100000000"])
    def test_schema_rejects_values_beyond_column_range(self, value):
        with pytest.raises(ValidationError) as exc:
            BookPriceInSchema().load({"payment_method_id": 1, "value": value})
        assert "value" in exc.value.messages

    def test_schema_rejects_non_positive_payment_method(self):
        with pytest.raises(ValidationError) as exc:
            BookPriceInSchema().load({"payment_method_id": 0, "value": "1.00"})
        assert "payment_method_id" in exc.value.messages


class TestPublicationYear:
    def test_bounds_are_inclusive(self):
        validate_publication_year(1000)
        validate_publication_year(date.today().year)
        validate_publication_year(None)

    @pytest.mark.parametrize("year", [999, date.today().year + 1])
    def test_out_of_range(self, year):
        with pytest.raises(ValidationError):
            validate_publication_year(year)


class TestBookCreateSchema:
    def _payload(self, **overrides):
        payload = {
            "title": "Dom Casmurro",
            "subject_id": 1,
            "author_ids": [1],
            "prices": [{"payment_method_id": 1, "value": "39.90"}],
        }
        payload.update(overrides)
        return payload

    def test_optional_fields_default_to_none(self):
        data = BookCreateSchema().load(self._payload())
        assert data["publisher"] is None
        assert data["publication_year"] is None
        assert data["isbn"] is None

    def test_isbn_and_publisher_are_trimmed(self):
        data = BookCreateSchema().load(self._payload(isbn=" 9780306406157 ", publisher="   "))
        assert data["isbn"] == "9780306406157"
        assert data["publisher"] is None

    def test_author_ids_required_and_non_empty(self):
        with pytest.raises(ValidationError) as exc:
            BookCreateSchema().load(self._payload(author_ids=[]))
        assert exc.value.messages["author_ids"] == ["The book must have at least one author."]

    def test_author_ids_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            BookCreateSchema().load(self._payload(author_ids=[2, 0]))
        assert 1 in exc.value.messages["author_ids"]

    def test_blank_title(self):
        with pytest.raises(ValidationError) as exc:
            BookCreateSchema().load(self._payload(title=""))
        assert "title" in exc.value.messages


class TestReportQuerySchemas:
    def test_year_range_must_be_ordered(self):
        with pytest.raises(ValidationError) as exc:
            BooksBySubjectQuerySchema().load({"year_from": "2010", "year_to": "2000"})
        assert "year_from" in exc.value.messages

    def test_active_only_defaults_to_true(self):
        assert BooksBySubjectQuerySchema().load({})["active_only"] is True

    def test_value_range_must_be_ordered(self):
        with pytest.raises(ValidationError):
            BooksWithPricesQuerySchema().load({"min_value": "50", "max_value": "10"})
