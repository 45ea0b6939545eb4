from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from models.schemas.common import validate_publication_year

positive_id = validate.Range(min=1, error="Must be a positive integer.")


class BooksBySubjectQuerySchema(Schema):
    subject_id = fields.Integer(load_default=None, validate=positive_id)
    year_from = fields.Integer(load_default=None, validate=validate_publication_year)
    year_to = fields.Integer(load_default=None, validate=validate_publication_year)
    active_only = fields.Boolean(load_default=True)

    @validates_schema
    def _check_year_range(self, data, **kwargs):
        start, end = data.get("year_from"), data.get("year_to")
        if start is not None and end is not None and start > end:
            raise ValidationError("year_from must not be after year_to.", "year_from")


class AuthorsByBookQuerySchema(Schema):
    author_id = fields.Integer(load_default=None, validate=positive_id)


class BooksWithPricesQuerySchema(Schema):
    min_value = fields.Decimal(load_default=None, validate=validate.Range(min=0))
    max_value = fields.Decimal(load_default=None, validate=validate.Range(min=0))
    payment_method_id = fields.Integer(load_default=None, validate=positive_id)
    active_only = fields.Boolean(load_default=True)

    @validates_schema
    def _check_value_range(self, data, **kwargs):
        low, high = data.get("min_value"), data.get("max_value")
        if low is not None and high is not None and low > high:
            raise ValidationError("min_value must not be greater than max_value.", "min_value")


class BooksBySubjectRowSchema(Schema):
    subject_id = fields.Integer()
    subject = fields.String()
    book_id = fields.Integer()
    title = fields.String()
    publisher = fields.String(allow_none=True)
    isbn = fields.String(allow_none=True)
    publication_year = fields.Integer(allow_none=True)
    authors = fields.String()
    active = fields.Boolean()


class AuthorsByBookRowSchema(Schema):
    author_id = fields.Integer()
    author = fields.String()
    book_id = fields.Integer(allow_none=True)
    title = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    subject = fields.String(allow_none=True)
    publication_year = fields.Integer(allow_none=True)
    isbn = fields.String(allow_none=True)
    author_order = fields.Integer(allow_none=True)


class BooksWithPricesRowSchema(Schema):
    book_id = fields.Integer()
    title = fields.String()
    publisher = fields.String(allow_none=True)
    isbn = fields.String(allow_none=True)
    publication_year = fields.Integer(allow_none=True)
    subject = fields.String(allow_none=True)
    authors = fields.String()
    payment_method_id = fields.Integer()
    payment_method = fields.String()
    price = fields.Decimal(places=2, as_string=True)
