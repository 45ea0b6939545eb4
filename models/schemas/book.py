from marshmallow import Schema, fields, post_load, validate

from models.schemas.common import (
    MAX_TEXT_LENGTH,
    normalize_isbn,
    validate_isbn,
    validate_not_blank,
    validate_price_value,
    validate_publication_year,
)


class BookPriceInSchema(Schema):
    payment_method_id = fields.Integer(
        required=True,
        validate=validate.Range(min=1, error="Payment method id must be a positive integer."),
    )
    # Decimal keeps 45.99 exact so the 2-places check is meaningful
    value = fields.Decimal(required=True, validate=validate_price_value)


class BookCreateSchema(Schema):
    title = fields.String(
        required=True,
        validate=[validate_not_blank, validate.Length(max=MAX_TEXT_LENGTH)],
    )
    publisher = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=MAX_TEXT_LENGTH))
    publication_year = fields.Integer(allow_none=True, load_default=None, validate=validate_publication_year)
    isbn = fields.String(allow_none=True, load_default=None, validate=validate_isbn)
    subject_id = fields.Integer(
        required=True,
        validate=validate.Range(min=1, error="Subject id must be a positive integer."),
    )
    author_ids = fields.List(
        fields.Integer(validate=validate.Range(min=1, error="Author ids must be positive integers.")),
        required=True,
        validate=validate.Length(min=1, error="The book must have at least one author."),
    )
    prices = fields.List(
        fields.Nested(BookPriceInSchema),
        required=True,
        validate=validate.Length(min=1, error="The book must have at least one price."),
    )

    @post_load
    def _normalize(self, data, **kwargs):
        data["isbn"] = normalize_isbn(data.get("isbn"))
        if data.get("publisher") is not None:
            data["publisher"] = data["publisher"].strip() or None
        return data


class BookUpdateSchema(BookCreateSchema):
    active = fields.Boolean(load_default=True)


class BookAuthorOutSchema(Schema):
    author_id = fields.Integer()
    name = fields.String()
    order = fields.Integer()


class BookPriceOutSchema(Schema):
    id = fields.Integer()
    payment_method_id = fields.Integer()
    payment_method_name = fields.String(allow_none=True)
    value = fields.Decimal(places=2, as_string=True)


class BookOutSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    publisher = fields.String(allow_none=True)
    publication_year = fields.Integer(allow_none=True)
    isbn = fields.String(allow_none=True)
    subject_id = fields.Integer()
    subject_description = fields.String(allow_none=True)
    active = fields.Boolean()
    registered_at = fields.DateTime()
    authors = fields.List(fields.Nested(BookAuthorOutSchema))
    prices = fields.List(fields.Nested(BookPriceOutSchema))


class BookListQuerySchema(Schema):
    subject_id = fields.Integer(load_default=None, validate=validate.Range(min=1))
    author_id = fields.Integer(load_default=None, validate=validate.Range(min=1))
