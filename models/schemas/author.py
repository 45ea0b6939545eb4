from marshmallow import Schema, fields, validate

from models.schemas.common import MAX_TEXT_LENGTH, validate_not_blank


class AuthorCreateSchema(Schema):
    name = fields.String(
        required=True,
        validate=[validate_not_blank, validate.Length(max=MAX_TEXT_LENGTH)],
    )


class AuthorUpdateSchema(AuthorCreateSchema):
    active = fields.Boolean(load_default=True)


class AuthorOutSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    active = fields.Boolean()
    registered_at = fields.DateTime()
