from marshmallow import Schema, fields, validate

from models.schemas.common import MAX_TEXT_LENGTH, validate_not_blank


class SubjectCreateSchema(Schema):
    description = fields.String(
        required=True,
        validate=[validate_not_blank, validate.Length(max=MAX_TEXT_LENGTH)],
    )


class SubjectUpdateSchema(SubjectCreateSchema):
    active = fields.Boolean(load_default=True)


class SubjectOutSchema(Schema):
    id = fields.Integer()
    description = fields.String()
    active = fields.Boolean()
    registered_at = fields.DateTime()
