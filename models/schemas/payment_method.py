from marshmallow import Schema, fields


class PaymentMethodOutSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    description = fields.String(allow_none=True)
    active = fields.Boolean()
