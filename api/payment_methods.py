from __future__ import annotations

from flask import Blueprint, jsonify

from api.dependencies import get_services
from models.schemas.payment_method import PaymentMethodOutSchema

bp = Blueprint("payment_methods", __name__)

out_schema = PaymentMethodOutSchema()
out_list_schema = PaymentMethodOutSchema(many=True)


@bp.get("/payment-methods")
def list_payment_methods():
    """
    List payment methods (reference data, read-only)
    ---
    tags: [Payment Methods]
    responses:
      200: { description: OK }
    """
    methods = get_services().payment_methods.get_all()
    return jsonify({"data": out_list_schema.dump(methods)})


@bp.get("/payment-methods/active")
def list_active_payment_methods():
    """
    List active payment methods
    ---
    tags: [Payment Methods]
    responses:
      200: { description: OK }
    """
    methods = get_services().payment_methods.get_active()
    return jsonify({"data": out_list_schema.dump(methods)})


@bp.get("/payment-methods/<int:payment_method_id>")
def get_payment_method(payment_method_id: int):
    """
    Get a payment method by id
    ---
    tags: [Payment Methods]
    parameters:
      - in: path
        name: payment_method_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    method = get_services().payment_methods.get_by_id(payment_method_id)
    return jsonify({"data": out_schema.dump(method)})
