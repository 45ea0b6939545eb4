from __future__ import annotations

from exceptions import NotFound
from models.payment_method import PaymentMethod


class PaymentMethodService:
    """Read-only access to payment methods (reference data)."""

    resource_type = "PaymentMethod"

    def __init__(self, payment_methods):
        self._payment_methods = payment_methods

    def get_by_id(self, payment_method_id: int) -> PaymentMethod:
        method = self._payment_methods.get_by_id(payment_method_id)
        if method is None:
            raise NotFound(self.resource_type, payment_method_id)
        return method

    def get_all(self) -> list[PaymentMethod]:
        return self._payment_methods.get_all()

    def get_active(self) -> list[PaymentMethod]:
        return self._payment_methods.get_by_active(True)
