from __future__ import annotations

from models.payment_method import PaymentMethod


class PaymentMethodRepository:
    """Read-only storage access for payment methods."""

    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def get_by_id(self, payment_method_id: int) -> PaymentMethod | None:
        return self.session.get(PaymentMethod, payment_method_id)

    def get_all(self) -> list[PaymentMethod]:
        return self.session.query(PaymentMethod).order_by(PaymentMethod.name.asc()).all()

    def get_by_active(self, active: bool = True) -> list[PaymentMethod]:
        return (
            self.session.query(PaymentMethod)
            .filter(PaymentMethod.active.is_(active))
            .order_by(PaymentMethod.name.asc())
            .all()
        )
