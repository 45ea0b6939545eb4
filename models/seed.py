"""Reference data loaded once into an empty database."""

import logging

from models.payment_method import PaymentMethod

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHODS = (
    ("Cash", "Payment in cash at the counter"),
    ("Credit Card", "Credit card, single or in installments"),
    ("Debit Card", "Debit card"),
    ("Bank Transfer", "Direct bank transfer"),
)


def seed_payment_methods(storage) -> int:
    """Insert the default payment methods if the table is empty. Returns the number inserted."""
    session = storage.get_session()
    if session.query(PaymentMethod).count():
        return 0
    with storage.transaction("PaymentMethod"):
        for name, description in DEFAULT_PAYMENT_METHODS:
            session.add(PaymentMethod(name=name, description=description, active=True))
    logger.info("Seeded %d payment methods", len(DEFAULT_PAYMENT_METHODS))
    return len(DEFAULT_PAYMENT_METHODS)
