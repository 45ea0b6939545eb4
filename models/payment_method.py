from sqlalchemy import Column, String, UniqueConstraint

from models.base_model import ActiveMixin, BaseModel, Base


class PaymentMethod(ActiveMixin, BaseModel, Base):
    """Reference data: seeded once, read-only through the API."""

    __tablename__ = "payment_methods"

    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("name", name="uq_payment_methods_name"),
    )
