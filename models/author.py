from sqlalchemy import Column, String, UniqueConstraint

from models.base_model import ActiveMixin, BaseModel, Base


class Author(ActiveMixin, BaseModel, Base):
    __tablename__ = "authors"

    name = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("name", name="uq_authors_name"),
    )
