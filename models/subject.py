from sqlalchemy import Column, String, UniqueConstraint

from models.base_model import ActiveMixin, BaseModel, Base


class Subject(ActiveMixin, BaseModel, Base):
    __tablename__ = "subjects"

    # Unique across active and inactive rows; exact (case-sensitive) match
    description = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("description", name="uq_subjects_description"),
    )
