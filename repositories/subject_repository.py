from __future__ import annotations

from exceptions.storage import storage_errors
from models.subject import Subject


class SubjectRepository:
    """Storage access for the subjects table."""

    model_name = "Subject"

    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def get_by_id(self, subject_id: int) -> Subject | None:
        return self.session.get(Subject, subject_id)

    def get_all(self) -> list[Subject]:
        return self.session.query(Subject).order_by(Subject.description.asc()).all()

    def get_by_active(self, active: bool = True) -> list[Subject]:
        return (
            self.session.query(Subject)
            .filter(Subject.active.is_(active))
            .order_by(Subject.description.asc())
            .all()
        )

    def get_by_description(self, description: str) -> Subject | None:
        return self.session.query(Subject).filter(Subject.description == description).first()

    def insert(self, subject: Subject) -> int:
        with storage_errors(self.session, self.model_name):
            self.session.add(subject)
            self.session.flush()
        return subject.id

    def update(self, subject: Subject) -> None:
        with storage_errors(self.session, self.model_name):
            self.session.flush()

    def delete(self, subject_id: int) -> bool:
        with storage_errors(self.session, self.model_name):
            deleted = (
                self.session.query(Subject)
                .filter(Subject.id == subject_id)
                .delete(synchronize_session="fetch")
            )
        return deleted > 0
