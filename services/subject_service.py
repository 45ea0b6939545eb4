from __future__ import annotations

import logging
from typing import Any, Mapping

from exceptions import (
    DuplicateResource,
    ForeignKeyViolation,
    NotFound,
    ResourceInUse,
    UniqueKeyViolation,
)
from models.schemas.subject import SubjectCreateSchema, SubjectUpdateSchema
from models.subject import Subject
from services.validation import load_or_fail

logger = logging.getLogger(__name__)


class SubjectService:
    """Create/update/delete lifecycle for subjects, guarded by uniqueness and dependency checks."""

    resource_type = "Subject"

    def __init__(self, subjects, books, storage):
        self._subjects = subjects
        self._books = books
        self._storage = storage
        self._create_schema = SubjectCreateSchema()
        self._update_schema = SubjectUpdateSchema()

    def get_by_id(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(subject_id)
        if subject is None:
            raise NotFound(self.resource_type, subject_id)
        return subject

    def get_all(self) -> list[Subject]:
        return self._subjects.get_all()

    def get_active(self) -> list[Subject]:
        return self._subjects.get_by_active(True)

    def create(self, payload: Mapping[str, Any]) -> Subject:
        data = load_or_fail(self._create_schema, payload)
        description = data["description"]

        with self._storage.transaction(self.resource_type):
            if self._subjects.get_by_description(description) is not None:
                logger.warning("Rejected duplicate subject description=%r", description)
                raise DuplicateResource(self.resource_type, "description", description)

            subject = Subject(description=description, active=True)
            try:
                self._subjects.insert(subject)
            except UniqueKeyViolation as exc:
                # a concurrent create won the race after our pre-check
                raise DuplicateResource(self.resource_type, "description", description) from exc

        logger.info("Subject created id=%s description=%r", subject.id, description)
        return subject

    def update(self, subject_id: int, payload: Mapping[str, Any]) -> Subject:
        data = load_or_fail(self._update_schema, payload)
        description = data["description"]

        with self._storage.transaction(self.resource_type):
            subject = self.get_by_id(subject_id)

            if subject.description != description:
                existing = self._subjects.get_by_description(description)
                if existing is not None and existing.id != subject_id:
                    logger.warning("Rejected subject rename to duplicate id=%s description=%r",
                                   subject_id, description)
                    raise DuplicateResource(self.resource_type, "description", description)

            subject.description = description
            subject.active = data["active"]
            try:
                self._subjects.update(subject)
            except UniqueKeyViolation as exc:
                raise DuplicateResource(self.resource_type, "description", description) from exc

        logger.info("Subject updated id=%s", subject_id)
        return subject

    def delete(self, subject_id: int) -> None:
        subject = self.get_by_id(subject_id)
        name = subject.description

        dependents = self._books.count_by_subject(subject_id)
        if dependents:
            logger.warning("Rejected delete of subject id=%s with %d book(s)", subject_id, dependents)
            raise ResourceInUse(self.resource_type, subject_id, name, "Book", dependents)

        try:
            with self._storage.transaction(self.resource_type):
                self._subjects.delete(subject_id)
        except ForeignKeyViolation as exc:
            # a book was attached between the count and the delete
            dependents = self._books.count_by_subject(subject_id)
            raise ResourceInUse(self.resource_type, subject_id, name, "Book", dependents) from exc

        logger.info("Subject deleted id=%s", subject_id)
