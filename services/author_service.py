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
from models.author import Author
from models.schemas.author import AuthorCreateSchema, AuthorUpdateSchema
from services.validation import load_or_fail

logger = logging.getLogger(__name__)


class AuthorService:
    """Author lifecycle. Dependent books are found through the book/author links."""

    resource_type = "Author"

    def __init__(self, authors, books, storage):
        self._authors = authors
        self._books = books
        self._storage = storage
        self._create_schema = AuthorCreateSchema()
        self._update_schema = AuthorUpdateSchema()

    def get_by_id(self, author_id: int) -> Author:
        author = self._authors.get_by_id(author_id)
        if author is None:
            raise NotFound(self.resource_type, author_id)
        return author

    def get_all(self) -> list[Author]:
        return self._authors.get_all()

    def get_active(self) -> list[Author]:
        return self._authors.get_by_active(True)

    def create(self, payload: Mapping[str, Any]) -> Author:
        data = load_or_fail(self._create_schema, payload)
        name = data["name"]

        with self._storage.transaction(self.resource_type):
            if self._authors.get_by_name(name) is not None:
                logger.warning("Rejected duplicate author name=%r", name)
                raise DuplicateResource(self.resource_type, "name", name)

            author = Author(name=name, active=True)
            try:
                self._authors.insert(author)
            except UniqueKeyViolation as exc:
                raise DuplicateResource(self.resource_type, "name", name) from exc

        logger.info("Author created id=%s name=%r", author.id, name)
        return author

    def update(self, author_id: int, payload: Mapping[str, Any]) -> Author:
        data = load_or_fail(self._update_schema, payload)
        name = data["name"]

        with self._storage.transaction(self.resource_type):
            author = self.get_by_id(author_id)

            if author.name != name:
                existing = self._authors.get_by_name(name)
                if existing is not None and existing.id != author_id:
                    logger.warning("Rejected author rename to duplicate id=%s name=%r", author_id, name)
                    raise DuplicateResource(self.resource_type, "name", name)

            author.name = name
            author.active = data["active"]
            try:
                self._authors.update(author)
            except UniqueKeyViolation as exc:
                raise DuplicateResource(self.resource_type, "name", name) from exc

        logger.info("Author updated id=%s", author_id)
        return author

    def delete(self, author_id: int) -> None:
        author = self.get_by_id(author_id)
        name = author.name

        dependents = self._books.count_by_author(author_id)
        if dependents:
            logger.warning("Rejected delete of author id=%s linked to %d book(s)", author_id, dependents)
            raise ResourceInUse(self.resource_type, author_id, name, "Book", dependents)

        try:
            with self._storage.transaction(self.resource_type):
                self._authors.delete(author_id)
        except ForeignKeyViolation as exc:
            dependents = self._books.count_by_author(author_id)
            raise ResourceInUse(self.resource_type, author_id, name, "Book", dependents) from exc

        logger.info("Author deleted id=%s", author_id)
