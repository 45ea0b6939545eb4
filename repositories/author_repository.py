from __future__ import annotations

from exceptions.storage import storage_errors
from models.author import Author


class AuthorRepository:
    """Storage access for the authors table."""

    model_name = "Author"

    def __init__(self, storage):
        self._storage = storage

    @property
    def session(self):
        return self._storage.get_session()

    def get_by_id(self, author_id: int) -> Author | None:
        return self.session.get(Author, author_id)

    def get_all(self) -> list[Author]:
        return self.session.query(Author).order_by(Author.name.asc()).all()

    def get_by_active(self, active: bool = True) -> list[Author]:
        return (
            self.session.query(Author)
            .filter(Author.active.is_(active))
            .order_by(Author.name.asc())
            .all()
        )

    def get_by_name(self, name: str) -> Author | None:
        return self.session.query(Author).filter(Author.name == name).first()

    def insert(self, author: Author) -> int:
        with storage_errors(self.session, self.model_name):
            self.session.add(author)
            self.session.flush()
        return author.id

    def update(self, author: Author) -> None:
        with storage_errors(self.session, self.model_name):
            self.session.flush()

    def delete(self, author_id: int) -> bool:
        with storage_errors(self.session, self.model_name):
            deleted = (
                self.session.query(Author)
                .filter(Author.id == author_id)
                .delete(synchronize_session="fetch")
            )
        return deleted > 0
