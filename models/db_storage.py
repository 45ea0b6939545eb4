from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from exceptions.storage import storage_errors
from models.base_model import Base

# Register every model with Base.metadata before create_all()
from models.subject import Subject  # noqa: F401
from models.author import Author  # noqa: F401
from models.payment_method import PaymentMethod  # noqa: F401
from models.book import Book, BookAuthor, BookPrice  # noqa: F401


def _is_sqlite_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class DBStorage:
    """
    Owns the engine and the thread-local session registry.

    One instance is built by the app factory and handed to every repository;
    nothing else holds a session.
    """

    __engine = None
    __session = None

    def __init__(self, database_url: str, echo: bool = False):
        """Initialize engine for the given URL"""
        if _is_sqlite_memory(database_url):
            # One shared connection so every session sees the same in-memory DB
            self.__engine = create_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.__engine = create_engine(database_url, echo=echo, pool_pre_ping=True)

        if self.__engine.url.get_backend_name() == "sqlite":
            # SQLite only enforces ON DELETE RESTRICT/CASCADE with this pragma
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    @property
    def engine(self):
        return self.__engine

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def get_session(self):
        return self.__session

    @contextmanager
    def transaction(self, model_name: str | None = None):
        """
        Unit of work: everything done on the session inside the block is
        committed together, or rolled back together on any exception.

            with storage.transaction("Book"):
                books.add(book)
                links.add(link)
        """
        session = self.__session
        try:
            yield session
            with storage_errors(session, model_name):
                session.commit()
        except Exception:
            session.rollback()
            raise

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    def dispose(self):
        self.close()
        self.__engine.dispose()
