"""
Core pytest configuration for the test suite.

Every test gets its own in-memory SQLite database (StaticPool, foreign keys
on), seeded with the default payment methods. `services` talks to the same
database as the Flask `client`, so a test can arrange data through the
services and assert through HTTP, or the other way round.
"""

from __future__ import annotations

import logging

# Keep SQLAlchemy quiet during collection and runs
for _name in ("sqlalchemy", "sqlalchemy.engine", "sqlalchemy.engine.Engine"):
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest

from api import create_app
from models import DBStorage
from models.payment_method import PaymentMethod


@pytest.fixture
def storage():
    """A fresh in-memory database for one test."""
    db = DBStorage("sqlite://")
    db.reload()
    yield db
    db.dispose()


@pytest.fixture
def app(storage):
    """Flask app in testing mode bound to the test database (payment methods seeded)."""
    app = create_app("testing", storage=storage)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    """CatalogServices built by the app factory; usable without a request context."""
    return app.extensions["catalog"]


@pytest.fixture
def payment_methods(services) -> dict[str, PaymentMethod]:
    """Seeded payment methods keyed by name."""
    return {method.name: method for method in services.payment_methods.get_all()}


@pytest.fixture
def make_subject(services):
    counter = {"n": 0}

    def _make(description: str | None = None, active: bool = True):
        counter["n"] += 1
        subject = services.subjects.create({"description": description or f"Subject {counter['n']}"})
        if not active:
            subject = services.subjects.update(subject.id, {"description": subject.description, "active": False})
        return subject

    return _make


@pytest.fixture
def make_author(services):
    counter = {"n": 0}

    def _make(name: str | None = None):
        counter["n"] += 1
        return services.authors.create({"name": name or f"Author {counter['n']}"})

    return _make


@pytest.fixture
def book_payload(make_subject, make_author, payment_methods):
    """
    Build a valid book payload. By default a new subject and one new author are
    created; pass ids explicitly to reuse existing rows.
    """

    def _payload(**overrides):
        payload = {
            "title": "The Pragmatic Programmer",
            "publisher": "Addison-Wesley",
            "publication_year": 1999,
            "isbn": None,
        }
        if "subject_id" not in overrides:
            payload["subject_id"] = make_subject().id
        if "author_ids" not in overrides:
            payload["author_ids"] = [make_author().id]
        if "prices" not in overrides:
            payload["prices"] = [{"payment_method_id": payment_methods["Cash"].id, "value": "45.99"}]
        payload.update(overrides)
        return payload

    return _payload
