from __future__ import annotations

import logging
from typing import Any, Mapping

from marshmallow import EXCLUDE

from models.schemas.report import (
    AuthorsByBookQuerySchema,
    BooksBySubjectQuerySchema,
    BooksWithPricesQuerySchema,
)
from services.validation import load_or_fail

logger = logging.getLogger(__name__)


class ReportService:
    """Validates report filters and hands them to the report queries."""

    def __init__(self, reports):
        self._reports = reports
        self._books_by_subject_schema = BooksBySubjectQuerySchema(unknown=EXCLUDE)
        self._authors_by_book_schema = AuthorsByBookQuerySchema(unknown=EXCLUDE)
        self._books_with_prices_schema = BooksWithPricesQuerySchema(unknown=EXCLUDE)

    def books_by_subject(self, filters: Mapping[str, Any] | None = None) -> list[dict]:
        params = load_or_fail(self._books_by_subject_schema, filters)
        rows = self._reports.books_by_subject(**params)
        logger.debug("books-by-subject report filters=%s rows=%d", params, len(rows))
        return rows

    def authors_by_book(self, filters: Mapping[str, Any] | None = None) -> list[dict]:
        params = load_or_fail(self._authors_by_book_schema, filters)
        rows = self._reports.authors_by_book(**params)
        logger.debug("authors-by-book report filters=%s rows=%d", params, len(rows))
        return rows

    def books_with_prices(self, filters: Mapping[str, Any] | None = None) -> list[dict]:
        params = load_or_fail(self._books_with_prices_schema, filters)
        rows = self._reports.books_with_prices(**params)
        logger.debug("books-with-prices report filters=%s rows=%d", params, len(rows))
        return rows
