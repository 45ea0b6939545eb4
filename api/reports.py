"""
Report projections as JSON.

Filters come from the query string and are validated by the report service;
rendering to document formats is left to the consumer.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from api.dependencies import get_services
from models.schemas.report import (
    AuthorsByBookRowSchema,
    BooksBySubjectRowSchema,
    BooksWithPricesRowSchema,
)

bp = Blueprint("reports", __name__)

books_by_subject_rows = BooksBySubjectRowSchema(many=True)
authors_by_book_rows = AuthorsByBookRowSchema(many=True)
books_with_prices_rows = BooksWithPricesRowSchema(many=True)


@bp.get("/reports/books-by-subject")
def books_by_subject():
    """
    Books grouped by subject, authors joined in author order
    ---
    tags: [Reports]
    parameters:
      - { in: query, name: subject_id, type: integer }
      - { in: query, name: year_from, type: integer }
      - { in: query, name: year_to, type: integer }
      - { in: query, name: active_only, type: boolean, default: true }
    responses:
      200: { description: OK }
      400: { description: Invalid filter }
    """
    rows = get_services().reports.books_by_subject(request.args)
    return jsonify({"data": books_by_subject_rows.dump(rows)})


@bp.get("/reports/authors-by-book")
def authors_by_book():
    """
    Authors with the books they are linked to (authors without books included)
    ---
    tags: [Reports]
    parameters:
      - { in: query, name: author_id, type: integer }
    responses:
      200: { description: OK }
      400: { description: Invalid filter }
    """
    rows = get_services().reports.authors_by_book(request.args)
    return jsonify({"data": authors_by_book_rows.dump(rows)})


@bp.get("/reports/books-with-prices")
def books_with_prices():
    """
    One row per book and payment method price
    ---
    tags: [Reports]
    parameters:
      - { in: query, name: min_value, type: number }
      - { in: query, name: max_value, type: number }
      - { in: query, name: payment_method_id, type: integer }
      - { in: query, name: active_only, type: boolean, default: true }
    responses:
      200: { description: OK }
      400: { description: Invalid filter }
    """
    rows = get_services().reports.books_with_prices(request.args)
    return jsonify({"data": books_with_prices_rows.dump(rows)})
