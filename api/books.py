from __future__ import annotations

from flask import Blueprint, request, jsonify
from marshmallow import EXCLUDE

from api.dependencies import get_services
from models.schemas.book import BookListQuerySchema, BookOutSchema

bp = Blueprint("books", __name__)

# Schemas
book_out_schema = BookOutSchema()
books_out_schema = BookOutSchema(many=True)
list_query_schema = BookListQuerySchema(unknown=EXCLUDE)


@bp.get("/books")
def list_books():
    """
    List books with subject, authors (in order) and prices resolved
    ---
    tags: [Books]
    parameters:
      - in: query
        name: subject_id
        type: integer
        description: Only books filed under this subject
      - in: query
        name: author_id
        type: integer
        description: Only books linked to this author
    responses:
      200: { description: OK }
      400: { description: Invalid filter }
    """
    filters = list_query_schema.load(request.args)
    subject_id, author_id = filters["subject_id"], filters["author_id"]
    books_service = get_services().books

    if subject_id is not None:
        books = books_service.get_by_subject(subject_id)
        if author_id is not None:
            books = [b for b in books if any(a.author_id == author_id for a in b.authors)]
    elif author_id is not None:
        books = books_service.get_by_author(author_id)
    else:
        books = books_service.get_all()
    return jsonify({"data": books_out_schema.dump(books)})


@bp.get("/books/active")
def list_active_books():
    """
    List active books
    ---
    tags: [Books]
    responses:
      200: { description: OK }
    """
    books = get_services().books.get_by_active(True)
    return jsonify({"data": books_out_schema.dump(books)})


@bp.get("/books/inactive")
def list_inactive_books():
    """
    List inactive books
    ---
    tags: [Books]
    responses:
      200: { description: OK }
    """
    books = get_services().books.get_by_active(False)
    return jsonify({"data": books_out_schema.dump(books)})


@bp.get("/books/<int:book_id>")
def get_book(book_id: int):
    """
    Get a book by id
    ---
    tags: [Books]
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    book = get_services().books.get_by_id(book_id)
    return jsonify({"data": book_out_schema.dump(book)})


@bp.post("/books")
def create_book():
    """
    Create a book with its ordered authors and prices
    ---
    tags: [Books]
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, subject_id, author_ids, prices]
          properties:
            title: { type: string, maxLength: 255 }
            publisher: { type: string, maxLength: 255 }
            publication_year: { type: integer, minimum: 1000 }
            isbn:
              type: string
              description: "13 digits, or 3 digits + '-' + 10 digits + digit or X"
              example: "978-03064061570"
            subject_id: { type: integer, minimum: 1 }
            author_ids:
              type: array
              minItems: 1
              description: Author order follows list position
              items: { type: integer, minimum: 1 }
            prices:
              type: array
              minItems: 1
              items:
                type: object
                required: [payment_method_id, value]
                properties:
                  payment_method_id: { type: integer, minimum: 1 }
                  value: { type: number, example: 45.99 }
    responses:
      201: { description: Created }
      400: { description: Validation error or duplicate author/payment method in the request }
      404: { description: Referenced subject, author or payment method not found }
      409: { description: ISBN already registered }
    """
    book = get_services().books.create(request.get_json(silent=True) or {})
    return jsonify({"data": book_out_schema.dump(book)}), 201


@bp.put("/books/<int:book_id>")
def update_book(book_id: int):
    """
    Replace a book, its author list and its prices
    ---
    tags: [Books]
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, subject_id, author_ids, prices]
          properties:
            title: { type: string, maxLength: 255 }
            publisher: { type: string, maxLength: 255 }
            publication_year: { type: integer, minimum: 1000 }
            isbn: { type: string }
            subject_id: { type: integer, minimum: 1 }
            author_ids:
              type: array
              minItems: 1
              items: { type: integer, minimum: 1 }
            prices:
              type: array
              minItems: 1
              items:
                type: object
                properties:
                  payment_method_id: { type: integer, minimum: 1 }
                  value: { type: number }
            active: { type: boolean, default: true }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      404: { description: Book or a referenced record not found }
      409: { description: ISBN already registered to another book }
    """
    book = get_services().books.update(book_id, request.get_json(silent=True) or {})
    return jsonify({"data": book_out_schema.dump(book)})


@bp.delete("/books/<int:book_id>")
def delete_book(book_id: int):
    """
    Delete a book (author links and prices go with it)
    ---
    tags: [Books]
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    get_services().books.delete(book_id)
    return jsonify({"data": {"id": book_id, "deleted": True}})
