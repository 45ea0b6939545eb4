from __future__ import annotations

from flask import Blueprint, request, jsonify

from api.dependencies import get_services
from models.schemas.author import AuthorOutSchema

bp = Blueprint("authors", __name__)

out_schema = AuthorOutSchema()
out_list_schema = AuthorOutSchema(many=True)


@bp.get("/authors")
def list_authors():
    """
    List all authors, active and inactive
    ---
    tags: [Authors]
    responses:
      200: { description: OK }
    """
    authors = get_services().authors.get_all()
    return jsonify({"data": out_list_schema.dump(authors)})


@bp.get("/authors/active")
def list_active_authors():
    """
    List active authors
    ---
    tags: [Authors]
    responses:
      200: { description: OK }
    """
    authors = get_services().authors.get_active()
    return jsonify({"data": out_list_schema.dump(authors)})


@bp.get("/authors/<int:author_id>")
def get_author(author_id: int):
    """
    Get an author by id
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    author = get_services().authors.get_by_id(author_id)
    return jsonify({"data": out_schema.dump(author)})


@bp.post("/authors")
def create_author():
    """
    Create an author
    ---
    tags: [Authors]
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: { type: string, maxLength: 255 }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      409: { description: An author with this name already exists }
    """
    author = get_services().authors.create(request.get_json(silent=True) or {})
    return jsonify({"data": out_schema.dump(author)}), 201


@bp.put("/authors/<int:author_id>")
def update_author(author_id: int):
    """
    Replace an author's name and active flag
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: { type: string, maxLength: 255 }
            active: { type: boolean, default: true }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      404: { description: Not found }
      409: { description: Duplicate name }
    """
    author = get_services().authors.update(author_id, request.get_json(silent=True) or {})
    return jsonify({"data": out_schema.dump(author)})


@bp.delete("/authors/<int:author_id>")
def delete_author(author_id: int):
    """
    Delete an author who is not linked to any book
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
      409: { description: Books are still linked to this author }
    """
    get_services().authors.delete(author_id)
    return jsonify({"data": {"id": author_id, "deleted": True}})
