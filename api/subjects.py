from __future__ import annotations

from flask import Blueprint, request, jsonify

from api.dependencies import get_services
from models.schemas.subject import SubjectOutSchema

bp = Blueprint("subjects", __name__)

out_schema = SubjectOutSchema()
out_list_schema = SubjectOutSchema(many=True)


@bp.get("/subjects")
def list_subjects():
    """
    List all subjects, active and inactive
    ---
    tags: [Subjects]
    responses:
      200: { description: OK }
    """
    subjects = get_services().subjects.get_all()
    return jsonify({"data": out_list_schema.dump(subjects)})


@bp.get("/subjects/active")
def list_active_subjects():
    """
    List active subjects
    ---
    tags: [Subjects]
    responses:
      200: { description: OK }
    """
    subjects = get_services().subjects.get_active()
    return jsonify({"data": out_list_schema.dump(subjects)})


@bp.get("/subjects/<int:subject_id>")
def get_subject(subject_id: int):
    """
    Get a subject by id
    ---
    tags: [Subjects]
    parameters:
      - in: path
        name: subject_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    subject = get_services().subjects.get_by_id(subject_id)
    return jsonify({"data": out_schema.dump(subject)})


@bp.post("/subjects")
def create_subject():
    """
    Create a subject
    ---
    tags: [Subjects]
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [description]
          properties:
            description: { type: string, maxLength: 255 }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      409: { description: A subject with this description already exists }
    """
    subject = get_services().subjects.create(request.get_json(silent=True) or {})
    return jsonify({"data": out_schema.dump(subject)}), 201


@bp.put("/subjects/<int:subject_id>")
def update_subject(subject_id: int):
    """
    Replace a subject's description and active flag
    ---
    tags: [Subjects]
    parameters:
      - in: path
        name: subject_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [description]
          properties:
            description: { type: string, maxLength: 255 }
            active: { type: boolean, default: true }
    responses:
      200: { description: OK }
      400: { description: Validation error }
      404: { description: Not found }
      409: { description: Duplicate description }
    """
    subject = get_services().subjects.update(subject_id, request.get_json(silent=True) or {})
    return jsonify({"data": out_schema.dump(subject)})


@bp.delete("/subjects/<int:subject_id>")
def delete_subject(subject_id: int):
    """
    Delete a subject that no book references
    ---
    tags: [Subjects]
    parameters:
      - in: path
        name: subject_id
        type: integer
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
      409: { description: Books still reference this subject }
    """
    get_services().subjects.delete(subject_id)
    return jsonify({"data": {"id": subject_id, "deleted": True}})
