from __future__ import annotations

from typing import Any, Mapping

from marshmallow import Schema, ValidationError

from exceptions import ValidationFailure


def load_or_fail(schema: Schema, payload: Mapping[str, Any] | None) -> dict:
    """Run `schema.load` and re-raise marshmallow errors as ValidationFailure."""
    try:
        return schema.load(payload if payload is not None else {})
    except ValidationError as err:
        raise ValidationFailure(err.messages) from err
