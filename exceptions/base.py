"""
Domain errors raised by the catalog services.

Every error carries an `ErrorKind` tag. The HTTP layer never inspects the
concrete class: it looks the kind up in a single outcome table
(see api/errors.py), so adding a kind without an outcome is caught by tests.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DUPLICATE_RESOURCE = "duplicate_resource"
    RESOURCE_IN_USE = "resource_in_use"
    NOT_FOUND = "not_found"
    INVALID_OPERATION = "invalid_operation"
    UNIQUE_KEY_VIOLATION = "unique_key_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    STORAGE_DEADLOCK = "storage_deadlock"
    STORAGE_TIMEOUT = "storage_timeout"
    UNCLASSIFIED = "unclassified"


class CatalogError(Exception):
    """
    Base for all typed catalog errors.

    - message: human-friendly text, safe to show to clients
    - kind: the tag used by the translation boundary
    """

    kind = ErrorKind.UNCLASSIFIED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any] | None:
        """Structured, client-safe context for the error body."""
        return None


class ValidationFailure(CatalogError):
    """Input failed schema-level validation. `messages` is keyed by field."""

    kind = ErrorKind.VALIDATION

    def __init__(self, messages: dict | list | str, message: str = "Invalid input"):
        super().__init__(message)
        self.messages = messages

    def details(self):
        return self.messages if isinstance(self.messages, dict) else {"_schema": self.messages}

    def field_messages(self) -> list[str]:
        """Flatten marshmallow-style nested messages into `field: message` lines."""
        return list(_flatten(self.messages))


def _flatten(messages, prefix: str = ""):
    if isinstance(messages, dict):
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            yield from _flatten(value, name)
    elif isinstance(messages, (list, tuple)):
        for value in messages:
            yield from _flatten(value, prefix)
    else:
        yield f"{prefix}: {messages}" if prefix else str(messages)


class DuplicateResource(CatalogError):
    kind = ErrorKind.DUPLICATE_RESOURCE

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(f"{resource_type} with {field} '{value}' already exists.")
        self.resource_type = resource_type
        self.field = field
        self.value = value

    def details(self):
        return {"resource_type": self.resource_type, "field": self.field, "value": self.value}


class ResourceInUse(CatalogError):
    kind = ErrorKind.RESOURCE_IN_USE

    def __init__(self, resource_type: str, resource_id: int, resource_name: str,
                 dependent_type: str, dependent_count: int):
        super().__init__(
            f"Cannot delete {resource_type} '{resource_name}' (id {resource_id}): "
            f"{dependent_count} {dependent_type}(s) still reference it. "
            f"Remove or reassign them first."
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.resource_name = resource_name
        self.dependent_type = dependent_type
        self.dependent_count = dependent_count

    def details(self):
        return {
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "resource_name": self.resource_name,
            "dependent_type": self.dependent_type,
            "dependent_count": self.dependent_count,
        }


class NotFound(CatalogError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(f"{resource_type} with id {resource_id} not found.")
        self.resource_type = resource_type
        self.resource_id = resource_id

    def details(self):
        return {"resource_type": self.resource_type, "resource_id": self.resource_id}


class InvalidOperation(CatalogError):
    kind = ErrorKind.INVALID_OPERATION

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


__all__ = [
    "ErrorKind",
    "CatalogError",
    "ValidationFailure",
    "DuplicateResource",
    "ResourceInUse",
    "NotFound",
    "InvalidOperation",
]
