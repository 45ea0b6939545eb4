from .base import (
    CatalogError,
    DuplicateResource,
    ErrorKind,
    InvalidOperation,
    NotFound,
    ResourceInUse,
    ValidationFailure,
)
from .storage import (
    ForeignKeyViolation,
    StorageError,
    TransientReason,
    TransientStorageFailure,
    UniqueKeyViolation,
    storage_errors,
)

__all__ = [
    "CatalogError",
    "DuplicateResource",
    "ErrorKind",
    "InvalidOperation",
    "NotFound",
    "ResourceInUse",
    "ValidationFailure",
    "ForeignKeyViolation",
    "StorageError",
    "TransientReason",
    "TransientStorageFailure",
    "UniqueKeyViolation",
    "storage_errors",
]
