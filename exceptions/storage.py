"""
Storage-level errors and the classifier that produces them.

Repositories run their statements inside `storage_errors(session, model_name)`.
Low-level SQLAlchemy failures are rolled back and re-raised as one of:

| Raw failure                                  | Raised as                          |
| -------------------------------------------- | ---------------------------------- |
| IntegrityError, unique violation             | UniqueKeyViolation                 |
| IntegrityError, foreign key violation        | ForeignKeyViolation                |
| OperationalError, deadlock / serialization   | TransientStorageFailure("deadlock") |
| OperationalError, lock wait / statement cap  | TransientStorageFailure("timeout")  |
| pool TimeoutError                            | TransientStorageFailure("timeout")  |

Anything else (NOT NULL, CHECK, connection loss, ...) propagates untouched and
ends up as an unclassified 500 at the HTTP boundary.

Services catch UniqueKeyViolation / ForeignKeyViolation where a concurrent
writer can slip past their pre-check and re-raise the friendlier domain error.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from enum import Enum
from typing import Iterable

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from .base import CatalogError, ErrorKind

logger = logging.getLogger(__name__)


class StorageError(CatalogError):
    """Base for failures reported by the relational store."""


class UniqueKeyViolation(StorageError):
    kind = ErrorKind.UNIQUE_KEY_VIOLATION

    def __init__(self, model_name: str | None = None, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None):
        self.model_name = model_name or "Record"
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        if self.fields:
            message = f"{self.model_name} already exists for field(s): {', '.join(self.fields)}."
        else:
            message = f"{self.model_name} already exists."
        super().__init__(message)

    def details(self):
        # constraint names stay in the logs
        return {"resource_type": self.model_name, "fields": self.fields}


class ForeignKeyViolation(StorageError):
    kind = ErrorKind.FOREIGN_KEY_VIOLATION

    def __init__(self, model_name: str | None = None, *, constraint: str | None = None):
        self.model_name = model_name or "Record"
        self.constraint = constraint
        super().__init__(f"{self.model_name} is referenced by, or references, a missing related record.")

    def details(self):
        return {"resource_type": self.model_name}


class TransientReason(str, Enum):
    DEADLOCK = "deadlock"
    TIMEOUT = "timeout"


class TransientStorageFailure(StorageError):
    """Deadlock or timeout. Reported to the caller with a retry hint; never retried here."""

    def __init__(self, reason: TransientReason, model_name: str | None = None):
        self.reason = TransientReason(reason)
        self.model_name = model_name
        if self.reason is TransientReason.DEADLOCK:
            super().__init__("The operation was cancelled by a storage conflict. Please try again.")
        else:
            super().__init__("The operation exceeded the storage time limit. Please try again.")

    @property
    def kind(self):
        if self.reason is TransientReason.DEADLOCK:
            return ErrorKind.STORAGE_DEADLOCK
        return ErrorKind.STORAGE_TIMEOUT


# =================================================================================================================
# Classification
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_DEADLOCK_CODES = {"40P01", "40001"}
PG_TIMEOUT_CODES = {"57014", "55P03"}

# MySQL / MariaDB server error numbers
MYSQL_DEADLOCK_CODES = {1213}
MYSQL_TIMEOUT_CODES = {1205, 3024}


def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _sqlstate(orig) -> str | None:
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _mysql_errno(orig) -> int | None:
    args = getattr(orig, "args", None) or ()
    if args and isinstance(args[0], int):
        return args[0]
    return None


def _constraint_name(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None) if diag else None


def classify_integrity_error(exc: IntegrityError) -> tuple[type[StorageError] | None, str | None]:
    """
    Classify an IntegrityError as a unique or foreign-key violation.

    Returns (exception class or None when unrecognised, constraint name if the driver exposes it).
    """
    orig = exc.orig
    code = _sqlstate(orig)
    if code == PG_UNIQUE_VIOLATION:
        return UniqueKeyViolation, _constraint_name(orig)
    if code == PG_FOREIGN_KEY_VIOLATION:
        return ForeignKeyViolation, _constraint_name(orig)

    msg = str(orig if orig is not None else exc).lower()
    if _match_any(msg, ["unique constraint", "unique failed", "unique violation", "duplicate entry", "duplicate key"]):
        return UniqueKeyViolation, None
    if _match_any(msg, ["foreign key constraint", "foreign key", "is not present in table"]):
        return ForeignKeyViolation, None

    logger.warning("Unclassified integrity error", extra={"message_snippet": msg[:200]})
    return None, None


def classify_transient_error(exc: Exception) -> TransientReason | None:
    """Return the transient reason for deadlocks and timeouts, None for anything else."""
    if isinstance(exc, PoolTimeoutError):
        return TransientReason.TIMEOUT

    orig = getattr(exc, "orig", None)
    code = _sqlstate(orig)
    if code in PG_DEADLOCK_CODES:
        return TransientReason.DEADLOCK
    if code in PG_TIMEOUT_CODES:
        return TransientReason.TIMEOUT

    errno = _mysql_errno(orig)
    if errno in MYSQL_DEADLOCK_CODES:
        return TransientReason.DEADLOCK
    if errno in MYSQL_TIMEOUT_CODES:
        return TransientReason.TIMEOUT

    msg = str(orig if orig is not None else exc).lower()
    if "deadlock" in msg:
        return TransientReason.DEADLOCK
    if _match_any(msg, ["database is locked", "lock wait timeout", "statement timeout", "timed out"]):
        return TransientReason.TIMEOUT
    return None


# -----------------------
# Column extraction helpers
# -----------------------

def extract_columns(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the offending columns from the driver message:
      - SQLite:   'UNIQUE constraint failed: subjects.description'
      - Postgres: 'DETAIL:  Key (description)=(Fiction) already exists.'
    """
    msg = str(exc.orig if exc.orig is not None else exc)

    m = re.search(r"UNIQUE constraint failed: (?P<cols>.+)$", msg, flags=re.IGNORECASE | re.MULTILINE)
    if m:
        return [c.split(".")[-1].strip() for c in re.split(r",\s*", m.group("cols"))]

    m = re.search(r"key \((?P<cols>[^)]+)\)=", msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _rollback(session, model_name: str | None) -> None:
    try:
        session.rollback()
    except Exception:
        logger.exception("Failed to rollback session after storage error", extra={"model": model_name})


@contextmanager
def storage_errors(session, model_name: str | None = None):
    """
    Usage:
        with storage_errors(session, "Subject"):
            session.add(subject)
            session.flush()

    Rolls the session back and raises a typed storage error for the failures
    listed in the module docstring; anything else is re-raised as is.
    """
    try:
        yield
    except IntegrityError as exc:
        _rollback(session, model_name)
        exc_cls, constraint = classify_integrity_error(exc)
        if exc_cls is UniqueKeyViolation:
            columns = extract_columns(exc)
            logger.info("storage.unique_violation", extra={"model": model_name, "fields": columns})
            raise UniqueKeyViolation(model_name, fields=columns, constraint=constraint) from exc
        if exc_cls is ForeignKeyViolation:
            logger.info("storage.foreign_key_violation", extra={"model": model_name})
            raise ForeignKeyViolation(model_name, constraint=constraint) from exc
        raise
    except (OperationalError, PoolTimeoutError) as exc:
        _rollback(session, model_name)
        reason = classify_transient_error(exc)
        if reason is None:
            raise
        logger.warning("storage.transient_failure", extra={"model": model_name, "reason": reason.value})
        raise TransientStorageFailure(reason, model_name) from exc
