"""Uniform fault type raised by repository operations."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Optional

_DBAPI_ERROR_NAMES = frozenset({"Error", "DatabaseError", "InterfaceError"})
# sqlite3 is the one DB-API driver in the standard library.
_STDLIB_DRIVERS = frozenset({"sqlite3"})


class RepositoryErrorKind(str, Enum):
    """Broad origin of a repository fault."""

    DATABASE = "database"
    UNEXPECTED = "unexpected"


class RepositoryError(Exception):
    """Raised when a repository operation fails to execute.

    Business outcomes such as "not found" or a non-success return code are
    ordinary return values; this error is only raised for faults while
    talking to the database or mapping its results. The original exception
    is always chained as `__cause__`.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: RepositoryErrorKind = RepositoryErrorKind.UNEXPECTED,
        operation: Optional[str] = None,
        entity_id: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.operation = operation
        self.entity_id = entity_id

    @classmethod
    def wrap(
        cls,
        exc: BaseException,
        *,
        operation: str,
        action: str,
        entity_id: Optional[int] = None,
    ) -> RepositoryError:
        """Build the uniform error for `exc` raised during `action`.

        `action` reads like "deleting entity with ID 7" and is embedded in
        the message. Callers raise the result with `from exc`.
        """

        kind = classify_error(exc)
        if kind is RepositoryErrorKind.DATABASE:
            message = f"Database error while {action}: {exc}"
        else:
            message = f"Unexpected error while {action}."
        return cls(message, kind=kind, operation=operation, entity_id=entity_id)


def is_dbapi_error(exc: BaseException) -> bool:
    """Return whether `exc` belongs to a PEP 249 driver error hierarchy.

    DB-API drivers define their own `Error`/`DatabaseError`/`InterfaceError`
    classes. Standard-library classes sharing those names, such as
    `binascii.Error`, are ignored except for `sqlite3`.
    """

    for klass in type(exc).__mro__:
        if klass.__name__ in _DBAPI_ERROR_NAMES and _is_driver_module(klass.__module__):
            return True
    return False


def _is_driver_module(module: str) -> bool:
    top_level = module.split(".", 1)[0]
    if top_level in _STDLIB_DRIVERS:
        return True
    return top_level not in sys.stdlib_module_names


def classify_error(exc: BaseException) -> RepositoryErrorKind:
    if is_dbapi_error(exc):
        return RepositoryErrorKind.DATABASE
    return RepositoryErrorKind.UNEXPECTED
