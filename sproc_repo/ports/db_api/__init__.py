"""DB-API adapter, dialect, and driver exports."""

from .async_database import AsyncDatabase
from .dialects import PostgresDialect, ProcedureDialect, SQLServerDialect, get_dialect
from .drivers import resolve_connect

__all__ = [
    "AsyncDatabase",
    "PostgresDialect",
    "ProcedureDialect",
    "SQLServerDialect",
    "get_dialect",
    "resolve_connect",
]
