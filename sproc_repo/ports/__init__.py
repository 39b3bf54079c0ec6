"""Public port exports for concrete adapter implementations."""

from .db_api import AsyncDatabase, PostgresDialect, ProcedureDialect, SQLServerDialect

__all__ = [
    "AsyncDatabase",
    "ProcedureDialect",
    "SQLServerDialect",
    "PostgresDialect",
]
