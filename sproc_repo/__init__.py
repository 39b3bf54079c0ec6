"""Generic stored-procedure repositories over DB-API drivers."""

from .config import RepositorySettings, get_settings, reset_settings
from .core import (
    AsyncDatabasePort,
    AsyncRepositoryPort,
    AsyncStoredProcedureRepository,
    DataclassProcedureContract,
    ParameterDirection,
    ProcedureCommand,
    ProcedureContract,
    ProcedureNames,
    ProcedureParameter,
    RepositoryError,
    RepositoryErrorKind,
)
from .ports import AsyncDatabase, PostgresDialect, ProcedureDialect, SQLServerDialect

__all__ = [
    "AsyncDatabase",
    "AsyncDatabasePort",
    "AsyncRepositoryPort",
    "AsyncStoredProcedureRepository",
    "DataclassProcedureContract",
    "ParameterDirection",
    "PostgresDialect",
    "ProcedureCommand",
    "ProcedureContract",
    "ProcedureDialect",
    "ProcedureNames",
    "ProcedureParameter",
    "RepositoryError",
    "RepositoryErrorKind",
    "RepositorySettings",
    "SQLServerDialect",
    "get_settings",
    "reset_settings",
]
