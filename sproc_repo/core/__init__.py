"""Public core API for procedure contracts and the stored-procedure repository."""

from .command import RETURN_VALUE_NAME, ParameterDirection, ProcedureCommand, ProcedureParameter
from .contracts import AsyncDatabasePort, AsyncRepositoryPort, DialectPort, ProcedureContract
from .dataclass_contract import DataclassProcedureContract, ProcedureNames
from .exceptions import RepositoryError, RepositoryErrorKind, classify_error, is_dbapi_error
from .outcomes import coerce_identity, is_success_code, new_identity
from .repository_async import AsyncStoredProcedureRepository

__all__ = [
    "RETURN_VALUE_NAME",
    "ParameterDirection",
    "ProcedureCommand",
    "ProcedureParameter",
    "ProcedureContract",
    "AsyncRepositoryPort",
    "AsyncDatabasePort",
    "DialectPort",
    "DataclassProcedureContract",
    "ProcedureNames",
    "RepositoryError",
    "RepositoryErrorKind",
    "classify_error",
    "is_dbapi_error",
    "coerce_identity",
    "is_success_code",
    "new_identity",
    "AsyncStoredProcedureRepository",
]
