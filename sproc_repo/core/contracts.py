"""Core port contracts used by adapters and the repository."""

from __future__ import annotations

from typing import List, Optional, Protocol, TypeVar

from .command import ProcedureCommand
from .types import CompiledCall, MaybeRow, RowMapping

T = TypeVar("T")


class ProcedureContract(Protocol[T]):
    """Entity-specific procedure names, parameter names, and bind/map hooks.

    One instance exists per entity type and is shared read-only across
    concurrent calls. Parameter names carry no driver prefix.
    """

    @property
    def id_parameter_name(self) -> str: ...

    @property
    def output_id_parameter_name(self) -> str: ...

    @property
    def get_by_id_procedure(self) -> str: ...

    @property
    def get_all_procedure(self) -> str: ...

    @property
    def insert_procedure(self) -> str: ...

    @property
    def update_procedure(self) -> str: ...

    @property
    def delete_procedure(self) -> str: ...

    @property
    def is_exists_by_id_procedure(self) -> str: ...

    def bind_insert_parameters(self, command: ProcedureCommand, entity: T) -> None:
        """Bind insert inputs and register the output id parameter."""
        ...

    def bind_update_parameters(self, command: ProcedureCommand, entity: T) -> None:
        """Bind update inputs, including the entity's own id."""
        ...

    def map_row(self, row: RowMapping) -> T: ...


class AsyncRepositoryPort(Protocol[T]):
    """Async CRUD surface exposed by stored-procedure repositories."""

    async def get_by_id(self, entity_id: int) -> Optional[T]: ...

    async def get_all(self) -> List[T]: ...

    async def insert(self, entity: T) -> Optional[T]: ...

    async def update(self, entity: T) -> bool: ...

    async def delete(self, entity_id: int) -> bool: ...

    async def exists(self, entity_id: int) -> bool: ...


class DialectPort(Protocol):
    """Dialect behavior required to turn a command into driver SQL."""

    name: str
    paramstyle: str

    def compile(self, command: ProcedureCommand) -> CompiledCall: ...


class AsyncDatabasePort(Protocol):
    """Async database adapter behavior required by the repository.

    Every call owns its connection for its whole lifetime.
    """

    dialect: DialectPort

    async def fetchone(self, command: ProcedureCommand) -> MaybeRow: ...

    async def fetchall(self, command: ProcedureCommand) -> List[RowMapping]: ...

    async def execute(self, command: ProcedureCommand) -> None: ...
