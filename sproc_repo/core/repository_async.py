"""Async repository that runs CRUD operations through stored procedures."""

from __future__ import annotations

from typing import Any, Callable, Generic, List, Optional, TypeVar

import structlog

from .command import ProcedureCommand
from .contracts import AsyncDatabasePort, ProcedureContract
from .exceptions import RepositoryError
from .outcomes import is_success_code, new_identity

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class AsyncStoredProcedureRepository(Generic[T]):
    """Async CRUD repository driven by a `ProcedureContract[T]`.

    The repository holds no per-call state: every operation builds its own
    command and borrows its own connection from `db`, so one instance can be
    shared by concurrent tasks. Return codes other than exactly `1` are
    reported as `False`; faults are raised as `RepositoryError`.
    """

    def __init__(self, db: AsyncDatabasePort, contract: ProcedureContract[T]):
        self.db = db
        self.contract = contract

    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """Fetch one entity by id, or `None` when no row is returned."""

        procedure = self.contract.get_by_id_procedure
        try:
            command = self._id_command(procedure, entity_id)
            row = await self.db.fetchone(command)
            entity = None if row is None else self.contract.map_row(row)
        except Exception as exc:
            raise self._fault(
                exc,
                operation="get_by_id",
                action=f"retrieving entity with ID {entity_id}",
                procedure=procedure,
                entity_id=entity_id,
            ) from exc

        logger.debug(
            "procedure_completed",
            operation="get_by_id",
            procedure=procedure,
            entity_id=entity_id,
            found=entity is not None,
        )
        return entity

    async def get_all(self) -> List[T]:
        """Fetch every entity in the order the procedure returns them."""

        procedure = self.contract.get_all_procedure
        try:
            rows = await self.db.fetchall(ProcedureCommand(procedure))
            entities = [self.contract.map_row(row) for row in rows]
        except Exception as exc:
            raise self._fault(
                exc,
                operation="get_all",
                action="retrieving all entities",
                procedure=procedure,
            ) from exc

        logger.debug(
            "procedure_completed",
            operation="get_all",
            procedure=procedure,
            count=len(entities),
        )
        return entities

    async def insert(self, entity: T) -> Optional[T]:
        """Insert an entity and return it as re-read from the database.

        Returns `None` when the procedure leaves the output id unset or
        non-positive.
        """

        procedure = self.contract.insert_procedure
        try:
            command = ProcedureCommand(procedure)
            self.contract.bind_insert_parameters(command, entity)
            await self.db.execute(command)
            entity_id = new_identity(
                command.value_of(self.contract.output_id_parameter_name)
            )
        except Exception as exc:
            raise self._fault(
                exc,
                operation="insert",
                action="inserting a new entity",
                procedure=procedure,
            ) from exc

        logger.debug(
            "procedure_completed",
            operation="insert",
            procedure=procedure,
            entity_id=entity_id,
        )
        if entity_id is None:
            return None
        return await self.get_by_id(entity_id)

    async def update(self, entity: T) -> bool:
        """Update an entity; `True` only when the return code is `1`."""

        return await self._execute_for_return_code(
            self.contract.update_procedure,
            lambda command: self.contract.bind_update_parameters(command, entity),
            operation="update",
            action="updating the entity",
        )

    async def delete(self, entity_id: int) -> bool:
        """Delete an entity by id; `True` only when the return code is `1`."""

        return await self._execute_for_return_code(
            self.contract.delete_procedure,
            lambda command: self._bind_id(command, entity_id),
            operation="delete",
            action=f"deleting entity with ID {entity_id}",
            entity_id=entity_id,
        )

    async def exists(self, entity_id: int) -> bool:
        """Return whether the exists procedure reports the id with code `1`."""

        return await self._execute_for_return_code(
            self.contract.is_exists_by_id_procedure,
            lambda command: self._bind_id(command, entity_id),
            operation="exists",
            action=f"checking existence of entity with ID {entity_id}",
            entity_id=entity_id,
        )

    async def _execute_for_return_code(
        self,
        procedure: str,
        bind: Callable[[ProcedureCommand], Any],
        *,
        operation: str,
        action: str,
        entity_id: Optional[int] = None,
    ) -> bool:
        try:
            command = ProcedureCommand(procedure)
            bind(command)
            command.add_return_value()
            await self.db.execute(command)
            succeeded = is_success_code(command.return_value)
        except Exception as exc:
            raise self._fault(
                exc,
                operation=operation,
                action=action,
                procedure=procedure,
                entity_id=entity_id,
            ) from exc

        logger.debug(
            "procedure_completed",
            operation=operation,
            procedure=procedure,
            entity_id=entity_id,
            return_code=command.return_value,
            succeeded=succeeded,
        )
        return succeeded

    def _id_command(self, procedure: str, entity_id: int) -> ProcedureCommand:
        command = ProcedureCommand(procedure)
        self._bind_id(command, entity_id)
        return command

    def _bind_id(self, command: ProcedureCommand, entity_id: int) -> None:
        command.add_input(self.contract.id_parameter_name, entity_id)

    def _fault(
        self,
        exc: Exception,
        *,
        operation: str,
        action: str,
        procedure: str,
        entity_id: Optional[int] = None,
    ) -> RepositoryError:
        error = RepositoryError.wrap(
            exc,
            operation=operation,
            action=action,
            entity_id=entity_id,
        )
        logger.error(
            "procedure_failed",
            operation=operation,
            procedure=procedure,
            entity_id=entity_id,
            error_kind=error.kind.value,
            error=str(exc),
        )
        return error
