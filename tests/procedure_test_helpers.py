from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from sproc_repo import ProcedureCommand, SQLServerDialect
from sproc_repo.core.types import MaybeRow, RowMapping, Rows


_NOT_FORCED = object()


class Error(Exception):
    """Stand-in for a DB-API driver's base `Error` class."""


class OperationalError(Error):
    pass


class ProgrammingError(Error):
    pass


@dataclass
class Order:
    id: int = 0
    total: int = 0


class OrderContract:
    """Hand-written contract in the shape concrete entity contracts take."""

    id_parameter_name = "Id"
    output_id_parameter_name = "NewId"
    get_by_id_procedure = "dbo.Order_GetById"
    get_all_procedure = "dbo.Order_GetAll"
    insert_procedure = "dbo.Order_Insert"
    update_procedure = "dbo.Order_Update"
    delete_procedure = "dbo.Order_Delete"
    is_exists_by_id_procedure = "dbo.Order_IsExistsById"

    def bind_insert_parameters(self, command: ProcedureCommand, entity: Order) -> None:
        command.add_input("Total", entity.total)
        command.add_output(self.output_id_parameter_name)

    def bind_update_parameters(self, command: ProcedureCommand, entity: Order) -> None:
        command.add_input(self.id_parameter_name, entity.id)
        command.add_input("Total", entity.total)

    def map_row(self, row: RowMapping) -> Order:
        return Order(id=row["Id"], total=row["Total"])


class InMemoryProcedureDatabase:
    """Async database port that runs the order procedures against a dict.

    `forced_new_id` and `forced_return_codes` override what the procedures
    report, and `fail_with` makes every call raise before touching state.
    """

    def __init__(self) -> None:
        self.dialect = SQLServerDialect()
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.forced_new_id: Any = _NOT_FORCED
        self.forced_return_codes: dict[str, Any] = {}
        self.fail_with: Optional[BaseException] = None
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.open_connections = 0
        self._procedures: dict[str, Callable[[ProcedureCommand], Any]] = {
            OrderContract.get_by_id_procedure: self._get_by_id,
            OrderContract.get_all_procedure: self._get_all,
            OrderContract.insert_procedure: self._insert,
            OrderContract.update_procedure: self._update,
            OrderContract.delete_procedure: self._delete,
            OrderContract.is_exists_by_id_procedure: self._is_exists,
        }

    def seed(self, *orders: Order) -> None:
        for order in orders:
            self.rows[order.id] = {"Id": order.id, "Total": order.total}
            self.next_id = max(self.next_id, order.id + 1)

    async def fetchone(self, command: ProcedureCommand) -> MaybeRow:
        rows = await self._call("fetchone", command)
        return rows[0] if rows else None

    async def fetchall(self, command: ProcedureCommand) -> Rows:
        return await self._call("fetchall", command)

    async def execute(self, command: ProcedureCommand) -> None:
        await self._call("execute", command)

    async def _call(self, kind: str, command: ProcedureCommand) -> Any:
        self.calls.append(
            (kind, command.procedure, {p.name: p.value for p in command.input_parameters})
        )
        self.open_connections += 1
        try:
            if self.fail_with is not None:
                raise self.fail_with
            handler = self._procedures.get(command.procedure)
            if handler is None:
                raise Error(f"Could not find stored procedure '{command.procedure}'.")
            return handler(command)
        finally:
            self.open_connections -= 1

    def _return(self, command: ProcedureCommand, code: int) -> None:
        code = self.forced_return_codes.get(command.procedure, code)
        parameter = command.return_parameter
        if parameter is not None:
            parameter.value = code

    def _get_by_id(self, command: ProcedureCommand) -> Rows:
        row = self.rows.get(command.value_of("Id"))
        return [] if row is None else [dict(row)]

    def _get_all(self, command: ProcedureCommand) -> Rows:
        return [dict(row) for row in self.rows.values()]

    def _insert(self, command: ProcedureCommand) -> None:
        if self.forced_new_id is not _NOT_FORCED:
            command["NewId"].value = self.forced_new_id
            return
        new_id = self.next_id
        self.next_id += 1
        self.rows[new_id] = {"Id": new_id, "Total": command.value_of("Total")}
        command["NewId"].value = new_id

    def _update(self, command: ProcedureCommand) -> None:
        entity_id = command.value_of("Id")
        if command.procedure in self.forced_return_codes:
            self._return(command, 0)
            return
        if entity_id not in self.rows:
            self._return(command, 0)
            return
        self.rows[entity_id]["Total"] = command.value_of("Total")
        self._return(command, 1)

    def _delete(self, command: ProcedureCommand) -> None:
        entity_id = command.value_of("Id")
        if command.procedure in self.forced_return_codes:
            self._return(command, 0)
            return
        if self.rows.pop(entity_id, None) is None:
            self._return(command, 0)
            return
        self._return(command, 1)

    def _is_exists(self, command: ProcedureCommand) -> None:
        self._return(command, 1 if command.value_of("Id") in self.rows else 0)
