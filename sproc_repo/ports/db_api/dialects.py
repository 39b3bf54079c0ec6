"""Concrete stored-procedure dialects for DB-API adapters."""

from __future__ import annotations

import re
from typing import Any, List

from ...core.command import RETURN_VALUE_NAME, ParameterDirection, ProcedureCommand
from ...core.types import CompiledCall

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SQL_TYPE = re.compile(r"^[A-Za-z][A-Za-z0-9_ ]*(\(\s*(\d+|MAX)(\s*,\s*\d+)?\s*\))?$", re.IGNORECASE)


class ProcedureDialect:
    """Base dialect that defines quoting, placeholders, and call compilation."""

    name: str = "generic"
    paramstyle: str = "qmark"
    quote_open: str = '"'
    quote_close: str = '"'

    def q(self, ident: str) -> str:
        """Quote one SQL identifier, stripping quotes already present."""

        if (
            len(ident) >= 2
            and ident.startswith(self.quote_open)
            and ident.endswith(self.quote_close)
        ):
            ident = ident[1:-1]
        escaped = ident.replace(self.quote_close, self.quote_close * 2)
        return f"{self.quote_open}{escaped}{self.quote_close}"

    def procedure_ref(self, procedure: str) -> str:
        """Quote a possibly schema-qualified procedure name part by part."""

        if not isinstance(procedure, str) or not procedure.strip():
            raise ValueError("Procedure name must be a non-empty string.")
        parts = [part.strip() for part in procedure.split(".")]
        if not all(parts):
            raise ValueError(f"Invalid procedure name: {procedure!r}.")
        return ".".join(self.q(part) for part in parts)

    def placeholder(self, key: str) -> str:
        """Return parameter placeholder for current param style."""

        if self.paramstyle == "named":
            return f":{key}"
        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")

    def parameter_name(self, name: str) -> str:
        """Validate a parameter name before it is embedded in SQL."""

        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid procedure parameter name: {name!r}.")
        return name

    def compile(self, command: ProcedureCommand) -> CompiledCall:
        """Return `(sql, params)` invoking the command's procedure."""

        raise NotImplementedError


class SQLServerDialect(ProcedureDialect):
    """SQL Server dialect (`EXEC` batches, `?` parameters, `@` prefixes).

    Commands with output or return-value parameters are compiled into a
    batch that declares local variables, runs the procedure, and selects
    the variables as the final result set.
    """

    name = "mssql"
    paramstyle = "qmark"
    quote_open = "["
    quote_close = "]"

    def compile(self, command: ProcedureCommand) -> CompiledCall:
        proc = self.procedure_ref(command.procedure)
        arguments: List[str] = []
        arg_params: List[Any] = []
        declares: List[str] = []
        initialisers: List[str] = []
        init_params: List[Any] = []
        selects: List[str] = []

        for parameter in command.parameters:
            if parameter.direction is ParameterDirection.RETURN_VALUE:
                continue
            name = self.parameter_name(parameter.name)
            if parameter.direction is ParameterDirection.INPUT:
                arguments.append(f"@{name} = {self.placeholder(name)}")
                arg_params.append(parameter.value)
                continue

            variable = f"@__out_{name}"
            declares.append(f"{variable} {self._sql_type(parameter.sql_type)}")
            if parameter.direction is ParameterDirection.INPUT_OUTPUT:
                initialisers.append(f"SET {variable} = {self.placeholder(name)};")
                init_params.append(parameter.value)
            arguments.append(f"@{name} = {variable} OUTPUT")
            selects.append(f"{variable} AS {self.q(name)}")

        argument_sql = f" {', '.join(arguments)}" if arguments else ""
        if not command.has_outputs:
            return f"EXEC {proc}{argument_sql};", arg_params

        exec_target = ""
        if command.return_parameter is not None:
            declares.insert(0, f"@{RETURN_VALUE_NAME} INT")
            selects.insert(0, f"@{RETURN_VALUE_NAME} AS {self.q(RETURN_VALUE_NAME)}")
            exec_target = f"@{RETURN_VALUE_NAME} = "

        lines = ["SET NOCOUNT ON;", f"DECLARE {', '.join(declares)};"]
        lines.extend(initialisers)
        lines.append(f"EXEC {exec_target}{proc}{argument_sql};")
        lines.append(f"SELECT {', '.join(selects)};")
        return "\n".join(lines), init_params + arg_params

    def _sql_type(self, sql_type: str) -> str:
        if not _SQL_TYPE.match(sql_type.strip()):
            raise ValueError(f"Invalid output parameter SQL type: {sql_type!r}.")
        return sql_type.strip()


class PostgresDialect(ProcedureDialect):
    """PostgreSQL dialect (named-notation calls, `%s` parameters).

    Result sets come from set-returning functions, return codes from
    scalar functions, and output parameters from `CALL` on procedures.
    """

    name = "postgres"
    paramstyle = "format"
    quote_open = '"'
    quote_close = '"'

    def compile(self, command: ProcedureCommand) -> CompiledCall:
        proc = self.procedure_ref(command.procedure)
        has_return = command.return_parameter is not None
        has_outputs = bool(command.output_parameters)
        if has_return and has_outputs:
            raise ValueError(
                "PostgreSQL cannot combine a return value with output parameters "
                f"on {command.procedure!r}."
            )

        arguments: List[str] = []
        params: List[Any] = []
        for parameter in command.parameters:
            if parameter.direction is ParameterDirection.RETURN_VALUE:
                continue
            name = self.parameter_name(parameter.name)
            if parameter.direction is ParameterDirection.OUTPUT:
                arguments.append(f"{name} => NULL")
                continue
            arguments.append(f"{name} => {self.placeholder(name)}")
            params.append(parameter.value)

        call = f"{proc}({', '.join(arguments)})"
        if has_outputs:
            return f"CALL {call};", params
        if has_return:
            return f"SELECT {call} AS {self.q(RETURN_VALUE_NAME)};", params
        return f"SELECT * FROM {call};", params


_DIALECTS = {
    SQLServerDialect.name: SQLServerDialect,
    PostgresDialect.name: PostgresDialect,
}


def get_dialect(name: str) -> ProcedureDialect:
    """Return a dialect instance by its configured name."""

    try:
        return _DIALECTS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unsupported dialect {name!r}. Use one of: {', '.join(sorted(_DIALECTS))}."
        ) from None
