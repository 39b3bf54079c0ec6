"""Stored-procedure invocation object populated by procedure contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional

from .types import RowMapping

RETURN_VALUE_NAME = "__return_value"


class ParameterDirection(str, Enum):
    """Direction of a bound procedure parameter."""

    INPUT = "input"
    OUTPUT = "output"
    INPUT_OUTPUT = "input_output"
    RETURN_VALUE = "return_value"


@dataclass
class ProcedureParameter:
    """One named parameter of a stored-procedure call.

    `name` never carries a driver prefix such as `@`; dialects add it when
    compiling. `sql_type` is only used to declare output variables.
    """

    name: str
    value: Any = None
    direction: ParameterDirection = ParameterDirection.INPUT
    sql_type: str = "INT"

    @property
    def is_input(self) -> bool:
        return self.direction in (ParameterDirection.INPUT, ParameterDirection.INPUT_OUTPUT)

    @property
    def is_output(self) -> bool:
        return self.direction is not ParameterDirection.INPUT


class ProcedureCommand:
    """Procedure name plus an ordered, case-insensitive parameter set.

    Contracts bind parameters into a command; database adapters compile and
    execute it and copy output values back with `apply_outputs()`.
    """

    def __init__(
        self,
        procedure: str,
        parameters: Iterable[ProcedureParameter] = (),
    ):
        self.procedure = procedure
        self._parameters: dict[str, ProcedureParameter] = {}
        for parameter in parameters:
            self.add(parameter)

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._parameters.values())
        return f"ProcedureCommand({self.procedure!r}, [{names}])"

    def __len__(self) -> int:
        return len(self._parameters)

    def __iter__(self) -> Iterator[ProcedureParameter]:
        return iter(self._parameters.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._parameters

    def __getitem__(self, name: str) -> ProcedureParameter:
        try:
            return self._parameters[name.lower()]
        except KeyError:
            raise KeyError(
                f"Parameter {name!r} is not registered on procedure {self.procedure!r}."
            ) from None

    @property
    def parameters(self) -> List[ProcedureParameter]:
        return list(self._parameters.values())

    @property
    def input_parameters(self) -> List[ProcedureParameter]:
        return [p for p in self._parameters.values() if p.is_input]

    @property
    def output_parameters(self) -> List[ProcedureParameter]:
        """Output and input/output parameters, excluding the return value."""

        return [
            p
            for p in self._parameters.values()
            if p.direction in (ParameterDirection.OUTPUT, ParameterDirection.INPUT_OUTPUT)
        ]

    @property
    def return_parameter(self) -> Optional[ProcedureParameter]:
        for parameter in self._parameters.values():
            if parameter.direction is ParameterDirection.RETURN_VALUE:
                return parameter
        return None

    @property
    def has_outputs(self) -> bool:
        return any(p.is_output for p in self._parameters.values())

    @property
    def return_value(self) -> Any:
        """Return code read back after execution, `None` when unset."""

        parameter = self.return_parameter
        return None if parameter is None else parameter.value

    def add(self, parameter: ProcedureParameter) -> ProcedureParameter:
        """Register one parameter; names must be unique ignoring case."""

        if not isinstance(parameter.name, str) or not parameter.name:
            raise ValueError("Parameter name must be a non-empty string.")
        key = parameter.name.lower()
        if key in self._parameters:
            raise ValueError(
                f"Parameter {parameter.name!r} is already registered on "
                f"procedure {self.procedure!r}."
            )
        if (
            parameter.direction is ParameterDirection.RETURN_VALUE
            and self.return_parameter is not None
        ):
            raise ValueError("A command can register only one return value parameter.")
        self._parameters[key] = parameter
        return parameter

    def add_input(self, name: str, value: Any) -> ProcedureParameter:
        return self.add(ProcedureParameter(name, value))

    def add_output(self, name: str, sql_type: str = "INT") -> ProcedureParameter:
        return self.add(
            ProcedureParameter(name, None, ParameterDirection.OUTPUT, sql_type)
        )

    def add_input_output(
        self,
        name: str,
        value: Any,
        sql_type: str = "INT",
    ) -> ProcedureParameter:
        return self.add(
            ProcedureParameter(name, value, ParameterDirection.INPUT_OUTPUT, sql_type)
        )

    def add_return_value(self) -> ProcedureParameter:
        return self.add(
            ProcedureParameter(RETURN_VALUE_NAME, None, ParameterDirection.RETURN_VALUE)
        )

    def value_of(self, name: str) -> Any:
        """Return the current value of a registered parameter."""

        return self[name].value

    def apply_outputs(self, row: Optional[RowMapping]) -> None:
        """Copy output columns from the row returned after execution.

        Columns are matched to parameter names ignoring case. Output
        parameters without a matching column are reset to `None`.
        """

        values = {}
        if row is not None:
            values = {str(key).lower(): value for key, value in row.items()}
        for key, parameter in self._parameters.items():
            if parameter.is_output:
                parameter.value = values.get(key)
