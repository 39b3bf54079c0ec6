"""Generic procedure contract for dataclass entities."""

from __future__ import annotations

from dataclasses import MISSING, Field, dataclass, fields, is_dataclass
from typing import (
    Any,
    ClassVar,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Type,
    TypeVar,
)

from .command import ProcedureCommand
from .types import RowMapping


class DataclassModel(Protocol):
    """Protocol for supported dataclass entity types."""

    __dataclass_fields__: ClassVar[dict[str, Any]]


T = TypeVar("T", bound=DataclassModel)


def require_dataclass_model(cls: Type[Any]) -> None:
    """Validate that a class is a dataclass model."""

    if not isinstance(cls, type) or not is_dataclass(cls):
        raise TypeError(f"{getattr(cls, '__name__', cls)!r} must be a dataclass.")


@dataclass(frozen=True)
class ProcedureNames:
    """The six procedure names a contract exposes."""

    get_by_id: str
    get_all: str
    insert: str
    update: str
    delete: str
    is_exists_by_id: str

    @classmethod
    def from_prefix(cls, prefix: str, *, separator: str = "_") -> ProcedureNames:
        """Build conventional names such as `dbo.Order_GetById`."""

        if not prefix:
            raise ValueError("Procedure prefix must be a non-empty string.")
        return cls(
            get_by_id=f"{prefix}{separator}GetById",
            get_all=f"{prefix}{separator}GetAll",
            insert=f"{prefix}{separator}Insert",
            update=f"{prefix}{separator}Update",
            delete=f"{prefix}{separator}Delete",
            is_exists_by_id=f"{prefix}{separator}IsExistsById",
        )


class DataclassProcedureContract(Generic[T]):
    """Procedure contract that binds and maps dataclass fields by name.

    Insert binds every field except the id field plus the output id
    parameter; update binds every field. `parameter_names` renames fields
    to procedure parameter names, and rows are matched to fields by field
    name or parameter name, ignoring case. The id field also matches the
    `id_parameter_name` column.
    """

    def __init__(
        self,
        model: Type[T],
        procedures: ProcedureNames,
        *,
        id_field: str = "id",
        id_parameter_name: Optional[str] = None,
        output_id_parameter_name: Optional[str] = None,
        parameter_names: Optional[Mapping[str, str]] = None,
    ):
        require_dataclass_model(model)
        self.model = model
        self.procedures = procedures
        self._fields: List[Field[Any]] = list(fields(model))
        field_names = {f.name for f in self._fields}
        if id_field not in field_names:
            raise ValueError(f"{model.__name__} has no id field {id_field!r}.")
        unknown = set(parameter_names or {}) - field_names
        if unknown:
            raise ValueError(
                f"parameter_names references unknown fields of {model.__name__}: "
                f"{sorted(unknown)}."
            )
        self.id_field = id_field
        self._parameter_names: Dict[str, str] = {
            f.name: (parameter_names or {}).get(f.name, f.name) for f in self._fields
        }
        self._id_parameter_name = id_parameter_name or self._parameter_names[id_field]
        self._output_id_parameter_name = (
            output_id_parameter_name or f"new_{self._id_parameter_name}"
        )

    def __repr__(self) -> str:
        return f"DataclassProcedureContract({self.model.__name__})"

    @property
    def id_parameter_name(self) -> str:
        return self._id_parameter_name

    @property
    def output_id_parameter_name(self) -> str:
        return self._output_id_parameter_name

    @property
    def get_by_id_procedure(self) -> str:
        return self.procedures.get_by_id

    @property
    def get_all_procedure(self) -> str:
        return self.procedures.get_all

    @property
    def insert_procedure(self) -> str:
        return self.procedures.insert

    @property
    def update_procedure(self) -> str:
        return self.procedures.update

    @property
    def delete_procedure(self) -> str:
        return self.procedures.delete

    @property
    def is_exists_by_id_procedure(self) -> str:
        return self.procedures.is_exists_by_id

    def bind_insert_parameters(self, command: ProcedureCommand, entity: T) -> None:
        self._require_instance(entity)
        for f in self._fields:
            if f.name == self.id_field:
                continue
            command.add_input(self._parameter_names[f.name], getattr(entity, f.name))
        command.add_output(self.output_id_parameter_name)

    def bind_update_parameters(self, command: ProcedureCommand, entity: T) -> None:
        self._require_instance(entity)
        for f in self._fields:
            name = (
                self.id_parameter_name
                if f.name == self.id_field
                else self._parameter_names[f.name]
            )
            command.add_input(name, getattr(entity, f.name))

    def map_row(self, row: RowMapping) -> T:
        columns = {str(key).lower(): value for key, value in row.items()}
        values: Dict[str, Any] = {}
        for f in self._fields:
            if not f.init:
                continue
            for candidate in self._column_candidates(f.name):
                if candidate.lower() in columns:
                    values[f.name] = columns[candidate.lower()]
                    break
            else:
                if f.default is MISSING and f.default_factory is MISSING:
                    raise KeyError(
                        f"Row has no column for required field "
                        f"{self.model.__name__}.{f.name}."
                    )
        return self.model(**values)

    def _column_candidates(self, field_name: str) -> Tuple[str, ...]:
        if field_name == self.id_field:
            return (field_name, self._parameter_names[field_name], self.id_parameter_name)
        return (field_name, self._parameter_names[field_name])

    def _require_instance(self, entity: Any) -> None:
        if not isinstance(entity, self.model):
            raise TypeError(
                f"Object type {type(entity).__name__} does not match model "
                f"{self.model.__name__}."
            )
