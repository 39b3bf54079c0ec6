"""Type aliases for compiled procedure calls and result rows."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

# Driver arguments in placeholder order.
ProcedureArgs = List[Any]
# SQL batch plus its arguments, as produced by a dialect.
CompiledCall = Tuple[str, ProcedureArgs]

RowMapping = Mapping[str, Any]
Rows = List[RowMapping]
MaybeRow = Optional[RowMapping]
