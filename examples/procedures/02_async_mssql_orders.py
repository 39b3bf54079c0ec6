"""Async SQL Server example (optional dependency + running server).

Expects the `dbo.Order_*` procedures from `tests/test_repository_mssql.py`
and reads the connection from `SPROC_CONNECTION_STRING`.
"""

from __future__ import annotations

import asyncio
import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "sproc_repo").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sproc_repo import (
    AsyncDatabase,
    AsyncStoredProcedureRepository,
    DataclassProcedureContract,
    ProcedureNames,
    RepositoryError,
    get_settings,
)
from sproc_repo.logging import configure_logging


@dataclass
class Order:
    Id: int = 0
    Total: int = 0


async def main() -> None:
    if importlib.util.find_spec("aioodbc") is None:
        print("SQL Server example skipped: aioodbc not installed.")
        print("Install dependency: pip install 'sproc-repository[mssql]'")
        return

    settings = get_settings()
    if not settings.connection_string:
        print("SQL Server example skipped: SPROC_CONNECTION_STRING is not set.")
        return
    configure_logging(settings)

    contract = DataclassProcedureContract(
        Order,
        ProcedureNames.from_prefix("dbo.Order"),
        id_field="Id",
        output_id_parameter_name="NewId",
    )
    repo = AsyncStoredProcedureRepository[Order](AsyncDatabase.from_settings(settings), contract)

    try:
        order = await repo.insert(Order(Total=42))
        print("inserted:", order)
        if order is None:
            return

        print("updated:", await repo.update(Order(Id=order.Id, Total=99)))
        print("found:", await repo.get_by_id(order.Id))
        print("all:", await repo.get_all())
        print("deleted:", await repo.delete(order.Id))
        print("exists after delete:", await repo.exists(order.Id))
    except RepositoryError as exc:
        print(f"{exc.kind.value} fault during {exc.operation}: {exc}")
        print("cause:", repr(exc.__cause__))


if __name__ == "__main__":
    asyncio.run(main())
