"""Show how each dialect compiles the six repository procedure calls."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "sproc_repo").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sproc_repo import PostgresDialect, ProcedureCommand, SQLServerDialect


def commands(prefix: str) -> list[ProcedureCommand]:
    get_by_id = ProcedureCommand(f"{prefix}_GetById")
    get_by_id.add_input("Id", 7)

    get_all = ProcedureCommand(f"{prefix}_GetAll")

    insert = ProcedureCommand(f"{prefix}_Insert")
    insert.add_input("Total", 42)
    insert.add_output("NewId")

    update = ProcedureCommand(f"{prefix}_Update")
    update.add_input("Id", 7)
    update.add_input("Total", 99)
    update.add_return_value()

    delete = ProcedureCommand(f"{prefix}_Delete")
    delete.add_input("Id", 7)
    delete.add_return_value()

    exists = ProcedureCommand(f"{prefix}_IsExistsById")
    exists.add_input("Id", 7)
    exists.add_return_value()

    return [get_by_id, get_all, insert, update, delete, exists]


def show_for_dialect(name: str, dialect, prefix: str) -> None:  # noqa: ANN001
    print(f"\n===== {name} =====")
    for command in commands(prefix):
        sql, params = dialect.compile(command)
        print(f"-- {command.procedure}")
        print(sql)
        print("Params:", params)


def main() -> None:
    show_for_dialect("SQLServerDialect", SQLServerDialect(), "dbo.Order")
    show_for_dialect("PostgresDialect", PostgresDialect(), "public.order")


if __name__ == "__main__":
    main()
