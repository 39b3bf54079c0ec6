"""Lazy driver resolution for configured dialects."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Optional

_DRIVER_MODULES = {
    "mssql": ("aioodbc", "mssql"),
    "postgres": ("psycopg", "postgres"),
}


def _import_driver(dialect_name: str) -> Any:
    try:
        module_name, extra = _DRIVER_MODULES[dialect_name.lower()]
    except KeyError:
        raise ValueError(
            f"No driver is known for dialect {dialect_name!r}. "
            f"Use one of: {', '.join(sorted(_DRIVER_MODULES))}, or pass connect explicitly."
        ) from None
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            f"Driver {module_name!r} for dialect {dialect_name!r} is not installed. "
            f"Install it with: pip install 'sproc-repository[{extra}]'."
        ) from exc


def resolve_connect(dialect_name: str) -> Callable[..., Any]:
    """Return `connect(connection_string, *, timeout=None)` for a dialect.

    The returned callable yields an awaitable connection. `timeout` is the
    login timeout in seconds and is handed to the driver unchanged.
    """

    driver = _import_driver(dialect_name)
    if dialect_name.lower() == "mssql":

        def connect_mssql(connection_string: str, *, timeout: Optional[float] = None) -> Any:
            kwargs: dict[str, Any] = {"dsn": connection_string}
            if timeout is not None:
                kwargs["timeout"] = int(timeout)
            return driver.connect(**kwargs)

        return connect_mssql

    def connect_postgres(connection_string: str, *, timeout: Optional[float] = None) -> Any:
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["connect_timeout"] = max(1, int(timeout))
        return driver.AsyncConnection.connect(connection_string, **kwargs)

    return connect_postgres
