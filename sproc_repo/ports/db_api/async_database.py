"""Async DB adapter implementation for the core async database port."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any, AsyncIterator, Callable, Mapping, Optional

import structlog

from ...core._async_utils import _maybe_await, _maybe_close
from ...core.command import ProcedureCommand
from ...core.types import MaybeRow, ProcedureArgs, RowMapping, Rows
from .dialects import ProcedureDialect, get_dialect
from .drivers import resolve_connect

if TYPE_CHECKING:
    from ...config import RepositorySettings

logger = structlog.get_logger(__name__)


class AsyncDatabase:
    """Async database wrapper that opens one connection per call.

    `connect` is any DB-API style factory, sync or async. It is called with
    the stored arguments every time a connection is needed; the adapter
    never keeps a connection between calls.
    """

    def __init__(
        self,
        connect: Callable[..., Any],
        dialect: ProcedureDialect,
        *connect_args: Any,
        **connect_kwargs: Any,
    ):
        """Create async database adapter.

        Args:
            connect: Callable returning a (possibly awaitable) DB connection.
            dialect: Concrete procedure dialect instance.
            *connect_args: Positional arguments for `connect`, usually the
                connection string.
            **connect_kwargs: Keyword arguments for `connect`.
        """

        if not callable(connect):
            raise TypeError("connect must be callable.")
        self._connect = connect
        self._connect_args = connect_args
        self._connect_kwargs = connect_kwargs
        self.dialect = dialect

    @classmethod
    def from_settings(
        cls,
        settings: Optional[RepositorySettings] = None,
        *,
        connect: Optional[Callable[..., Any]] = None,
    ) -> AsyncDatabase:
        """Build an adapter from `RepositorySettings`.

        The driver is resolved from the configured dialect unless `connect`
        is given.
        """

        if settings is None:
            from ...config import get_settings

            settings = get_settings()
        if not settings.connection_string:
            raise ValueError("connection_string is not configured.")

        dialect = get_dialect(settings.dialect)
        if connect is None:
            connect = resolve_connect(settings.dialect)
        kwargs = {}
        if settings.connect_timeout is not None:
            kwargs["timeout"] = settings.connect_timeout
        return cls(connect, dialect, settings.connection_string, **kwargs)

    @contextlib.asynccontextmanager
    async def connection(self) -> AsyncIterator[Any]:
        """Open one connection, commit or roll back, and always close it."""

        conn = await _maybe_await(self._connect(*self._connect_args, **self._connect_kwargs))
        logger.debug("connection_opened", dialect=self.dialect.name)
        try:
            yield conn
        except BaseException:
            await self._rollback(conn)
            raise
        else:
            commit = getattr(conn, "commit", None)
            if callable(commit):
                await _maybe_await(commit())
        finally:
            await self._close(conn, "close_failed")
            logger.debug("connection_closed", dialect=self.dialect.name)

    async def _rollback(self, conn: Any) -> None:
        """Roll back after a failure without masking the failure itself."""

        rollback = getattr(conn, "rollback", None)
        if not callable(rollback):
            return
        try:
            await _maybe_await(rollback())
        except Exception as exc:
            logger.warning("rollback_failed", dialect=self.dialect.name, error=str(exc))

    async def _close(self, resource: Any, event: str) -> None:
        try:
            await _maybe_close(resource)
        except Exception as exc:
            logger.warning(event, dialect=self.dialect.name, error=str(exc))

    @contextlib.asynccontextmanager
    async def _cursor(self, conn: Any) -> AsyncIterator[Any]:
        cur = await _maybe_await(conn.cursor())
        try:
            yield cur
        finally:
            await self._close(cur, "cursor_close_failed")

    async def _run(self, cur: Any, sql: str, params: ProcedureArgs) -> None:
        if params:
            await _maybe_await(cur.execute(sql, params))
        else:
            await _maybe_await(cur.execute(sql))

    def _row_to_mapping(self, cursor: Any, row: Any) -> RowMapping:
        """Normalize row object to mapping.

        Supports mapping rows directly and sequence rows (tuples, lists,
        driver row objects) via `cursor.description`.
        """

        if isinstance(row, Mapping):
            return row

        desc = getattr(cursor, "description", None)
        if desc:
            cols = [d[0] for d in desc]
            return dict(zip(cols, list(row), strict=True))

        if isinstance(row, (tuple, list)):
            raise TypeError("Cursor has no description; cannot map tuple rows to dict.")

        try:
            return dict(row)
        except (TypeError, ValueError):
            pass

        raise TypeError(f"Unsupported row type: {type(row)}")

    async def fetchone(self, command: ProcedureCommand) -> MaybeRow:
        """Run the procedure and return its first row as a mapping."""

        sql, params = self.dialect.compile(command)
        async with self.connection() as conn:
            async with self._cursor(conn) as cur:
                await self._run(cur, sql, params)
                if not await self._skip_to_result_set(cur):
                    return None
                row = await _maybe_await(cur.fetchone())
                if row is None:
                    return None
                return self._row_to_mapping(cur, row)

    async def fetchall(self, command: ProcedureCommand) -> Rows:
        """Run the procedure and return all rows of its first result set."""

        sql, params = self.dialect.compile(command)
        async with self.connection() as conn:
            async with self._cursor(conn) as cur:
                await self._run(cur, sql, params)
                if not await self._skip_to_result_set(cur):
                    return []
                rows = await _maybe_await(cur.fetchall())
                return [self._row_to_mapping(cur, r) for r in rows]

    async def execute(self, command: ProcedureCommand) -> None:
        """Run the procedure as a non-query and read back output values."""

        sql, params = self.dialect.compile(command)
        async with self.connection() as conn:
            async with self._cursor(conn) as cur:
                await self._run(cur, sql, params)
                if command.has_outputs:
                    command.apply_outputs(await self._read_output_row(cur))

    async def _skip_to_result_set(self, cur: Any) -> bool:
        """Advance past row-count results to the first set with columns.

        Returns `False` when the batch produced no result set at all.
        """

        while not getattr(cur, "description", None):
            nextset = getattr(cur, "nextset", None)
            if not callable(nextset) or not await _maybe_await(nextset()):
                return False
        return True

    async def _read_output_row(self, cur: Any) -> MaybeRow:
        """Return the first row of the last result set, if any.

        Procedures may emit their own result sets or row counts before the
        output values, so every result set is walked.
        """

        row: MaybeRow = None
        while True:
            if getattr(cur, "description", None):
                fetched = await _maybe_await(cur.fetchone())
                row = None if fetched is None else self._row_to_mapping(cur, fetched)
            nextset = getattr(cur, "nextset", None)
            if not callable(nextset) or not await _maybe_await(nextset()):
                return row
