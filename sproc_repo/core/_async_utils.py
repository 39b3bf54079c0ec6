"""Internal async helpers shared by async modules."""

from __future__ import annotations

import inspect
from typing import Any


async def _maybe_await(value: Any) -> Any:
    """Await awaitables and return non-awaitable values unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def _maybe_close(resource: Any) -> None:
    """Call `close()` on a cursor or connection when it has one."""
    close = getattr(resource, "close", None)
    if callable(close):
        await _maybe_await(close())
