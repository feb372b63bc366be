"""Execution helpers bridging synchronous services into async contexts."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


async def run_sync(func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    """Execute *func* in a worker thread and return the result.

    The Playwright sync API refuses to run on a thread with a running event
    loop, so every render goes through here.
    """

    return await asyncio.to_thread(func, *args, **kwargs)


__all__ = ["run_sync"]
