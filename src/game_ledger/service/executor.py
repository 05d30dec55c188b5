"""Thread pool executor for blocking ledger calls.

SQLite access is synchronous; request handlers hand ledger calls to this
pool so the event loop is never blocked.

Usage:
    from game_ledger.service.executor import run_in_executor

    rows = await run_in_executor(ledger.get_profit)
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Module-level executor storage
_EXECUTOR_SLOT: dict[str, ThreadPoolExecutor | None] = {"executor": None}

DEFAULT_MAX_WORKERS = 4
DEFAULT_THREAD_PREFIX = "ledger-blocking-"


def get_executor(
    max_workers: int = DEFAULT_MAX_WORKERS,
    thread_name_prefix: str = DEFAULT_THREAD_PREFIX,
) -> ThreadPoolExecutor:
    """Get or create the shared thread pool executor.

    Args:
        max_workers: Maximum number of worker threads (first call only)
        thread_name_prefix: Prefix for thread names

    Returns:
        ThreadPoolExecutor instance
    """
    if _EXECUTOR_SLOT["executor"] is None:
        logger.info(f"Creating thread pool executor with {max_workers} workers")
        _EXECUTOR_SLOT["executor"] = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )
    return _EXECUTOR_SLOT["executor"]


def shutdown_executor(wait: bool = True) -> None:
    """Shutdown the executor gracefully.

    Args:
        wait: If True, wait for all pending tasks to complete
    """
    executor = _EXECUTOR_SLOT.get("executor")
    if executor:
        logger.info("Shutting down thread pool executor...")
        executor.shutdown(wait=wait)
        _EXECUTOR_SLOT["executor"] = None


async def run_in_executor(
    func: Callable[..., R],
    *args: Any,
    **kwargs: Any,
) -> R:
    """Run a blocking function in the thread pool executor.

    Exceptions raised by ``func`` propagate to the awaiting caller.
    """
    loop = asyncio.get_running_loop()
    executor = get_executor()

    if kwargs:
        func_with_args = partial(func, *args, **kwargs)
    else:
        func_with_args = partial(func, *args) if args else func

    return await loop.run_in_executor(executor, func_with_args)


__all__ = [
    "get_executor",
    "shutdown_executor",
    "run_in_executor",
]
