"""Bounded worker pool used to keep image synthesis off the event loop."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

import msgspec

T = TypeVar("T")


class ExecutionConfig(msgspec.Struct, frozen=True):
    """Configuration for :class:`TaskExecutor`."""

    max_workers: int = 4
    thread_name_prefix: str = "faultline"


class TaskExecutor:
    """Asynchronous facade over a lazily created thread pool."""

    def __init__(self, config: ExecutionConfig | None = None) -> None:
        self.config = config or ExecutionConfig()
        if self.config.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._thread_pool: ThreadPoolExecutor | None = None

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Execute ``func`` on the pool and await its result."""

        loop = asyncio.get_running_loop()
        pool = self._thread_pool or ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix=self.config.thread_name_prefix,
        )
        self._thread_pool = pool
        return await loop.run_in_executor(pool, _invoke_callable, func, args, kwargs)

    async def shutdown(self) -> None:
        """Shutdown the backing pool."""

        if self._thread_pool is not None:
            self._thread_pool.shutdown(wait=False, cancel_futures=True)
            self._thread_pool = None


def _invoke_callable(func: Callable[..., T], args: tuple[Any, ...], kwargs: dict[str, Any]) -> T:
    return func(*args, **kwargs)


__all__ = ["ExecutionConfig", "TaskExecutor"]
