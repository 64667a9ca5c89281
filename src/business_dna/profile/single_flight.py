"""
Single-flight execution: collapse concurrent calls for the same key.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight:
    """
    At most one in-flight execution per key.

    The first caller for a key starts the work; callers arriving while it runs
    await the same task and receive the same result or the same exception.
    A caller that is cancelled stops waiting without cancelling the shared
    work, which other callers may still depend on.
    """

    def __init__(self):
        self._inflight: Dict[Hashable, "asyncio.Task"] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    async def do(self, key: Hashable, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run fn() for key, or join the execution already running for key.

        Args:
            key: Deduplication key
            fn: Zero-argument coroutine factory, only called by the first caller

        Returns:
            The shared result
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
            logger.debug(f"Started in-flight execution for {key}")
        else:
            logger.debug(f"Joined in-flight execution for {key}")

        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: "asyncio.Task") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception retrieved even if every waiter was cancelled
        if not task.cancelled():
            task.exception()
