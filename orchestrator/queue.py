# ============================================================================
# RATE-LIMITED SEQUENTIAL QUEUE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Orchestrator - Strictly sequential async task runner
# PURPOSE: Submit dependent transactions one at a time with a minimum gap
# CREATED: 19 OCT 2026
# ============================================================================
"""
Rate-Limited Queue

Runs zero-arg coroutine factories one after another. Task N+1 is not
started until task N has finished, and at least `min_interval` seconds
pass between the end of one task and the start of the next.

The wait is a suspension (`asyncio.sleep` by default, injectable for
tests), so cancelling the caller cancels the queue at a task boundary.

Usage:
    queue = RateLimitedQueue(min_interval=1.0)
    started = await queue.run(
        [lambda: gateway.mint_one(3) for _ in range(5)],
        on_result=lambda index, value, error: error is None,
    )
"""

import asyncio
from typing import Awaitable, Callable, Optional, Sequence, Tuple, Type

from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.ORCHESTRATOR)

TaskFactory = Callable[[], Awaitable]

# (index, value, error) -> keep going?
ResultCallback = Callable[[int, object, Optional[BaseException]], bool]


class RateLimitedQueue:
    """Sequential runner with a fixed minimum interval between tasks."""

    def __init__(
        self,
        min_interval: float = 1.0,
        sleep: Callable[[float], Awaitable] = asyncio.sleep,
        handled: Tuple[Type[BaseException], ...] = (Exception,),
    ):
        """
        Args:
            min_interval: Seconds to wait between consecutive tasks
            sleep: Awaitable sleep function
            handled: Exception types reported to the callback; anything
                else propagates out of run()
        """
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval
        self._sleep = sleep
        self._handled = handled
        self._stop_requested = False

    def stop(self) -> None:
        """Halt before the next task starts. The running task is not interrupted."""
        self._stop_requested = True

    def reset(self) -> None:
        """Clear a stop request. run() honors a stop made before it started."""
        self._stop_requested = False

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    async def run(
        self,
        tasks: Sequence[TaskFactory],
        on_result: Optional[ResultCallback] = None,
    ) -> int:
        """
        Run tasks in order.

        Args:
            tasks: Zero-arg callables returning awaitables
            on_result: Called after every task; returning False stops the queue

        Returns:
            Number of tasks started
        """
        started = 0

        for index, task in enumerate(tasks):
            if self._stop_requested:
                break
            if started > 0 and self.min_interval > 0:
                await self._sleep(self.min_interval)
                if self._stop_requested:
                    break

            started += 1
            value = None
            error = None
            try:
                value = await task()
            except self._handled as e:
                error = e

            if on_result is not None and on_result(index, value, error) is False:
                self._stop_requested = True
            elif on_result is None and error is not None:
                raise error

        if self._stop_requested and started < len(tasks):
            logger.info(f"Queue stopped after {started}/{len(tasks)} task(s)")
        return started


__all__ = ["RateLimitedQueue", "TaskFactory", "ResultCallback"]
