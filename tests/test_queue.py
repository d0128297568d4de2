# ============================================================================
# RATE-LIMITED QUEUE TESTS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Tests - Sequential task runner
# PURPOSE: Verify ordering, spacing, stop semantics, and error routing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Rate-Limited Queue Tests

Run with:
    pytest tests/test_queue.py -v
"""

import asyncio
import pytest

from core.errors import ContractRevertedError, LedgerError
from orchestrator.queue import RateLimitedQueue


def _tasks(log, count, fail_at=()):
    def make(i):
        async def task():
            log.append(("start", i))
            await asyncio.sleep(0)
            log.append(("end", i))
            if i in fail_at:
                raise ContractRevertedError(f"task {i}")
            return i
        return task
    return [make(i) for i in range(count)]


class TestRateLimitedQueue:

    def test_strictly_sequential(self, recording_sleep):
        log = []
        queue = RateLimitedQueue(min_interval=1.0, sleep=recording_sleep)

        started = asyncio.run(queue.run(_tasks(log, 3), lambda i, v, e: True))

        assert started == 3
        assert log == [
            ("start", 0), ("end", 0),
            ("start", 1), ("end", 1),
            ("start", 2), ("end", 2),
        ]

    def test_interval_between_tasks_only(self, recording_sleep):
        queue = RateLimitedQueue(min_interval=1.0, sleep=recording_sleep)
        asyncio.run(queue.run(_tasks([], 4), lambda i, v, e: True))
        assert recording_sleep.delays == [1.0, 1.0, 1.0]

    def test_zero_interval_never_sleeps(self, recording_sleep):
        queue = RateLimitedQueue(min_interval=0, sleep=recording_sleep)
        asyncio.run(queue.run(_tasks([], 3), lambda i, v, e: True))
        assert recording_sleep.delays == []

    def test_callback_receives_values_and_errors(self, recording_sleep):
        seen = []
        queue = RateLimitedQueue(min_interval=0.1, sleep=recording_sleep, handled=(LedgerError,))

        def on_result(index, value, error):
            seen.append((index, value, type(error).__name__ if error else None))
            return True

        started = asyncio.run(queue.run(_tasks([], 3, fail_at={1}), on_result))

        assert started == 3
        assert seen == [(0, 0, None), (1, None, "ContractRevertedError"), (2, 2, None)]

    def test_callback_false_stops(self, recording_sleep):
        log = []
        queue = RateLimitedQueue(min_interval=1.0, sleep=recording_sleep)

        started = asyncio.run(queue.run(_tasks(log, 5), lambda i, v, e: i < 1))

        assert started == 2
        assert ("start", 2) not in log
        assert queue.stopped is True

    def test_stop_during_task_halts_at_boundary(self, recording_sleep):
        queue = RateLimitedQueue(min_interval=1.0, sleep=recording_sleep)
        log = []

        async def stopping():
            log.append("stopping")
            queue.stop()

        async def never():
            log.append("never")

        started = asyncio.run(queue.run([stopping, never], lambda i, v, e: True))

        assert started == 1
        assert log == ["stopping"]

    def test_stop_before_run_is_honored(self, recording_sleep):
        log = []
        queue = RateLimitedQueue(min_interval=1.0, sleep=recording_sleep)
        queue.stop()

        started = asyncio.run(queue.run(_tasks(log, 3), lambda i, v, e: True))

        assert started == 0
        assert log == []

    def test_reset_clears_stop(self, recording_sleep):
        queue = RateLimitedQueue(min_interval=0, sleep=recording_sleep)
        queue.stop()
        queue.reset()

        assert queue.stopped is False
        assert asyncio.run(queue.run(_tasks([], 2), lambda i, v, e: True)) == 2

    def test_unhandled_error_propagates(self, recording_sleep):
        queue = RateLimitedQueue(min_interval=0, sleep=recording_sleep, handled=(LedgerError,))

        async def broken():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            asyncio.run(queue.run([broken], lambda i, v, e: True))

    def test_error_without_callback_propagates(self, recording_sleep):
        queue = RateLimitedQueue(min_interval=0, sleep=recording_sleep)
        with pytest.raises(ContractRevertedError):
            asyncio.run(queue.run(_tasks([], 2, fail_at={0})))

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            RateLimitedQueue(min_interval=-1)

    def test_real_sleep_spacing(self):
        """Default sleep suspends for at least the interval."""
        queue = RateLimitedQueue(min_interval=0.02)
        stamps = []

        async def stamp():
            stamps.append(asyncio.get_running_loop().time())

        asyncio.run(queue.run([stamp, stamp], lambda i, v, e: True))

        assert stamps[1] - stamps[0] >= 0.015
