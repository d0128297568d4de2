# ============================================================================
# BOUNDED READ FAN-OUT
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Service - Concurrent independent ledger reads
# PURPOSE: Fan out per-item reads under a concurrency limit, skip-and-count failures
# CREATED: 19 OCT 2026
# ============================================================================
"""
Bounded Read Fan-Out

Reads for independent entities (projects, tokens) have no ordering
dependency on each other, so they are issued concurrently and gathered.
A semaphore bounds how many are in flight against the provider.

Per-item ledger failures are returned, not raised: the caller decides the
skip policy and records it in a ScanReport. Anything that is not a
LedgerError is a bug and propagates.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, List, Optional, TypeVar

from core.errors import LedgerError
from core.logging import get_logger, ComponentType
from core.models import ScanReport

logger = get_logger(__name__, ComponentType.RESOLVER)

T = TypeVar("T")


@dataclass
class ReadOutcome(Generic[T]):
    """Result of one item read."""
    item_id: int
    value: Optional[T] = None
    error: Optional[LedgerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fan_out(
    item_ids: Iterable[int],
    read: Callable[[int], Awaitable[T]],
    max_concurrent: int,
) -> List[ReadOutcome[T]]:
    """
    Run `read(item_id)` for every id concurrently, at most `max_concurrent` at once.

    Args:
        item_ids: Ids to read
        read: Coroutine function for one id
        max_concurrent: In-flight limit

    Returns:
        ReadOutcome per id, in input order
    """
    # Semaphore created per call so it binds to the running loop
    semaphore = asyncio.Semaphore(max(1, max_concurrent))

    async def run_one(item_id: int) -> ReadOutcome[T]:
        async with semaphore:
            try:
                return ReadOutcome(item_id=item_id, value=await read(item_id))
            except LedgerError as e:
                return ReadOutcome(item_id=item_id, error=e)

    return list(await asyncio.gather(*[run_one(item_id) for item_id in item_ids]))


def finish_report(report: ScanReport, what: str) -> ScanReport:
    """Log the outcome of a best-effort scan, warning past the skip threshold."""
    if report.threshold_exceeded:
        logger.warning(
            f"{what}: skipped {report.skipped}/{report.attempted} reads "
            f"({report.skip_ratio:.0%}), result is a partial snapshot",
            extra={"skipped_ids": report.skipped_ids[:50]},
        )
    elif report.skipped:
        logger.info(f"{what}: skipped {report.skipped}/{report.attempted} reads")
    else:
        logger.debug(f"{what}: {report.matched} matched of {report.attempted} read")
    return report


__all__ = ["ReadOutcome", "fan_out", "finish_report"]
