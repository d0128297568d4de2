# ============================================================================
# SCAN ACCOUNTING
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core model - Best-effort read bookkeeping
# PURPOSE: Make skipped per-item reads visible instead of silently dropped
# CREATED: 19 OCT 2026
# ============================================================================
"""
Scan Accounting

Aggregations drop individual items whose reads fail (token not minted yet,
transient provider error). A ScanReport travels with every best-effort
result so callers and tests can tell a complete snapshot from a partial one.
"""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, computed_field

from core.contracts import PlotStatus

T = TypeVar("T")


class ScanReport(BaseModel):
    """Counts for one best-effort scan."""

    attempted: int = Field(default=0, ge=0)
    matched: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    skipped_ids: List[int] = Field(default_factory=list)
    warning_ratio: float = Field(default=0.1, ge=0.0, le=1.0)

    @computed_field
    @property
    def skip_ratio(self) -> float:
        if self.attempted == 0:
            return 0.0
        return self.skipped / self.attempted

    @computed_field
    @property
    def threshold_exceeded(self) -> bool:
        """True when enough reads were skipped to warrant a warning."""
        return self.skipped > 0 and self.skip_ratio >= self.warning_ratio

    @property
    def complete(self) -> bool:
        return self.skipped == 0

    def record_skip(self, item_id: int) -> None:
        self.skipped += 1
        self.skipped_ids.append(item_id)


class ScanResult(BaseModel, Generic[T]):
    """Items plus the report describing how they were gathered."""

    items: List[T] = Field(default_factory=list)
    report: ScanReport = Field(default_factory=ScanReport)

    @property
    def count(self) -> int:
        return len(self.items)


def status_counts(plots) -> dict:
    """Per-status counts for a resolved plot list (all statuses present)."""
    counts = {status: 0 for status in PlotStatus}
    for plot in plots:
        counts[plot.status] += 1
    return counts


__all__ = ["ScanReport", "ScanResult", "status_counts"]
