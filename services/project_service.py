# ============================================================================
# PROJECT AGGREGATOR
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Service - Land project read model
# PURPOSE: Full project list with live minted counters, hold flags, stats
# CREATED: 19 OCT 2026
# ============================================================================
"""
Project Service

Builds LandProject read models from live ledger reads:
- list_all: every project id 1..landCounter, concurrently, in id order
- get: one project
- list_with_hold_status: list_all + isProjectOnHold per project
- stats: platform-wide counters

Project ids are contiguous (the ledger assigns them sequentially), so a
failed per-id read is a transient problem, not a missing record. That id is
logged and dropped; the ScanReport says so. A failed counter read fails the
whole call.
"""

import asyncio
from typing import Optional

from pydantic import ValidationError

from core.config import ScanDefaults, get_defaults
from core.errors import ContractRevertedError
from core.logging import get_logger, log_context, ComponentType
from core.models import LandProject, MarketplaceStats, ScanReport, ScanResult
from services.reads import fan_out, finish_report

logger = get_logger(__name__, ComponentType.SERVICE)


class ProjectService:
    """Service for land project aggregation."""

    def __init__(self, gateway, defaults: Optional[ScanDefaults] = None):
        """
        Initialize project service.

        Args:
            gateway: ContractGateway (or anything with the same typed reads)
            defaults: Scan configuration
        """
        self.gateway = gateway
        self.defaults = defaults or get_defaults().scan

    async def get(self, land_id: int, include_hold: bool = False) -> LandProject:
        """
        Read one project with its live minted counter.

        Raises:
            LedgerError if any read fails
        """
        if include_hold:
            record, minted, on_hold = await asyncio.gather(
                self.gateway.project_info(land_id),
                self.gateway.minted_count(land_id),
                self.gateway.is_project_on_hold(land_id),
            )
        else:
            record, minted = await asyncio.gather(
                self.gateway.project_info(land_id),
                self.gateway.minted_count(land_id),
            )
            on_hold = None

        # Deleted projects read back as a zeroed struct
        if not int(record.get("landId", 0)):
            raise ContractRevertedError(f"Project {land_id} does not exist")
        try:
            return LandProject.from_ledger(record, plots_minted=minted, on_hold=on_hold)
        except ValidationError as e:
            raise ContractRevertedError(f"Malformed record for project {land_id}: {e}") from e

    async def list_all(self, include_hold: bool = False) -> ScanResult[LandProject]:
        """
        Read every project, best effort.

        Returns:
            ScanResult with projects in id order and the skip report

        Raises:
            LedgerError if the project counter cannot be read
        """
        with log_context(operation="list_projects"):
            count = await self.gateway.project_count()
            land_ids = range(1, count + 1)

            outcomes = await fan_out(
                land_ids,
                lambda land_id: self.get(land_id, include_hold=include_hold),
                self.defaults.max_concurrent_reads,
            )

            report = ScanReport(attempted=count, warning_ratio=self.defaults.skip_warning_ratio)
            projects = []
            for outcome in outcomes:
                if outcome.ok:
                    projects.append(outcome.value)
                else:
                    logger.warning(
                        f"Dropping project {outcome.item_id}: "
                        f"{outcome.error.kind.value}: {outcome.error}"
                    )
                    report.record_skip(outcome.item_id)
            report.matched = len(projects)

            finish_report(report, "list_projects")
            return ScanResult[LandProject](items=projects, report=report)

    async def list_with_hold_status(self) -> ScanResult[LandProject]:
        """Every project with its hold flag populated (owner management view)."""
        return await self.list_all(include_hold=True)

    async def stats(self) -> MarketplaceStats:
        """
        Platform-wide counters.

        total_projects counts readable projects only; deleted or unreadable
        ids behind the project counter are left out.

        plots_sold counts tokens no longer eligible for primary sale; tokens
        whose flag cannot be read are left out of that count.
        """
        with log_context(operation="marketplace_stats"):
            projects, total = await asyncio.gather(
                self.list_all(),
                self.gateway.total_minted_tokens(),
            )
            outcomes = await fan_out(
                range(1, total + 1),
                self.gateway.is_primary_sale_eligible,
                self.defaults.max_concurrent_reads,
            )
            report = ScanReport(attempted=total, warning_ratio=self.defaults.skip_warning_ratio)
            sold = 0
            for outcome in outcomes:
                if not outcome.ok:
                    report.record_skip(outcome.item_id)
                elif not outcome.value:
                    sold += 1
            report.matched = total - report.skipped
            finish_report(report, "marketplace_stats")

            return MarketplaceStats(
                total_projects=len(projects.items),
                total_plots=total,
                plots_sold=sold,
            )


__all__ = ["ProjectService"]
