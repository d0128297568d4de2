# ============================================================================
# PLOT STATUS RESOLVER
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Service - Project-scoped plot read model
# PURPOSE: Scan minted tokens, classify each plot of one project
# CREATED: 19 OCT 2026
# ============================================================================
"""
Plot Status Resolver

Tokens of every project share one ledger-wide counter, and the ledger has
no project -> tokens index. Resolving one project therefore means:

    1. read totalSupply (scan upper bound)
    2. for token ids 1..total read getPlotInfo, keep those whose landId matches
    3. for each match read ownerOf, getResalePrice, isAvailableForPrimarySale
       and classify (core.models.plot.classify_plot)
    4. skip ids whose reads fail (not minted yet / transient), count them
    5. sort by plot number

Cost is O(tokens minted across the whole platform) per call, not
O(plots in this project). That is the scalability ceiling of the ledger's
read surface; a reverse index would need event subscriptions, which this
core does not maintain.

Nothing is cached: every call reflects the ledger at read time.
"""

import asyncio
from typing import Dict, Optional

from core.config import ScanDefaults, get_defaults
from core.contracts import PlotStatus
from core.logging import get_logger, log_context, ComponentType
from core.models import PlotToken, ScanReport, ScanResult, TokenInfo, classify_plot, status_counts
from services.reads import fan_out, finish_report

logger = get_logger(__name__, ComponentType.RESOLVER)


class PlotStatusResolver:
    """Classifies every minted plot of a project."""

    def __init__(self, gateway, defaults: Optional[ScanDefaults] = None):
        """
        Args:
            gateway: ContractGateway (or anything with the same typed reads)
            defaults: Scan configuration
        """
        self.gateway = gateway
        self.defaults = defaults or get_defaults().scan

    async def _classify(self, info: TokenInfo, contract_owner: str) -> PlotToken:
        owner, resale_price_wei, eligible = await asyncio.gather(
            self.gateway.token_owner(info.token_id),
            self.gateway.resale_price(info.token_id),
            self.gateway.is_primary_sale_eligible(info.token_id),
        )
        return PlotToken(
            token_id=info.token_id,
            land_id=info.land_id,
            plot_number=info.plot_number,
            mint_price_wei=info.mint_price_wei,
            owner=owner,
            resale_price_wei=resale_price_wei,
            status=classify_plot(eligible, owner, resale_price_wei, contract_owner),
        )

    async def resolve_plot(self, token_id: int, contract_owner: str) -> PlotToken:
        """
        Re-read and classify a single token.

        Raises:
            LedgerError if any read fails
        """
        info = await self.gateway.token_info(token_id)
        return await self._classify(info, contract_owner)

    async def resolve_project_plots(
        self,
        land_id: int,
        expected_capacity: int,
        contract_owner: str,
    ) -> ScanResult[PlotToken]:
        """
        Resolve the plot read model for one project.

        Args:
            land_id: Project to resolve
            expected_capacity: The project's num_plots; <= 0 returns nothing
            contract_owner: Platform owner account (holds primary inventory)

        Returns:
            ScanResult of PlotToken sorted by plot_number, with skip report

        Raises:
            LedgerError if the total minted counter cannot be read
        """
        with log_context(operation="resolve_project_plots", land_id=land_id):
            if expected_capacity <= 0:
                return ScanResult[PlotToken](
                    report=ScanReport(warning_ratio=self.defaults.skip_warning_ratio)
                )

            total = await self.gateway.total_minted_tokens()

            async def inspect(token_id: int) -> Optional[PlotToken]:
                info = await self.gateway.token_info(token_id)
                if info.land_id != land_id:
                    return None
                return await self._classify(info, contract_owner)

            outcomes = await fan_out(
                range(1, total + 1), inspect, self.defaults.max_concurrent_reads
            )

            report = ScanReport(attempted=total, warning_ratio=self.defaults.skip_warning_ratio)
            plots = []
            for outcome in outcomes:
                if not outcome.ok:
                    logger.debug(
                        f"Skipping token {outcome.item_id}: {outcome.error.kind.value}"
                    )
                    report.record_skip(outcome.item_id)
                elif outcome.value is not None:
                    plots.append(outcome.value)

            plots.sort(key=lambda plot: plot.plot_number)
            report.matched = len(plots)

            if len(plots) > expected_capacity:
                logger.warning(
                    f"Project {land_id} has {len(plots)} tokens but capacity {expected_capacity}"
                )

            finish_report(report, f"resolve_project_plots(land={land_id})")
            return ScanResult[PlotToken](items=plots, report=report)

    @staticmethod
    def summarize(plots) -> Dict[PlotStatus, int]:
        """Per-status counts; the values sum to the number of plots."""
        return status_counts(plots)


__all__ = ["PlotStatusResolver"]
