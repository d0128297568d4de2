# ============================================================================
# PORTFOLIO RESOLVER
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Service - Per-user owned plots read model
# PURPOSE: Find every token an address owns, enrich with project and listing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Portfolio Resolver

Two phases:
    1. ownership scan: ownerOf for every token id 1..totalSupply
    2. enrichment, only for matches: getPlotInfo + getResalePrice per token,
       project name read once per distinct project

Like the plot resolver this costs O(tokens minted platform-wide) whatever
the user actually owns. Per-token failures in either phase skip that token
and are counted in the report.

An absent address (wallet not connected) returns an empty result without
touching the ledger.
"""

import asyncio
from typing import Dict, List, Optional

from core.config import ScanDefaults, get_defaults
from core.logging import get_logger, log_context, ComponentType
from core.models import OwnedPlotProjection, ScanReport, ScanResult, same_address
from services.reads import fan_out, finish_report

logger = get_logger(__name__, ComponentType.RESOLVER)


class PortfolioResolver:
    """Resolves the plots owned by one address."""

    def __init__(self, gateway, defaults: Optional[ScanDefaults] = None):
        self.gateway = gateway
        self.defaults = defaults or get_defaults().scan

    async def _project_names(self, land_ids: List[int]) -> Dict[int, str]:
        outcomes = await fan_out(
            land_ids, self.gateway.project_info, self.defaults.max_concurrent_reads
        )
        names = {}
        for outcome in outcomes:
            if outcome.ok:
                names[outcome.item_id] = outcome.value.get("landName", "")
            else:
                logger.warning(f"Cannot read project {outcome.item_id}: {outcome.error}")
        return names

    async def resolve_owned_plots(
        self, owner_address: Optional[str]
    ) -> ScanResult[OwnedPlotProjection]:
        """
        Resolve every plot `owner_address` owns right now.

        Returns:
            ScanResult ordered by token id

        Raises:
            LedgerError if the total minted counter cannot be read
        """
        report = ScanReport(warning_ratio=self.defaults.skip_warning_ratio)
        if not owner_address:
            return ScanResult[OwnedPlotProjection](report=report)

        with log_context(operation="resolve_owned_plots", account=owner_address):
            total = await self.gateway.total_minted_tokens()
            report.attempted = total

            # Phase 1: ownership scan
            owners = await fan_out(
                range(1, total + 1), self.gateway.token_owner, self.defaults.max_concurrent_reads
            )
            owned_ids = []
            for outcome in owners:
                if not outcome.ok:
                    report.record_skip(outcome.item_id)
                elif same_address(outcome.value, owner_address):
                    owned_ids.append(outcome.item_id)

            # Phase 2: enrichment
            async def enrich(token_id: int):
                return await asyncio.gather(
                    self.gateway.token_info(token_id),
                    self.gateway.resale_price(token_id),
                )

            details = await fan_out(owned_ids, enrich, self.defaults.max_concurrent_reads)
            land_ids = sorted({d.value[0].land_id for d in details if d.ok})
            names = await self._project_names(land_ids)

            plots = []
            for outcome in details:
                if not outcome.ok:
                    report.record_skip(outcome.item_id)
                    continue
                info, resale_price_wei = outcome.value
                if info.land_id not in names:
                    report.record_skip(outcome.item_id)
                    continue
                plots.append(
                    OwnedPlotProjection(
                        token_id=info.token_id,
                        land_id=info.land_id,
                        plot_number=info.plot_number,
                        project_name=names[info.land_id],
                        mint_price_wei=info.mint_price_wei,
                        resale_price_wei=resale_price_wei,
                    )
                )

            plots.sort(key=lambda plot: plot.token_id)
            report.matched = len(plots)
            finish_report(report, "resolve_owned_plots")
            return ScanResult[OwnedPlotProjection](items=plots, report=report)


__all__ = ["PortfolioResolver"]
