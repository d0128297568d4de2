# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core - Read-model layer
# PURPOSE: Project, plot, and portfolio resolution; write pre-flight guards
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Read models built fresh from the ledger on every call.
Services depend only on the gateway's typed reads.

Usage:
    from services import ProjectService, PlotStatusResolver

    projects = await ProjectService(gateway).list_all()
    plots = await PlotStatusResolver(gateway).resolve_project_plots(1, 10, owner)
"""

from .project_service import ProjectService
from .plot_service import PlotStatusResolver
from .portfolio_service import PortfolioResolver
from .preflight import PreflightResult, TransactionPreflight

__all__ = [
    "ProjectService",
    "PlotStatusResolver",
    "PortfolioResolver",
    "PreflightResult",
    "TransactionPreflight",
]
