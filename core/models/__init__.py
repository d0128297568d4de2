# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All Pydantic models for the plot marketplace core. Ledger amounts are
integer wei on every model; see core.units for display conversion.
"""

from core.models.project import LandProject, NewLandProject, MarketplaceStats
from core.models.plot import (
    TokenInfo,
    PlotToken,
    OwnedPlotProjection,
    classify_plot,
    same_address,
)
from core.models.scan import ScanReport, ScanResult, status_counts
from core.models.session import SessionDescriptor, describe_network
from core.models.transaction import TransactionReceipt, OperationResult, BatchMintResult

__all__ = [
    # Project
    "LandProject",
    "NewLandProject",
    "MarketplaceStats",
    # Plot
    "TokenInfo",
    "PlotToken",
    "OwnedPlotProjection",
    "classify_plot",
    "same_address",
    # Scan
    "ScanReport",
    "ScanResult",
    "status_counts",
    # Session
    "SessionDescriptor",
    "describe_network",
    # Transactions
    "TransactionReceipt",
    "OperationResult",
    "BatchMintResult",
]
