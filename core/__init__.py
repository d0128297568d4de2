# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and errors
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import PlotStatus, FailureKind, OperationOutcome, MintMode
from core.errors import (
    LandLedgerError,
    LedgerError,
    UserRejectedError,
    InsufficientFundsError,
    ContractRevertedError,
    NetworkUnavailableError,
    PreflightRejectedError,
)
from core.models import (
    LandProject,
    NewLandProject,
    PlotToken,
    OwnedPlotProjection,
    SessionDescriptor,
    OperationResult,
    BatchMintResult,
    ScanReport,
)

__all__ = [
    # Enums
    "PlotStatus",
    "FailureKind",
    "OperationOutcome",
    "MintMode",
    # Errors
    "LandLedgerError",
    "LedgerError",
    "UserRejectedError",
    "InsufficientFundsError",
    "ContractRevertedError",
    "NetworkUnavailableError",
    "PreflightRejectedError",
    # Models
    "LandProject",
    "NewLandProject",
    "PlotToken",
    "OwnedPlotProjection",
    "SessionDescriptor",
    "OperationResult",
    "BatchMintResult",
    "ScanReport",
]
