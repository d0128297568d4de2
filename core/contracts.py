# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Foundation - Core enums and base contracts
# PURPOSE: Define status enums and base data contracts for the plot read model
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: PlotStatus, FailureKind, OperationOutcome, MintMode, ProjectData, TokenData
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the plot marketplace core.

These define the minimal identity fields that cross boundaries:
- Ledger (contract reads and writes)
- Python (read-model aggregation, transaction orchestration)

Boundary-specific models inherit from these contracts.
"""

from enum import Enum
from pydantic import BaseModel, Field


# ============================================================================
# STATUS ENUMS
# ============================================================================

class PlotStatus(str, Enum):
    """
    Derived plot status.

    Not stored on the ledger. Computed on every resolution from three
    independently read facts (primary-sale flag, owner, resale price).

    Transitions:
        AVAILABLE -> SOLD      (primary sale)
        SOLD      -> LISTED    (owner sets resale price)
        LISTED    -> SOLD      (unlisted, or bought on resale)
    """
    AVAILABLE = "available"      # Unsold primary inventory held by the contract owner
    LISTED = "listed"            # Private holder has a non-zero resale price
    SOLD = "sold"                # Everything else

    def is_purchasable(self) -> bool:
        """Check if a buyer can submit a purchase for this status."""
        return self in (PlotStatus.AVAILABLE, PlotStatus.LISTED)


class FailureKind(str, Enum):
    """
    Classification of a failed ledger interaction.

    Every exception that crosses the gateway boundary maps to exactly one kind.
    """
    USER_REJECTED = "user_rejected"              # Signer declined the write
    INSUFFICIENT_FUNDS = "insufficient_funds"    # Cannot cover value + fees
    CONTRACT_REVERTED = "contract_reverted"      # Ledger invariant rejected the call
    NETWORK_UNAVAILABLE = "network_unavailable"  # No reachable provider
    PREFLIGHT_REJECTED = "preflight_rejected"    # Client-side guard, nothing submitted

    def is_retryable(self) -> bool:
        """Check if the caller may reasonably retry the same operation."""
        return self in (FailureKind.CONTRACT_REVERTED, FailureKind.NETWORK_UNAVAILABLE)


class OperationOutcome(str, Enum):
    """
    Terminal outcome of an orchestrated write.

    State transitions are not tracked: an outcome is produced once, when the
    operation returns.
    """
    SUCCESS = "success"                          # Everything requested was confirmed
    PARTIAL = "partial"                          # Some items confirmed, some did not
    REJECTED = "rejected"                        # User withdrew consent, nothing confirmed
    INSUFFICIENT_FUNDS = "insufficient_funds"    # Nothing submitted successfully
    FAILED = "failed"                            # Clean no-op failure, may retry
    PREFLIGHT_REJECTED = "preflight_rejected"    # Refused before any submission

    def changed_state(self) -> bool:
        """Check if the ledger was mutated by the operation."""
        return self in (OperationOutcome.SUCCESS, OperationOutcome.PARTIAL)


class MintMode(str, Enum):
    """How a mint request was submitted to the ledger."""
    SINGLE = "single"            # One mintPlot transaction
    BATCH = "batch"              # One atomic batch transaction (<= chunk limit)
    CHUNKED = "chunked"          # Several sequential batch transactions
    SEQUENTIAL = "sequential"    # Legacy one-plot-per-transaction fallback


# ============================================================================
# BASE DATA CONTRACTS
# ============================================================================

class ProjectData(BaseModel):
    """
    Essential project identity.

    All project-related models should include these fields.
    """
    land_id: int = Field(..., ge=1, description="Ledger-assigned sequential id")

    model_config = {"frozen": False}


class TokenData(BaseModel):
    """
    Essential token identity - a minted plot and its parent project.
    """
    token_id: int = Field(..., ge=1, description="Ledger-wide token id")
    land_id: int = Field(..., ge=1)

    model_config = {"frozen": False}
