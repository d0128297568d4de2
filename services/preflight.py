# ============================================================================
# PRE-FLIGHT VALIDATION
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Service - Client-side guards before ledger writes
# PURPOSE: Refuse predictable reverts without spending a transaction
# CREATED: 19 OCT 2026
# ============================================================================
"""
Pre-flight Validation

Two-stage validation:
  Stage 1 (this module): before submission, reads only. Catches the
    common, predictable reverts (deleting a project with minted plots,
    minting into an inactive or full project, listing at price zero)
    BEFORE asking the user to sign anything.

  Stage 2 (the ledger): authoritative. Everything stage 1 lets through can
    still revert, and the orchestrator handles that as ContractReverted.

Design:
  - PreflightResult collects ALL errors (not fail-fast on first)
  - Guards that depend on a read: the delete guard fails closed (no read,
    no delete); the mint guard fails open with a warning (the ledger
    enforces capacity anyway)
"""

from dataclasses import dataclass, field
from typing import List

from core.errors import LedgerError, PreflightRejectedError
from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.SERVICE)


# ============================================================================
# RESULT
# ============================================================================

@dataclass
class PreflightResult:
    """
    Result of pre-flight validation.

    Collects all errors, reporting every problem at once rather than
    failing on the first and making the caller fix them one at a time.
    """
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def raise_for_errors(self) -> None:
        """Raise PreflightRejectedError if any guard failed."""
        if not self.valid:
            raise PreflightRejectedError(self.errors)


def _result(errors: List[str], warnings: List[str]) -> PreflightResult:
    return PreflightResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


# ============================================================================
# VALIDATOR
# ============================================================================

class TransactionPreflight:
    """
    Pre-flight guards for orchestrated writes.

    All checks are cheap: parameter validation and a couple of ledger reads.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    async def check_delete(self, land_id: int) -> PreflightResult:
        """
        A project may only be deleted while nothing is minted.

        Fails closed: if the minted counter cannot be read, refuse.
        """
        errors: List[str] = []
        try:
            minted = await self.gateway.minted_count(land_id)
        except LedgerError as e:
            errors.append(f"Cannot verify minted plots for project {land_id}: {e}")
        else:
            if minted > 0:
                errors.append(
                    f"Cannot delete project {land_id} with minted plots ({minted} minted)"
                )
        return _result(errors, [])

    async def check_mint(self, land_id: int, count: int) -> PreflightResult:
        """
        Mint count must be positive; the project must be active with room left.

        Fails open on read errors (warning only).
        """
        errors: List[str] = []
        warnings: List[str] = []

        if land_id < 1:
            errors.append(f"Invalid project id {land_id}")
        if count <= 0:
            errors.append(f"Mint count must be positive, got {count}")
        if errors:
            return _result(errors, warnings)

        try:
            record = await self.gateway.project_info(land_id)
            minted = await self.gateway.minted_count(land_id)
        except LedgerError as e:
            warnings.append(f"Project {land_id} not readable, capacity unchecked: {e}")
            logger.warning(warnings[-1])
            return _result(errors, warnings)

        if not record.get("active", True):
            errors.append(f"Project {land_id} is not active")

        num_plots = int(record.get("numPlots", 0))
        remaining = num_plots - int(minted)
        if count > remaining:
            errors.append(
                f"Project {land_id} has room for {max(remaining, 0)} more plot(s), "
                f"requested {count}"
            )

        return _result(errors, warnings)

    def check_listing(self, price_wei: int) -> PreflightResult:
        """A listing price of zero would read back as 'not listed'."""
        errors = []
        if price_wei <= 0:
            errors.append("Listing price must be greater than zero")
        return _result(errors, [])

    def check_payment(self, value_wei: int) -> PreflightResult:
        errors = []
        if value_wei < 0:
            errors.append("Payment cannot be negative")
        return _result(errors, [])


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PreflightResult",
    "TransactionPreflight",
]
