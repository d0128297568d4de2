# ============================================================================
# TRANSACTION RESULT MODELS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core model - Outcomes of orchestrated writes
# PURPOSE: Tell the caller exactly whether (and how much) ledger state changed
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TransactionReceipt, OperationResult, BatchMintResult
# DEPENDENCIES: pydantic
# ============================================================================
"""
Transaction Result Models

Every orchestrated write resolves to one of:
    full success | partial success with counts | clean no-op failure | rejected

OperationResult covers single writes; BatchMintResult covers the chunked
and sequential mint paths where partial success is an expected terminal
state.
"""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, computed_field

from core.contracts import FailureKind, MintMode, OperationOutcome


class TransactionReceipt(BaseModel):
    """Confirmed transaction, trimmed to what callers use."""

    tx_hash: str = Field(...)
    block_number: Optional[int] = Field(default=None)
    gas_used: Optional[int] = Field(default=None)
    status: int = Field(default=1, description="1 = success, 0 = reverted")

    @classmethod
    def from_web3(cls, receipt: Mapping[str, Any]) -> "TransactionReceipt":
        tx_hash = receipt.get("transactionHash")
        if hasattr(tx_hash, "to_0x_hex"):
            tx_hash = tx_hash.to_0x_hex()
        elif isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = "0x" + bytes(tx_hash).hex()
        return cls(
            tx_hash=str(tx_hash),
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
            status=int(receipt.get("status", 1)),
        )


class OperationResult(BaseModel):
    """Outcome of a single orchestrated write."""

    operation: str = Field(..., description="e.g. buy_plot, list_for_sale")
    outcome: OperationOutcome = Field(...)
    message: str = Field(default="")
    failure: Optional[FailureKind] = Field(default=None)
    receipt: Optional[TransactionReceipt] = Field(default=None)
    reasons: List[str] = Field(default_factory=list, description="Pre-flight reasons")

    @computed_field
    @property
    def succeeded(self) -> bool:
        return self.outcome == OperationOutcome.SUCCESS

    @computed_field
    @property
    def state_changed(self) -> bool:
        return self.outcome.changed_state()


class BatchMintResult(BaseModel):
    """
    Outcome of a multi-plot mint.

    `chunk_sizes` lists the sizes of the transactions actually submitted, in
    order (one entry per submission, whether it confirmed or not).
    """

    land_id: int = Field(...)
    mode: MintMode = Field(...)
    requested: int = Field(..., ge=0)
    succeeded: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    chunk_sizes: List[int] = Field(default_factory=list)
    receipts: List[TransactionReceipt] = Field(default_factory=list)
    stopped_by: Optional[FailureKind] = Field(
        default=None,
        description="Set when the sequence halted early",
    )
    failures: List[FailureKind] = Field(default_factory=list)
    reasons: List[str] = Field(default_factory=list, description="Pre-flight reasons")

    @computed_field
    @property
    def submitted_transactions(self) -> int:
        return len(self.chunk_sizes)

    @computed_field
    @property
    def outcome(self) -> OperationOutcome:
        if self.stopped_by == FailureKind.PREFLIGHT_REJECTED:
            return OperationOutcome.PREFLIGHT_REJECTED
        if self.requested > 0 and self.succeeded == self.requested:
            return OperationOutcome.SUCCESS
        if self.succeeded > 0:
            return OperationOutcome.PARTIAL
        if self.stopped_by == FailureKind.USER_REJECTED:
            return OperationOutcome.REJECTED
        if self.failures and all(f == FailureKind.INSUFFICIENT_FUNDS for f in self.failures):
            return OperationOutcome.INSUFFICIENT_FUNDS
        return OperationOutcome.FAILED

    @property
    def not_attempted(self) -> int:
        """Plots never submitted because the sequence stopped early."""
        return max(0, self.requested - self.succeeded - self.failed)

    def summary(self) -> str:
        """One-line caller-facing summary."""
        parts = [f"Minted {self.succeeded}/{self.requested} plot(s)"]
        if self.failed:
            parts.append(f"{self.failed} failed")
        if self.stopped_by == FailureKind.USER_REJECTED:
            parts.append("stopped: transaction rejected")
        elif self.stopped_by == FailureKind.PREFLIGHT_REJECTED:
            parts.append("refused: " + "; ".join(self.reasons))
        return ", ".join(parts)


__all__ = ["TransactionReceipt", "OperationResult", "BatchMintResult"]
