# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Foundation - Exception hierarchy
# PURPOSE: Classified failures for ledger reads, writes, and pre-flight guards
# CREATED: 19 OCT 2026
# ============================================================================
"""
Error Taxonomy

LandLedgerError
├── LedgerError                 (anything that crossed the gateway)
│   ├── UserRejectedError
│   ├── InsufficientFundsError
│   ├── ContractRevertedError
│   └── NetworkUnavailableError
├── PreflightRejectedError      (client-side guard, nothing submitted)
├── ConfigurationError
├── PinningError
└── ImageValidationError
"""

from typing import List, Optional

from core.contracts import FailureKind


class LandLedgerError(Exception):
    """Base exception for all plot marketplace errors."""


class LedgerError(LandLedgerError):
    """Raised when a ledger read or write fails."""

    kind: FailureKind = FailureKind.CONTRACT_REVERTED

    def __init__(self, message: str = "", cause: Optional[BaseException] = None):
        super().__init__(message or self.kind.value)
        self.cause = cause


class UserRejectedError(LedgerError):
    """Raised when the signer declines to authorize a write."""

    kind = FailureKind.USER_REJECTED


class InsufficientFundsError(LedgerError):
    """Raised when the signing account cannot cover value plus fees."""

    kind = FailureKind.INSUFFICIENT_FUNDS


class ContractRevertedError(LedgerError):
    """Raised when the ledger rejects a call (revert, failed receipt, unknown error)."""

    kind = FailureKind.CONTRACT_REVERTED


class NetworkUnavailableError(LedgerError):
    """Raised when no provider or network is reachable."""

    kind = FailureKind.NETWORK_UNAVAILABLE


class PreflightRejectedError(LandLedgerError):
    """Raised when a client-side guard refuses to submit a transaction."""

    kind = FailureKind.PREFLIGHT_REJECTED

    def __init__(self, reasons: List[str]):
        super().__init__("; ".join(reasons) or "pre-flight check failed")
        self.reasons = list(reasons)


class ConfigurationError(LandLedgerError):
    """Raised when configuration is invalid or missing."""


class PinningError(LandLedgerError):
    """Raised when the off-chain image store rejects an upload."""


class ImageValidationError(LandLedgerError):
    """Raised when an image is too large or not a supported type."""


__all__ = [
    "LandLedgerError",
    "LedgerError",
    "UserRejectedError",
    "InsufficientFundsError",
    "ContractRevertedError",
    "NetworkUnavailableError",
    "PreflightRejectedError",
    "ConfigurationError",
    "PinningError",
    "ImageValidationError",
]
