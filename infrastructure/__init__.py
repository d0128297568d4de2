# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Infrastructure - Ledger, signer, and off-chain storage adapters
# PURPOSE: Everything that talks to something outside the process
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the plot marketplace core.

Provides:
- ContractGateway: typed ledger reads/writes with classified failures
- Signer, LocalAccountSigner, NodeAccountSigner: signing identities
- PinningClient: IPFS pinning for project images

Usage:
    from infrastructure import ContractGateway, LocalAccountSigner

    gateway = ContractGateway.from_defaults(signer=LocalAccountSigner(key))
    total = await gateway.total_minted_tokens()
"""

from infrastructure.ledger import ContractGateway, classify_ledger_error
from infrastructure.signer import (
    WriteRequest,
    Signer,
    LocalAccountSigner,
    NodeAccountSigner,
)
from infrastructure.pinning import PinningClient, validate_image, resolve_content_ref

__all__ = [
    # Ledger
    "ContractGateway",
    "classify_ledger_error",
    # Signing
    "WriteRequest",
    "Signer",
    "LocalAccountSigner",
    "NodeAccountSigner",
    # Off-chain storage
    "PinningClient",
    "validate_image",
    "resolve_content_ref",
]
