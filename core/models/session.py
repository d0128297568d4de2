# ============================================================================
# SESSION DESCRIPTOR
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core model - Wallet/session state as an immutable value
# PURPOSE: Pass account, network, and owner identity explicitly to every call
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Session Descriptor

Wallet state (connected account, chain, platform owner) is a frozen value.
When the wallet reports an account or network change the caller builds a
new descriptor; anything resolved under the old one is stale and must be
re-resolved on next use.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, computed_field

from core.models.plot import same_address


NETWORK_NAMES: Dict[int, str] = {
    1: "Ethereum Mainnet",
    5: "Goerli Testnet",
    11155111: "Sepolia Testnet",
    137: "Polygon Mainnet",
    80001: "Polygon Mumbai",
    31337: "Localhost",
    1337: "Ganache",
    555666: "Eclipse Testnet",
}


def describe_network(chain_id: Optional[int]) -> str:
    """Human-readable network name for a chain id."""
    if chain_id is None:
        return "Not connected"
    return NETWORK_NAMES.get(chain_id, f"Chain ID: {chain_id}")


class SessionDescriptor(BaseModel):
    """
    Immutable snapshot of the wallet session.

    Example:
        session = SessionDescriptor(account="0xabc...", chain_id=31337)
        session = session.with_account("0xdef...")   # new value, old one untouched
    """

    account: Optional[str] = Field(default=None, description="Current signing address")
    chain_id: Optional[int] = Field(default=None)
    contract_owner: Optional[str] = Field(default=None, description="Platform owner account")

    model_config = {"frozen": True}

    @computed_field
    @property
    def is_connected(self) -> bool:
        return bool(self.account)

    @computed_field
    @property
    def is_owner(self) -> bool:
        return same_address(self.account, self.contract_owner)

    @computed_field
    @property
    def network_name(self) -> str:
        return describe_network(self.chain_id)

    def with_account(self, account: Optional[str]) -> "SessionDescriptor":
        """Copy with a different account (wallet accountsChanged)."""
        return self.model_copy(update={"account": account or None})

    def with_chain(self, chain_id: Optional[int]) -> "SessionDescriptor":
        """Copy with a different chain (wallet chainChanged)."""
        return self.model_copy(update={"chain_id": chain_id})

    def with_owner(self, contract_owner: Optional[str]) -> "SessionDescriptor":
        return self.model_copy(update={"contract_owner": contract_owner})

    def is_same_context(self, other: "SessionDescriptor") -> bool:
        """
        True if read models resolved under `other` are still valid here.

        Account and chain both matter: a chain switch points at a different
        ledger entirely.
        """
        if self.chain_id != other.chain_id:
            return False
        if not self.account and not other.account:
            return True
        return same_address(self.account, other.account)


__all__ = ["SessionDescriptor", "describe_network", "NETWORK_NAMES"]
