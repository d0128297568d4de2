# ============================================================================
# SIGNING IDENTITY
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Infrastructure - Wallet capability for ledger writes
# PURPOSE: Authorize and submit transactions on behalf of the session account
# CREATED: 19 OCT 2026
# ============================================================================
"""
Signing Identity

The wallet is an external collaborator. The core only needs three things
from it: the current signing address, a way to ask the user to authorize a
write, and a way to submit the authorized transaction.

Two concrete signers:
- LocalAccountSigner: holds a private key, signs locally, submits raw tx
- NodeAccountSigner: the node (or an EIP-1193 bridge) manages the key;
  the user's wallet prompt happens there and a decline comes back as
  RPC error 4001

Both accept an optional `approve` coroutine, called before anything is
built or sent. Returning False is a user rejection.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from eth_account import Account
from web3 import AsyncWeb3

from core.errors import UserRejectedError
from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.LEDGER)


@dataclass(frozen=True)
class WriteRequest:
    """What the signer is being asked to authorize."""
    function_name: str
    args: Tuple[Any, ...] = field(default_factory=tuple)
    value_wei: int = 0

    def describe(self) -> str:
        args = ", ".join(str(a) for a in self.args)
        value = f" value={self.value_wei} wei" if self.value_wei else ""
        return f"{self.function_name}({args}){value}"


ApprovalCallback = Callable[[WriteRequest], Awaitable[bool]]


class Signer(ABC):
    """Base signer: address + authorization + submission."""

    def __init__(self, approve: Optional[ApprovalCallback] = None):
        self._approve = approve

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed signing address."""
        ...

    async def authorize(self, request: WriteRequest) -> None:
        """
        Ask the user to authorize a write.

        Raises:
            UserRejectedError if the approval callback declines
        """
        if self._approve is None:
            return
        approved = await self._approve(request)
        if not approved:
            logger.info(f"Write declined by signer: {request.describe()}")
            raise UserRejectedError(f"Signer declined {request.function_name}")

    @abstractmethod
    async def send_transaction(self, w3: AsyncWeb3, tx: Dict[str, Any]) -> bytes:
        """Submit a built transaction, returning its hash."""
        ...


class LocalAccountSigner(Signer):
    """Signs with a locally held private key."""

    def __init__(self, private_key: str, approve: Optional[ApprovalCallback] = None):
        super().__init__(approve)
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    async def send_transaction(self, w3: AsyncWeb3, tx: Dict[str, Any]) -> bytes:
        tx = dict(tx)
        if "nonce" not in tx:
            tx["nonce"] = await w3.eth.get_transaction_count(self.address, "pending")
        signed = self._account.sign_transaction(tx)
        return await w3.eth.send_raw_transaction(signed.raw_transaction)


class NodeAccountSigner(Signer):
    """Delegates signing to the node's managed account (eth_sendTransaction)."""

    def __init__(self, address: str, approve: Optional[ApprovalCallback] = None):
        super().__init__(approve)
        self._address = AsyncWeb3.to_checksum_address(address)

    @property
    def address(self) -> str:
        return self._address

    async def send_transaction(self, w3: AsyncWeb3, tx: Dict[str, Any]) -> bytes:
        return await w3.eth.send_transaction(tx)


__all__ = [
    "WriteRequest",
    "ApprovalCallback",
    "Signer",
    "LocalAccountSigner",
    "NodeAccountSigner",
]
