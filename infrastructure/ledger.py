# ============================================================================
# CONTRACT GATEWAY
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Infrastructure - Single seam for every ledger read and write
# PURPOSE: Typed contract access with classified failures
# CREATED: 19 OCT 2026
# ============================================================================
"""
Contract Gateway

All ledger traffic goes through ContractGateway. The rest of the core sees
typed methods and the exceptions in core.errors, never web3 objects or RPC
error payloads.

Reads:
    read(function_name, *args) - eth_call, no signer needed
Writes:
    write(function_name, *args, value_wei=0)
        authorize (signer) -> build (gas estimate) -> submit -> await receipt

A write blocks until the receipt exists. There is no confirmation timeout
here; callers that need one cancel the awaiting task. The gateway never
retries a submission: retrying after an ambiguous failure without first
re-reading chain state can double-submit, and that decision belongs to the
caller.

Failure classification (classify_ledger_error):
    EIP-1193 code 4001 / "user rejected" / "user denied" -> UserRejectedError
    "insufficient funds"                                -> InsufficientFundsError
    connection / timeout errors                         -> NetworkUnavailableError
    revert, failed receipt, anything else               -> ContractRevertedError
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TransactionNotFound

from core.config import LedgerDefaults, get_defaults
from core.errors import (
    ConfigurationError,
    ContractRevertedError,
    InsufficientFundsError,
    LedgerError,
    NetworkUnavailableError,
    UserRejectedError,
)
from core.logging import get_logger, ComponentType
from core.models import NewLandProject, SessionDescriptor, TokenInfo, TransactionReceipt
from core.models.project import LAND_INFO_FIELDS
from infrastructure.abi import LAND_TOKENIZATION_ABI
from infrastructure.signer import Signer, WriteRequest

logger = get_logger(__name__, ComponentType.LEDGER)


# ============================================================================
# ERROR CLASSIFICATION
# ============================================================================

USER_REJECTED_CODE = 4001

_REJECTION_MARKERS = ("user rejected", "user denied", "rejected by user", "action_rejected")
_FUNDS_MARKERS = ("insufficient funds", "insufficient balance")
_NETWORK_MARKERS = (
    "connection refused",
    "cannot connect",
    "could not connect",
    "connection error",
    "connection reset",
    "name or service not known",
    "network is unreachable",
)


def _rpc_error_code(exc: BaseException) -> Optional[int]:
    """Dig the JSON-RPC error code out of whatever shape web3 raised."""
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return code

    payload = getattr(exc, "rpc_response", None)
    if payload is None and exc.args and isinstance(exc.args[0], Mapping):
        payload = exc.args[0]
    if isinstance(payload, Mapping):
        error = payload.get("error", payload)
        if isinstance(error, Mapping) and isinstance(error.get("code"), int):
            return error["code"]
    return None


def classify_ledger_error(exc: BaseException) -> LedgerError:
    """
    Map any exception raised while talking to the ledger onto the taxonomy.

    Args:
        exc: The raw exception

    Returns:
        A LedgerError subclass instance with `cause` set
    """
    if isinstance(exc, LedgerError):
        return exc

    message = str(exc)
    lowered = message.lower()

    if _rpc_error_code(exc) == USER_REJECTED_CODE or any(m in lowered for m in _REJECTION_MARKERS):
        return UserRejectedError(message, cause=exc)

    if any(m in lowered for m in _FUNDS_MARKERS):
        return InsufficientFundsError(message, cause=exc)

    if isinstance(exc, ContractLogicError):
        reason = getattr(exc, "message", None) or message
        return ContractRevertedError(reason, cause=exc)

    if isinstance(exc, (OSError, asyncio.TimeoutError)) or any(
        m in lowered for m in _NETWORK_MARKERS
    ):
        return NetworkUnavailableError(message or type(exc).__name__, cause=exc)

    return ContractRevertedError(message or type(exc).__name__, cause=exc)


# ============================================================================
# GATEWAY
# ============================================================================

class ContractGateway:
    """
    Typed access to the LandTokenization contract.

    Usage:
        gateway = ContractGateway.from_defaults(signer=LocalAccountSigner(key))
        count = await gateway.project_count()
        receipt = await gateway.mint_batch(land_id=1, count=50)
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        contract_address: Optional[str] = None,
        signer: Optional[Signer] = None,
        abi: Optional[list] = None,
        contract: Any = None,
        defaults: Optional[LedgerDefaults] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the gateway.

        Args:
            w3: AsyncWeb3 instance bound to the network
            contract_address: LandTokenization address (defaults to config)
            signer: Signing identity; required for writes only
            abi: Contract ABI override (full compiler artifact)
            contract: Pre-built contract object (tests)
            defaults: Ledger configuration
            sleep: Suspension used while polling for receipts
        """
        self.w3 = w3
        self.defaults = defaults or get_defaults().ledger
        self.signer = signer
        self._sleep = sleep

        if contract is None:
            address = contract_address or self.defaults.contract_address
            if not address:
                raise ConfigurationError(
                    "Contract address is required (set LEDGER_CONTRACT_ADDRESS)"
                )
            contract = w3.eth.contract(
                address=AsyncWeb3.to_checksum_address(address),
                abi=abi or LAND_TOKENIZATION_ABI,
            )
        self.contract = contract

    @classmethod
    def from_defaults(
        cls,
        signer: Optional[Signer] = None,
        defaults: Optional[LedgerDefaults] = None,
    ) -> "ContractGateway":
        """Build a gateway over HTTP using configured RPC URL and address."""
        defaults = defaults or get_defaults().ledger
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(defaults.rpc_url))
        return cls(w3, signer=signer, defaults=defaults)

    def with_signer(self, signer: Optional[Signer]) -> "ContractGateway":
        """Same network and contract, different signing identity (session change)."""
        return ContractGateway(
            self.w3,
            signer=signer,
            contract=self.contract,
            defaults=self.defaults,
            sleep=self._sleep,
        )

    # ========================================================================
    # GENERIC READ / WRITE
    # ========================================================================

    async def read(self, function_name: str, *args: Any) -> Any:
        """
        Execute a read-only contract call.

        Raises:
            NetworkUnavailableError if no provider is reachable
            ContractRevertedError if the call reverts (e.g. unknown token id)
        """
        try:
            return await getattr(self.contract.functions, function_name)(*args).call()
        except Exception as e:
            raise classify_ledger_error(e) from e

    async def write(
        self,
        function_name: str,
        *args: Any,
        value_wei: int = 0,
    ) -> TransactionReceipt:
        """
        Execute a state-changing call and wait for confirmation.

        Args:
            function_name: Contract function
            *args: Positional contract arguments
            value_wei: Payment attached to the call

        Returns:
            Confirmed TransactionReceipt

        Raises:
            ConfigurationError if no signer is attached
            UserRejectedError, InsufficientFundsError, ContractRevertedError,
            NetworkUnavailableError
        """
        if self.signer is None:
            raise ConfigurationError(f"{function_name} requires a signer")

        request = WriteRequest(function_name=function_name, args=tuple(args), value_wei=value_wei)
        try:
            await self.signer.authorize(request)
            call = getattr(self.contract.functions, function_name)(*args)
            tx = await call.build_transaction({"from": self.signer.address, "value": value_wei})
            tx_hash = await self.signer.send_transaction(self.w3, tx)
        except Exception as e:
            error = classify_ledger_error(e)
            logger.warning(f"{request.describe()} not submitted: {error.kind.value}: {error}")
            raise error from e

        logger.info(f"Submitted {request.describe()}", extra={"tx_hash": _hex(tx_hash)})
        receipt = await self._wait_for_receipt(tx_hash)

        if receipt.status == 0:
            logger.warning(f"{request.describe()} reverted in block {receipt.block_number}")
            raise ContractRevertedError(f"{function_name} reverted (tx {receipt.tx_hash})")

        logger.debug(f"Confirmed {function_name} in block {receipt.block_number}")
        return receipt

    async def _wait_for_receipt(self, tx_hash: Any) -> TransactionReceipt:
        """Poll until the receipt exists. Cancelling the caller stops polling."""
        while True:
            try:
                raw = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                raw = None
            except Exception as e:
                raise classify_ledger_error(e) from e

            if raw is not None:
                return TransactionReceipt.from_web3(raw)
            await self._sleep(self.defaults.receipt_poll_interval)

    # ========================================================================
    # TYPED READS
    # ========================================================================

    async def owner_address(self) -> str:
        return await self.read("owner")

    async def project_count(self) -> int:
        return int(await self.read("landCounter"))

    async def project_info(self, land_id: int) -> Dict[str, Any]:
        """getLandInfo as a dict keyed by ABI field name."""
        record = await self.read("getLandInfo", land_id)
        if isinstance(record, Mapping):
            return dict(record)
        return dict(zip(LAND_INFO_FIELDS, record))

    async def minted_count(self, land_id: int) -> int:
        return int(await self.read("getPlotsMinted", land_id))

    async def total_minted_tokens(self) -> int:
        return int(await self.read("totalSupply"))

    async def token_info(self, token_id: int) -> TokenInfo:
        return TokenInfo.from_ledger(token_id, await self.read("getPlotInfo", token_id))

    async def token_owner(self, token_id: int) -> str:
        return await self.read("ownerOf", token_id)

    async def resale_price(self, token_id: int) -> int:
        return int(await self.read("getResalePrice", token_id))

    async def is_primary_sale_eligible(self, token_id: int) -> bool:
        return bool(await self.read("isAvailableForPrimarySale", token_id))

    async def is_project_on_hold(self, land_id: int) -> bool:
        return bool(await self.read("isProjectOnHold", land_id))

    async def chain_id(self) -> int:
        try:
            return int(await self.w3.eth.chain_id)
        except Exception as e:
            raise classify_ledger_error(e) from e

    async def describe_session(self, account: Optional[str]) -> SessionDescriptor:
        """Build a fresh SessionDescriptor for `account` from live reads."""
        chain_id = await self.chain_id()
        owner = await self.owner_address()
        return SessionDescriptor(account=account or None, chain_id=chain_id, contract_owner=owner)

    # ========================================================================
    # TYPED WRITES
    # ========================================================================

    async def buy(self, token_id: int, value_wei: int) -> TransactionReceipt:
        return await self.write("buyPlot", token_id, value_wei=value_wei)

    async def buy_resale(self, token_id: int, value_wei: int) -> TransactionReceipt:
        return await self.write("buyResale", token_id, value_wei=value_wei)

    async def list_for_sale(self, token_id: int, price_wei: int) -> TransactionReceipt:
        return await self.write("listForSale", token_id, price_wei)

    async def unlist(self, token_id: int) -> TransactionReceipt:
        return await self.write("unlistFromSale", token_id)

    async def mint_one(self, land_id: int) -> TransactionReceipt:
        return await self.write("mintPlot", land_id)

    async def mint_batch(self, land_id: int, count: int) -> TransactionReceipt:
        return await self.write("batchMintPlots", land_id, count)

    async def create_project(self, project: NewLandProject) -> TransactionReceipt:
        return await self.write("createLandProject", *project.to_contract_args())

    async def deactivate_project(self, land_id: int) -> TransactionReceipt:
        return await self.write("deactivateLandProject", land_id)

    async def hold_project(self, land_id: int) -> TransactionReceipt:
        return await self.write("holdProject", land_id)

    async def unhold_project(self, land_id: int) -> TransactionReceipt:
        return await self.write("unholdProject", land_id)

    async def delete_project(self, land_id: int) -> TransactionReceipt:
        return await self.write("deleteProject", land_id)


def _hex(value: Any) -> str:
    if hasattr(value, "to_0x_hex"):
        return value.to_0x_hex()
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


__all__ = [
    "ContractGateway",
    "classify_ledger_error",
    "USER_REJECTED_CODE",
]
