# ============================================================================
# TEST FIXTURES - IN-MEMORY LEDGER
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Tests - Shared fixtures
# PURPOSE: In-memory stand-in for ContractGateway with failure injection
# CREATED: 19 OCT 2026
# ============================================================================
"""
Shared fixtures.

FakeLedger implements the ContractGateway typed read/write surface over
plain dicts, so services and the orchestrator run against real ledger
semantics (shared token counter, primary inventory held by the contract
owner, zeroed records for deleted projects) without a node.

Failure injection:
    ledger.fail_read("token_owner", 7)              one id, every call
    ledger.script_writes(None, UserRejectedError())  per-write outcomes, in order
"""

import asyncio
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

import pytest

from core.config import reset_defaults
from core.errors import ContractRevertedError, LedgerError
from core.models import NewLandProject, TokenInfo, TransactionReceipt
from core.models.project import LAND_INFO_FIELDS

OWNER = "0x00000000000000000000000000000000000000Aa"
BUYER = "0x00000000000000000000000000000000000000Bb"
OTHER = "0x00000000000000000000000000000000000000Cc"


class FakeLedger:
    """In-memory ledger with the ContractGateway typed surface."""

    def __init__(self, contract_owner: str = OWNER, account: str = BUYER, chain: int = 31337):
        self.contract_owner = contract_owner
        self.account = account
        self.chain = chain

        self.projects: Dict[int, Dict[str, Any]] = {}
        self.minted: Dict[int, int] = {}
        self.on_hold: Dict[int, bool] = {}
        self.tokens: Dict[int, Dict[str, Any]] = {}

        self.writes: List[Tuple[str, tuple]] = []
        self.read_calls: Counter = Counter()
        self._read_failures: Dict[Tuple[str, Optional[int]], LedgerError] = {}
        self._write_script: List[Optional[LedgerError]] = []
        self._block = 0

        self.in_flight = 0
        self.max_in_flight = 0

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def add_project(
        self,
        name: str = "Green Acres",
        num_plots: int = 10,
        base_price_wei: int = 10**17,
        active: bool = True,
        on_hold: bool = False,
    ) -> int:
        land_id = len(self.projects) + 1
        self.projects[land_id] = {
            "landId": land_id,
            "landName": name,
            "totalArea": num_plots * 100,
            "plotSize": 100,
            "numPlots": num_plots,
            "imageHash": "",
            "description": "",
            "contactNumber": "",
            "location": "Somewhere",
            "basePrice": base_price_wei,
            "active": active,
        }
        self.minted[land_id] = 0
        self.on_hold[land_id] = on_hold
        return land_id

    def add_token(
        self,
        land_id: int,
        owner: Optional[str] = None,
        resale_price_wei: int = 0,
        eligible: Optional[bool] = None,
    ) -> int:
        token_id = len(self.tokens) + 1
        self.minted[land_id] += 1
        owner = owner or self.contract_owner
        self.tokens[token_id] = {
            "landId": land_id,
            "plotNumber": self.minted[land_id],
            "price": self.projects[land_id]["basePrice"],
            "isFirstSale": True,
            "owner": owner,
            "resale": resale_price_wei,
            "eligible": (owner == self.contract_owner) if eligible is None else eligible,
        }
        return token_id

    def fail_read(self, method: str, item_id: Optional[int] = None, error: Optional[LedgerError] = None):
        self._read_failures[(method, item_id)] = error or ContractRevertedError(
            f"{method}({item_id}) reverted"
        )

    def script_writes(self, *outcomes: Optional[LedgerError]) -> None:
        """Outcome per upcoming write: None confirms, an exception fails it."""
        self._write_script.extend(outcomes)

    def writes_named(self, name: str) -> List[tuple]:
        return [args for fn, args in self.writes if fn == name]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _read(self, method: str, item_id: Optional[int] = None) -> None:
        self.read_calls[method] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
        finally:
            self.in_flight -= 1
        error = self._read_failures.get((method, item_id)) or self._read_failures.get((method, None))
        if error is not None:
            raise error

    async def owner_address(self) -> str:
        await self._read("owner_address")
        return self.contract_owner

    async def project_count(self) -> int:
        await self._read("project_count")
        return len(self.projects)

    async def project_info(self, land_id: int) -> Dict[str, Any]:
        await self._read("project_info", land_id)
        if land_id not in self.projects:
            raise ContractRevertedError(f"Land {land_id} does not exist")
        return dict(self.projects[land_id])

    async def minted_count(self, land_id: int) -> int:
        await self._read("minted_count", land_id)
        return self.minted.get(land_id, 0)

    async def total_minted_tokens(self) -> int:
        await self._read("total_minted_tokens")
        return len(self.tokens)

    def _token(self, token_id: int) -> Dict[str, Any]:
        if token_id not in self.tokens:
            raise ContractRevertedError(f"Token {token_id} does not exist")
        return self.tokens[token_id]

    async def token_info(self, token_id: int) -> TokenInfo:
        await self._read("token_info", token_id)
        token = self._token(token_id)
        return TokenInfo.from_ledger(
            token_id,
            (token["landId"], token["plotNumber"], token["price"], token["isFirstSale"]),
        )

    async def token_owner(self, token_id: int) -> str:
        await self._read("token_owner", token_id)
        return self._token(token_id)["owner"]

    async def resale_price(self, token_id: int) -> int:
        await self._read("resale_price", token_id)
        return self._token(token_id)["resale"]

    async def is_primary_sale_eligible(self, token_id: int) -> bool:
        await self._read("is_primary_sale_eligible", token_id)
        return self._token(token_id)["eligible"]

    async def is_project_on_hold(self, land_id: int) -> bool:
        await self._read("is_project_on_hold", land_id)
        return self.on_hold.get(land_id, False)

    async def chain_id(self) -> int:
        await self._read("chain_id")
        return self.chain

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _write(self, name: str, *args: Any) -> TransactionReceipt:
        self.writes.append((name, args))
        await asyncio.sleep(0)
        if self._write_script:
            error = self._write_script.pop(0)
            if error is not None:
                raise error
        self._block += 1
        return TransactionReceipt(tx_hash=f"0x{self._block:064x}", block_number=self._block)

    def _mint(self, land_id: int, count: int) -> None:
        for _ in range(count):
            self.add_token(land_id)

    async def buy(self, token_id: int, value_wei: int) -> TransactionReceipt:
        receipt = await self._write("buy", token_id, value_wei)
        self.tokens[token_id].update(owner=self.account, eligible=False, isFirstSale=False)
        return receipt

    async def buy_resale(self, token_id: int, value_wei: int) -> TransactionReceipt:
        receipt = await self._write("buy_resale", token_id, value_wei)
        self.tokens[token_id].update(owner=self.account, resale=0)
        return receipt

    async def list_for_sale(self, token_id: int, price_wei: int) -> TransactionReceipt:
        receipt = await self._write("list_for_sale", token_id, price_wei)
        self.tokens[token_id]["resale"] = price_wei
        return receipt

    async def unlist(self, token_id: int) -> TransactionReceipt:
        receipt = await self._write("unlist", token_id)
        self.tokens[token_id]["resale"] = 0
        return receipt

    async def mint_one(self, land_id: int) -> TransactionReceipt:
        receipt = await self._write("mint_one", land_id)
        self._mint(land_id, 1)
        return receipt

    async def mint_batch(self, land_id: int, count: int) -> TransactionReceipt:
        receipt = await self._write("mint_batch", land_id, count)
        self._mint(land_id, count)
        return receipt

    async def create_project(self, project: NewLandProject) -> TransactionReceipt:
        receipt = await self._write("create_project", project)
        land_id = self.add_project(
            name=project.name,
            num_plots=project.expected_plots,
            base_price_wei=project.base_price_wei,
        )
        self.projects[land_id]["imageHash"] = project.image_ref
        return receipt

    async def deactivate_project(self, land_id: int) -> TransactionReceipt:
        receipt = await self._write("deactivate_project", land_id)
        self.projects[land_id]["active"] = False
        return receipt

    async def hold_project(self, land_id: int) -> TransactionReceipt:
        receipt = await self._write("hold_project", land_id)
        self.on_hold[land_id] = True
        return receipt

    async def unhold_project(self, land_id: int) -> TransactionReceipt:
        receipt = await self._write("unhold_project", land_id)
        self.on_hold[land_id] = False
        return receipt

    async def delete_project(self, land_id: int) -> TransactionReceipt:
        receipt = await self._write("delete_project", land_id)
        self.projects[land_id] = {field: 0 for field in LAND_INFO_FIELDS}
        return receipt


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_defaults():
    """Config is read from the environment once per test."""
    reset_defaults()
    yield
    reset_defaults()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
