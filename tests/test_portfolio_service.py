# ============================================================================
# PORTFOLIO RESOLVER TESTS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Tests - Per-user owned plots
# PURPOSE: Verify ownership scan, enrichment, and skip accounting
# CREATED: 19 OCT 2026
# ============================================================================
"""
Portfolio Resolver Tests

Runs against the in-memory FakeLedger (tests/conftest.py).

Run with:
    pytest tests/test_portfolio_service.py -v
"""

import asyncio
import pytest

from core.errors import NetworkUnavailableError
from services.portfolio_service import PortfolioResolver

ALICE = "0x00000000000000000000000000000000000000a1"
BOB = "0x00000000000000000000000000000000000000b2"


def _resolve(ledger, owner):
    return asyncio.run(PortfolioResolver(ledger).resolve_owned_plots(owner))


@pytest.fixture
def two_projects(ledger):
    """Alice owns tokens 2 (Alpha) and 3 (Beta, listed); Bob owns 4."""
    alpha = ledger.add_project("Alpha")
    beta = ledger.add_project("Beta")
    ledger.add_token(alpha)
    ledger.add_token(alpha, owner=ALICE)
    ledger.add_token(beta, owner=ALICE, resale_price_wei=700)
    ledger.add_token(beta, owner=BOB)
    return alpha, beta


class TestResolveOwnedPlots:

    def test_only_owned_tokens_returned(self, ledger, two_projects):
        result = _resolve(ledger, ALICE)

        assert [p.token_id for p in result.items] == [2, 3]
        assert [p.project_name for p in result.items] == ["Alpha", "Beta"]
        assert result.items[0].is_listed is False
        assert result.items[1].is_listed is True
        assert result.items[1].resale_price_wei == 700

    def test_address_match_ignores_case(self, ledger, two_projects):
        result = _resolve(ledger, ALICE.upper().replace("0X", "0x"))
        assert result.count == 2

    def test_nothing_owned(self, ledger, two_projects):
        result = _resolve(ledger, "0x00000000000000000000000000000000000000ff")
        assert result.items == []
        assert result.report.complete is True

    def test_no_account_reads_nothing(self, ledger, two_projects):
        result = _resolve(ledger, None)
        assert result.items == []
        assert sum(ledger.read_calls.values()) == 0

    def test_project_names_read_once_per_project(self, ledger):
        land_id = ledger.add_project("Solo")
        for _ in range(5):
            ledger.add_token(land_id, owner=ALICE)

        result = _resolve(ledger, ALICE)

        assert result.count == 5
        assert ledger.read_calls["project_info"] == 1

    def test_owner_read_failure_skips_token(self, ledger, two_projects):
        ledger.fail_read("token_owner", 3, NetworkUnavailableError("flaky"))
        result = _resolve(ledger, ALICE)
        assert [p.token_id for p in result.items] == [2]
        assert result.report.skipped_ids == [3]

    def test_enrichment_failure_skips_token(self, ledger, two_projects):
        ledger.fail_read("resale_price", 2, NetworkUnavailableError("flaky"))
        result = _resolve(ledger, ALICE)
        assert [p.token_id for p in result.items] == [3]
        assert result.report.skipped == 1

    def test_project_name_failure_skips_its_tokens(self, ledger, two_projects):
        alpha, _ = two_projects
        ledger.fail_read("project_info", alpha, NetworkUnavailableError("flaky"))
        result = _resolve(ledger, ALICE)
        assert [p.token_id for p in result.items] == [3]
        assert result.report.skipped_ids == [2]

    def test_total_supply_failure_propagates(self, ledger, two_projects):
        ledger.fail_read("total_minted_tokens", error=NetworkUnavailableError("down"))
        with pytest.raises(NetworkUnavailableError):
            _resolve(ledger, ALICE)
