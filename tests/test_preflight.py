# ============================================================================
# PRE-FLIGHT VALIDATION TESTS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Tests - Pre-flight validator
# PURPOSE: Verify client-side guards with a mocked gateway
# CREATED: 19 OCT 2026
# ============================================================================
"""
Pre-flight Validation Tests

Unit tests with a mocked gateway (AsyncMock reads).
Tests the delete guard (fails closed), the mint guard (fails open), and
the parameter checks for listing and payment.

Run with:
    pytest tests/test_preflight.py -v
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from core.errors import NetworkUnavailableError, PreflightRejectedError
from services.preflight import PreflightResult, TransactionPreflight


# ============================================================================
# HELPERS
# ============================================================================

def _make_preflight(minted=0, num_plots=10, active=True, read_error=None):
    """
    Create a TransactionPreflight over a mocked gateway.

    Args:
        minted: What minted_count() returns.
        num_plots: Capacity in the project record.
        active: Active flag in the project record.
        read_error: If set, both reads raise this exception.
    """
    gateway = MagicMock()
    if read_error:
        gateway.minted_count = AsyncMock(side_effect=read_error)
        gateway.project_info = AsyncMock(side_effect=read_error)
    else:
        gateway.minted_count = AsyncMock(return_value=minted)
        gateway.project_info = AsyncMock(
            return_value={"landId": 1, "numPlots": num_plots, "active": active}
        )
    return TransactionPreflight(gateway)


# ============================================================================
# PREFLIGHT RESULT
# ============================================================================

class TestPreflightResult:
    """Tests for the PreflightResult value object."""

    def test_valid_result(self):
        result = PreflightResult(valid=True)
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []
        result.raise_for_errors()

    def test_invalid_result_raises_with_all_reasons(self):
        result = PreflightResult(valid=False, errors=["first", "second"])
        with pytest.raises(PreflightRejectedError) as exc_info:
            result.raise_for_errors()
        assert exc_info.value.reasons == ["first", "second"]


# ============================================================================
# DELETE GUARD
# ============================================================================

class TestCheckDelete:
    """A project with minted plots cannot be deleted."""

    def test_nothing_minted(self):
        preflight = _make_preflight(minted=0)
        result = asyncio.run(preflight.check_delete(1))
        assert result.valid is True
        preflight.gateway.minted_count.assert_awaited_once_with(1)

    def test_minted_plots_refused(self):
        result = asyncio.run(_make_preflight(minted=3).check_delete(1))
        assert result.valid is False
        assert "Cannot delete project 1 with minted plots (3 minted)" in result.errors

    def test_read_failure_fails_closed(self):
        preflight = _make_preflight(read_error=NetworkUnavailableError("down"))
        result = asyncio.run(preflight.check_delete(1))
        assert result.valid is False
        assert any("Cannot verify" in e for e in result.errors)


# ============================================================================
# MINT GUARD
# ============================================================================

class TestCheckMint:

    def test_within_capacity(self):
        result = asyncio.run(_make_preflight(minted=4, num_plots=10).check_mint(1, 6))
        assert result.valid is True

    def test_over_capacity(self):
        result = asyncio.run(_make_preflight(minted=4, num_plots=10).check_mint(1, 7))
        assert result.valid is False
        assert any("room for 6" in e for e in result.errors)

    def test_inactive_and_full_both_reported(self):
        """All errors collected, not just the first."""
        result = asyncio.run(
            _make_preflight(minted=10, num_plots=10, active=False).check_mint(1, 1)
        )
        assert result.valid is False
        assert len(result.errors) == 2

    def test_non_positive_count_needs_no_reads(self):
        preflight = _make_preflight()
        result = asyncio.run(preflight.check_mint(1, 0))
        assert result.valid is False
        preflight.gateway.project_info.assert_not_awaited()

    def test_invalid_project_id(self):
        result = asyncio.run(_make_preflight().check_mint(0, 5))
        assert result.valid is False
        assert any("Invalid project id" in e for e in result.errors)

    def test_read_failure_fails_open(self):
        preflight = _make_preflight(read_error=NetworkUnavailableError("down"))
        result = asyncio.run(preflight.check_mint(1, 5))
        assert result.valid is True
        assert len(result.warnings) == 1


# ============================================================================
# PARAMETER CHECKS
# ============================================================================

class TestParameterChecks:

    def test_listing_price_must_be_positive(self):
        preflight = _make_preflight()
        assert preflight.check_listing(1).valid is True
        assert preflight.check_listing(0).valid is False

    def test_payment_cannot_be_negative(self):
        preflight = _make_preflight()
        assert preflight.check_payment(0).valid is True
        assert preflight.check_payment(-1).valid is False
