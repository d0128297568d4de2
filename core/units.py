# ============================================================================
# AMOUNT CONVERSION
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core - Presentation boundary for ledger amounts
# PURPOSE: Convert between integer wei and decimal ether
# CREATED: 19 OCT 2026
# ============================================================================
"""
Amount Conversion

All amounts inside the core are integer wei. Decimal ether only exists at
the edges: parsing user input and formatting for display. Nothing in the
resolvers or the orchestrator compares or aggregates decimal amounts.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from web3 import Web3


def to_wei(ether: Union[str, int, Decimal]) -> int:
    """
    Parse an ether amount into integer wei.

    Args:
        ether: Amount in ether ("0.5", Decimal("0.5"), 2)

    Returns:
        Amount in wei

    Raises:
        ValueError if the amount is not a non-negative number or is finer
        than one wei
    """
    try:
        amount = Decimal(str(ether).strip())
    except InvalidOperation:
        raise ValueError(f"Not a valid ether amount: {ether!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a valid ether amount: {ether!r}")
    if amount < 0:
        raise ValueError(f"Ether amount must be non-negative: {ether!r}")
    _, digits, exponent = amount.as_tuple()
    if exponent < -18 and any(digits[exponent + 18:]):
        raise ValueError(f"Ether amount is finer than one wei: {ether!r}")
    return int(Web3.to_wei(amount, "ether"))


def from_wei(wei: int) -> Decimal:
    """Convert integer wei to a Decimal ether amount."""
    return Decimal(Web3.from_wei(wei, "ether"))


def format_ether(wei: int, symbol: str = "ETH") -> str:
    """Format wei for display, trimming trailing zeros ("0.5 ETH")."""
    amount = from_wei(wei)
    text = format(amount.normalize(), "f") if amount else "0"
    return f"{text} {symbol}" if symbol else text


__all__ = ["to_wei", "from_wei", "format_ether"]
