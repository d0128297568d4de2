# ============================================================================
# PLOT TOKEN MODELS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Domain model - Minted plot NFTs and their derived status
# PURPOSE: Token facts, classified plot read model, per-user projection
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TokenInfo, PlotToken, OwnedPlotProjection, classify_plot
# DEPENDENCIES: pydantic
# ============================================================================
"""
Plot Token Models

Status is never stored. It is a pure function of three facts that are read
independently and can change between any two reads:

    primary_sale_eligible   isAvailableForPrimarySale(tokenId)
    owner                   ownerOf(tokenId)
    resale_price_wei        getResalePrice(tokenId)

    available  iff eligible AND owner == contract owner
    listed     iff resale price > 0 (and not available)
    sold       otherwise

`available` wins over `listed` when a token is both eligible and listed.
"""

from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, computed_field

from core.contracts import PlotStatus, TokenData


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive address equality; None never matches."""
    if not a or not b:
        return False
    return a.lower() == b.lower()


def classify_plot(
    primary_sale_eligible: bool,
    owner: str,
    resale_price_wei: int,
    contract_owner: str,
) -> PlotStatus:
    """
    Classify a token from its three underlying facts.

    Args:
        primary_sale_eligible: Ledger flag for unsold primary inventory
        owner: Current token owner
        resale_price_wei: 0 when not listed
        contract_owner: Platform treasury / owner account

    Returns:
        PlotStatus
    """
    if primary_sale_eligible and same_address(owner, contract_owner):
        return PlotStatus.AVAILABLE
    if resale_price_wei > 0:
        return PlotStatus.LISTED
    return PlotStatus.SOLD


class TokenInfo(TokenData):
    """
    Decoded getPlotInfo(tokenId) result.

    ABI order: (landId, plotNumber, price, isFirstSale)
    """

    plot_number: int = Field(..., ge=1)
    mint_price_wei: int = Field(default=0, ge=0)
    first_sale: bool = Field(default=True)

    @classmethod
    def from_ledger(
        cls,
        token_id: int,
        record: Union[Mapping[str, Any], Sequence[Any]],
    ) -> "TokenInfo":
        if not isinstance(record, Mapping):
            record = dict(zip(("landId", "plotNumber", "price", "isFirstSale"), record))
        return cls(
            token_id=token_id,
            land_id=int(record["landId"]),
            plot_number=int(record["plotNumber"]),
            mint_price_wei=int(record["price"]),
            first_sale=bool(record.get("isFirstSale", True)),
        )


class PlotToken(TokenData):
    """
    One minted plot with its status at read time.

    Built fresh on every resolution; never cached.
    """

    plot_number: int = Field(..., ge=1, description="1-based index within the project")
    mint_price_wei: int = Field(default=0, ge=0, description="Immutable once minted")
    owner: str = Field(..., description="Current owner address")
    resale_price_wei: int = Field(default=0, ge=0, description="0 means not listed")
    status: PlotStatus = Field(...)

    @computed_field
    @property
    def is_listed(self) -> bool:
        return self.resale_price_wei > 0

    @property
    def purchase_price_wei(self) -> int:
        """What a buyer pays right now: mint price on primary, resale price when listed."""
        if self.status == PlotStatus.LISTED:
            return self.resale_price_wei
        return self.mint_price_wei

    @property
    def is_resale(self) -> bool:
        return self.status == PlotStatus.LISTED


class OwnedPlotProjection(TokenData):
    """
    Portfolio row: a token the user owns plus its project's name.

    No identity beyond token_id.
    """

    plot_number: int = Field(..., ge=1)
    project_name: str = Field(default="")
    mint_price_wei: int = Field(default=0, ge=0)
    resale_price_wei: int = Field(default=0, ge=0)

    @computed_field
    @property
    def is_listed(self) -> bool:
        return self.resale_price_wei > 0


__all__ = [
    "TokenInfo",
    "PlotToken",
    "OwnedPlotProjection",
    "classify_plot",
    "same_address",
]
