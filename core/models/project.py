# ============================================================================
# LAND PROJECT MODELS
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Domain model - Tokenization campaign for a tract of land
# PURPOSE: Project read model, create-project input, marketplace stats
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: LandProject, NewLandProject, MarketplaceStats
# DEPENDENCIES: pydantic
# ============================================================================
"""
Land Project Models

A LandProject is the read model of one ledger project record plus its live
minted counter. The two come from separate reads (the counter can move
between calls), so the aggregator assembles them with `from_ledger()`.

Lifecycle (ledger-enforced):
    create -> mint (plots_minted grows) -> deactivate (active=False)
    hold/unhold toggles a separate flag without touching `active`
    delete only while plots_minted == 0
"""

from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, computed_field, model_validator

from core.contracts import ProjectData


class LandProject(ProjectData):
    """
    One land tokenization project as seen by the ledger right now.

    Maps to: getLandInfo(landId) + getPlotsMinted(landId)
    """

    # Descriptive fields
    name: str = Field(..., description="Project display name")
    location: str = Field(default="")
    total_area: int = Field(..., gt=0, description="Area units")
    plot_size: int = Field(..., gt=0, description="Area units per plot")
    description: str = Field(default="")
    contact_info: str = Field(default="")
    image_ref: str = Field(default="", description="Opaque content ref, may be empty")

    # Capacity
    num_plots: int = Field(..., gt=0, description="Plot capacity")
    plots_minted: int = Field(default=0, ge=0)

    # Pricing (wei)
    base_price_wei: int = Field(default=0, ge=0)

    # Flags
    active: bool = Field(default=True)
    on_hold: Optional[bool] = Field(
        default=None,
        description="Hold flag; None when it was not read",
    )

    @model_validator(mode="after")
    def _check_capacity(self) -> "LandProject":
        if self.plots_minted > self.num_plots:
            raise ValueError(
                f"plots_minted ({self.plots_minted}) exceeds num_plots ({self.num_plots})"
            )
        return self

    @computed_field
    @property
    def remaining_capacity(self) -> int:
        """Plots that can still be minted."""
        return self.num_plots - self.plots_minted

    @computed_field
    @property
    def is_deletable(self) -> bool:
        """True if the ledger would accept deleteProject (nothing minted yet)."""
        return self.plots_minted == 0

    @computed_field
    @property
    def can_mint(self) -> bool:
        """True if the project is active and has capacity left."""
        return self.active and self.remaining_capacity > 0

    @property
    def is_tradeable(self) -> bool:
        """Active and not known to be on hold."""
        return self.active and not self.on_hold

    # ----------------------------------------------------------------
    # Ledger decoding
    # ----------------------------------------------------------------

    @classmethod
    def from_ledger(
        cls,
        record: Union[Mapping[str, Any], Sequence[Any]],
        plots_minted: int,
        on_hold: Optional[bool] = None,
    ) -> "LandProject":
        """
        Build from a getLandInfo() result.

        web3 returns structs as tuples in ABI order:
            (landId, landName, totalArea, plotSize, numPlots, imageHash,
             description, contactNumber, location, basePrice, active)
        Mappings keyed by the ABI field names are accepted too.
        """
        if not isinstance(record, Mapping):
            record = dict(zip(LAND_INFO_FIELDS, record))
        return cls(
            land_id=int(record["landId"]),
            name=record["landName"],
            total_area=int(record["totalArea"]),
            plot_size=int(record["plotSize"]),
            num_plots=int(record["numPlots"]),
            image_ref=record.get("imageHash") or "",
            description=record.get("description") or "",
            contact_info=record.get("contactNumber") or "",
            location=record.get("location") or "",
            base_price_wei=int(record["basePrice"]),
            active=bool(record["active"]),
            plots_minted=int(plots_minted),
            on_hold=on_hold,
        )


LAND_INFO_FIELDS = (
    "landId",
    "landName",
    "totalArea",
    "plotSize",
    "numPlots",
    "imageHash",
    "description",
    "contactNumber",
    "location",
    "basePrice",
    "active",
)


class NewLandProject(BaseModel):
    """
    Input for the owner-only createLandProject transaction.

    Capacity is not supplied: the ledger derives numPlots from
    total_area / plot_size.
    """

    name: str = Field(..., min_length=1)
    total_area: int = Field(..., gt=0)
    plot_size: int = Field(..., gt=0)
    base_price_wei: int = Field(..., ge=0)
    location: str = Field(default="")
    description: str = Field(default="")
    contact_info: str = Field(default="")
    image_ref: str = Field(default="")

    @model_validator(mode="after")
    def _check_area(self) -> "NewLandProject":
        if self.plot_size > self.total_area:
            raise ValueError("plot_size cannot exceed total_area")
        return self

    @computed_field
    @property
    def expected_plots(self) -> int:
        """Capacity the ledger is expected to assign."""
        return self.total_area // self.plot_size

    def to_contract_args(self) -> tuple:
        """Positional arguments for createLandProject, in ABI order."""
        return (
            self.name,
            self.total_area,
            self.plot_size,
            self.image_ref,
            self.description,
            self.contact_info,
            self.location,
            self.base_price_wei,
        )


class MarketplaceStats(BaseModel):
    """Platform-wide counters for dashboards."""

    total_projects: int = Field(default=0, ge=0)
    total_plots: int = Field(default=0, ge=0, description="Ledger-wide minted tokens")
    plots_sold: int = Field(default=0, ge=0, description="Tokens no longer primary-sale eligible")

    @computed_field
    @property
    def plots_available(self) -> int:
        return self.total_plots - self.plots_sold


__all__ = ["LandProject", "NewLandProject", "MarketplaceStats", "LAND_INFO_FIELDS"]
