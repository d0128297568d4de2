# ============================================================================
# LAND TOKENIZATION CONTRACT ABI
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Infrastructure - Contract interface description
# PURPOSE: The subset of the LandTokenization ABI the core calls
# CREATED: 19 OCT 2026
# ============================================================================
"""
LandTokenization ABI

Only the functions the gateway uses are described. Structs returned by
getLandInfo / getPlotInfo are declared as tuples so web3 decodes them into
positional tuples in ABI order.

Override with a full compiler artifact via ContractGateway(abi=...).
"""

from typing import Any, Dict, List, Sequence, Tuple


def _param(name: str, abi_type: str, components: Sequence[Tuple[str, str]] = ()) -> Dict[str, Any]:
    param: Dict[str, Any] = {"name": name, "type": abi_type, "internalType": abi_type}
    if components:
        param["components"] = [_param(n, t) for n, t in components]
    return param


def _function(
    name: str,
    inputs: Sequence[Tuple[str, str]] = (),
    outputs: Sequence[Dict[str, Any]] = (),
    mutability: str = "view",
) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [_param(n, t) for n, t in inputs],
        "outputs": list(outputs),
        "stateMutability": mutability,
    }


LAND_PROJECT_COMPONENTS = (
    ("landId", "uint256"),
    ("landName", "string"),
    ("totalArea", "uint256"),
    ("plotSize", "uint256"),
    ("numPlots", "uint256"),
    ("imageHash", "string"),
    ("description", "string"),
    ("contactNumber", "string"),
    ("location", "string"),
    ("basePrice", "uint256"),
    ("active", "bool"),
)

PLOT_INFO_COMPONENTS = (
    ("landId", "uint256"),
    ("plotNumber", "uint256"),
    ("price", "uint256"),
    ("isFirstSale", "bool"),
)

_UINT = [_param("", "uint256")]
_BOOL = [_param("", "bool")]
_ADDRESS = [_param("", "address")]


LAND_TOKENIZATION_ABI: List[Dict[str, Any]] = [
    # ---- reads ----
    _function("owner", outputs=_ADDRESS),
    _function("landCounter", outputs=_UINT),
    _function(
        "getLandInfo",
        inputs=[("landId", "uint256")],
        outputs=[_param("", "tuple", LAND_PROJECT_COMPONENTS)],
    ),
    _function("getPlotsMinted", inputs=[("landId", "uint256")], outputs=_UINT),
    _function("totalSupply", outputs=_UINT),
    _function(
        "getPlotInfo",
        inputs=[("tokenId", "uint256")],
        outputs=[_param("", "tuple", PLOT_INFO_COMPONENTS)],
    ),
    _function("ownerOf", inputs=[("tokenId", "uint256")], outputs=_ADDRESS),
    _function("getResalePrice", inputs=[("tokenId", "uint256")], outputs=_UINT),
    _function("isAvailableForPrimarySale", inputs=[("tokenId", "uint256")], outputs=_BOOL),
    _function("isProjectOnHold", inputs=[("landId", "uint256")], outputs=_BOOL),
    # ---- writes ----
    _function("buyPlot", inputs=[("tokenId", "uint256")], mutability="payable"),
    _function("buyResale", inputs=[("tokenId", "uint256")], mutability="payable"),
    _function(
        "listForSale",
        inputs=[("tokenId", "uint256"), ("price", "uint256")],
        mutability="nonpayable",
    ),
    _function("unlistFromSale", inputs=[("tokenId", "uint256")], mutability="nonpayable"),
    _function("mintPlot", inputs=[("landId", "uint256")], mutability="nonpayable"),
    _function(
        "batchMintPlots",
        inputs=[("landId", "uint256"), ("count", "uint256")],
        mutability="nonpayable",
    ),
    _function(
        "createLandProject",
        inputs=[
            ("landName", "string"),
            ("totalArea", "uint256"),
            ("plotSize", "uint256"),
            ("imageHash", "string"),
            ("description", "string"),
            ("contactNumber", "string"),
            ("location", "string"),
            ("basePrice", "uint256"),
        ],
        mutability="nonpayable",
    ),
    _function("deactivateLandProject", inputs=[("landId", "uint256")], mutability="nonpayable"),
    _function("holdProject", inputs=[("landId", "uint256")], mutability="nonpayable"),
    _function("unholdProject", inputs=[("landId", "uint256")], mutability="nonpayable"),
    _function("deleteProject", inputs=[("landId", "uint256")], mutability="nonpayable"),
]


__all__ = ["LAND_TOKENIZATION_ABI", "LAND_PROJECT_COMPONENTS", "PLOT_INFO_COMPONENTS"]
