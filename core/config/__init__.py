# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the plot marketplace core.
"""

from core.config.defaults import (
    MAX_MINT_CHUNK_SIZE,
    LedgerDefaults,
    MintDefaults,
    ScanDefaults,
    PinningDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "MAX_MINT_CHUNK_SIZE",
    "LedgerDefaults",
    "MintDefaults",
    "ScanDefaults",
    "PinningDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
