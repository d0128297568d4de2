# ============================================================================
# VERSION - PLOT MARKETPLACE CORE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# ============================================================================
"""
Version information for the plot marketplace core.

This is the single source of truth for the package version.
Updated manually for each release.
"""
# Version format: major.minor.patch
# Criteria for 0.2 - event-driven plot index replaces the full token scan
__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

BUILD_DATE = "2026-10-19"

EPOCH = 1
CODENAME = "Plot Marketplace Core"
