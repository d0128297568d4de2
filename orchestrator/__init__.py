# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# EPOCH: 1 - PLOT MARKETPLACE CORE
# STATUS: Core - Transaction orchestration
# PURPOSE: Coordinate state-changing ledger operations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Module

Pre-flight, submission and confirmation of ledger writes.

Usage:
    from orchestrator import TransactionOrchestrator

    orchestrator = TransactionOrchestrator(gateway)
    result = await orchestrator.mint_plots(land_id=3, count=120)
"""

from .queue import RateLimitedQueue
from .transactions import TransactionOrchestrator

__all__ = ["RateLimitedQueue", "TransactionOrchestrator"]
